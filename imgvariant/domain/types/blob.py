"""
Descriptor of a stored source file, as seen by transformer capability checks.
"""

from typing import Optional

from pydantic import Field, field_validator

from imgvariant.domain.types.base import BaseInfo
from imgvariant.io.fs import get_file_ext


class BlobInfo(BaseInfo):
    key: Optional[str] = Field(default=None, description="Storage key of the blob")
    filename: Optional[str] = Field(default=None, description="Original file name")
    content_type: Optional[str] = Field(
        default=None, description="MIME type declared for the blob"
    )
    byte_size: Optional[int] = Field(default=None, ge=0, description="Size in bytes")
    checksum: Optional[str] = Field(default=None, description="Content digest")

    @field_validator("content_type")
    def normalize_content_type(cls, v: Optional[str]) -> Optional[str]:
        """Drop parameters and lower-case the MIME type"""
        if v is None:
            return v
        v = v.split(";", 1)[0].strip().lower()
        return v or None

    @property
    def is_image(self) -> bool:
        return self.content_type is not None and self.content_type.startswith("image/")

    @property
    def extension(self) -> str:
        """File extension of the original file name, without the leading dot"""
        if not self.filename:
            return ""
        return get_file_ext(self.filename).lstrip(".").lower()
