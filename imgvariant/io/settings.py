"""
Settings for transformer variants, read from the environment or ``imgvariant.env``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

IMGVARIANT_ENV_FILENAME = "imgvariant.env"

DEFAULT_VARIABLE_CONTENT_TYPES = [
    "image/png",
    "image/gif",
    "image/jpeg",
    "image/pjpeg",
    "image/tiff",
    "image/bmp",
    "image/webp",
    "image/vnd.microsoft.icon",
]


class TransformerSettings(BaseSettings):
    """
    Settings model for transformers via environment variables
    or other settings sources supported by `pydantic-settings`.
    """

    variable_content_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_VARIABLE_CONTENT_TYPES),
        description="Content types the Pillow transformer can produce variants from",
    )
    tmp_dir: Optional[str] = Field(
        default=None, description="Directory for temp files, system default if unset"
    )
    tempfile_prefix: str = Field(default="transformer_", min_length=1)
    default_quality: Optional[int] = Field(
        default=None, ge=1, le=100, description="Encoder quality when no saver options are given"
    )

    model_config = SettingsConfigDict(
        env_prefix="IMGVARIANT_",
        env_file=IMGVARIANT_ENV_FILENAME,
        extra="ignore",
    )

    @field_validator("variable_content_types")
    def lower_content_types(cls, v: List[str]) -> List[str]:
        return [content_type.strip().lower() for content_type in v]


@lru_cache(maxsize=1)
def get_settings() -> TransformerSettings:
    """Return the process-wide settings, loaded once."""
    return TransformerSettings()
