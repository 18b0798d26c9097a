from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseInfo(BaseModel):
    """Immutable record describing stored content; serializes with camelCase keys."""

    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Free-form attributes attached by the storage layer"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        alias_generator=to_camel,
        serialize_by_alias=True,
    )
