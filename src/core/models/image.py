"""Shared image record model."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

Item = dict[str, Any]


def _plain(value: Any) -> Any:
    """Convert DynamoDB Decimal values back into Python numbers."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, set):
        return [_plain(v) for v in sorted(value)]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


class ImageRecord(BaseModel):
    """Image metadata record held by the record store.

    Stored with snake_case attribute names and serialized to API clients
    in camelCase (``record_id`` -> ``recordId``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    record_id: StrictStr = Field(..., description="Store-assigned record identifier")
    asset_id: StrictStr = Field(..., description="Media store asset identifier")
    asset_url: StrictStr = Field(..., description="Resolvable URL of the asset")

    title: StrictStr = Field(..., min_length=1, description="Display title")
    description: StrictStr = Field("", description="Optional free text")
    tags: list[StrictStr] = Field(default_factory=list, description="Image tags")

    format: StrictStr = Field(..., description="Image format reported at upload (e.g. png)")
    width: int = Field(..., ge=0, description="Width in pixels")
    height: int = Field(..., ge=0, description="Height in pixels")
    byte_size: int = Field(..., ge=0, description="Asset size in bytes")

    is_public: StrictBool = Field(True, description="Visibility flag")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr = Field(..., description="ISO-8601 last update timestamp (UTC)")

    @classmethod
    def from_item(cls, item: Item) -> "ImageRecord":
        """Build a record from a raw DynamoDB item."""
        return cls.model_validate(_plain(item))

    def to_item(self) -> Item:
        """Return the DynamoDB representation of this record."""
        return self.model_dump()

    def to_api(self) -> Item:
        """Return the camelCase representation exposed by the API."""
        return self.model_dump(by_alias=True)
