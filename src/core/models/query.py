"""Explicit query and update models for the record store.

Each optional field is validated here before the record store renders it
into a DynamoDB filter or update expression.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from core.utils.constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    MAX_LIMIT,
    MIN_LIMIT,
)


def normalize_tags(value: Any) -> list[str] | None:
    """
    Normalize tags.

    Accepts:
    - comma-separated string
    - list of strings

    Returns:
    - list[str] (blank entries dropped, duplicates removed, order kept) or None
    """
    if value is None:
        return None

    if isinstance(value, str):
        raw_tags = [t.strip() for t in value.split(",")]
    elif isinstance(value, (list, tuple)):
        raw_tags = [str(t).strip() for t in value]
    else:
        raise ValueError("tags must be a string or list of strings")

    return list(dict.fromkeys(t for t in raw_tags if t))


class RecordFilter(BaseModel):
    """Store-level filter: tag match-any and visibility."""

    model_config = ConfigDict(frozen=True)

    tags: list[str] | None = Field(None, description="Match records carrying any of these tags")
    is_public: StrictBool | None = Field(None, description="Match on visibility flag")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str] | None:
        tags = normalize_tags(value)
        return tags or None

    @property
    def is_empty(self) -> bool:
        return self.tags is None and self.is_public is None


class ImageQuery(BaseModel):
    """Listing / search request understood by the gallery service."""

    page: int = Field(DEFAULT_PAGE, ge=1)
    limit: int = Field(DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT)
    sort_by: Literal["createdAt", "updatedAt", "title"] = DEFAULT_SORT_BY
    sort_order: Literal["asc", "desc"] = DEFAULT_SORT_ORDER
    tags: list[str] | None = None
    is_public: StrictBool | None = None
    search: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str] | None:
        tags = normalize_tags(value)
        return tags or None

    @field_validator("search")
    @classmethod
    def validate_search(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    def record_filter(self) -> RecordFilter:
        return RecordFilter(tags=self.tags, is_public=self.is_public)


class RecordPatch(BaseModel):
    """Partial update of an image record.

    Fields left as ``None`` are not touched. ``updated_at`` is always
    written.
    """

    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    is_public: StrictBool | None = None

    asset_url: str | None = None
    format: str | None = None
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    byte_size: int | None = Field(None, ge=0)

    updated_at: str = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        title = value.strip()
        if not title:
            raise ValueError("Title cannot be empty")
        return title

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str] | None:
        return normalize_tags(value)

    def changes(self) -> dict[str, Any]:
        """Return only the attributes that should be written."""
        return self.model_dump(exclude_none=True)
