"""
Pydantic models for list / search images request.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.query import ImageQuery, normalize_tags
from core.utils.constants import (
    ALLOWED_SORT_FIELDS,
    ALLOWED_SORT_ORDERS,
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    MAX_LIMIT,
    MIN_LIMIT,
)


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ListImagesRequest(BaseModel):
    """
    Validation model for the list images API.

    Query string values arrive as strings and are validated in this order:
    page, limit, sortBy, sortOrder.

    Filters:
    - tags (comma list, match-any) and isPublic → record store
    - search (free text) → in-memory search with relevance
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    # Pagination
    page: int = Field(
        default=DEFAULT_PAGE,
        description="Page number (1-based)",
    )
    limit: int = Field(
        default=DEFAULT_LIMIT,
        description=f"Results per page ({MIN_LIMIT}-{MAX_LIMIT})",
    )

    # Sorting
    sort_by: str = Field(
        default=DEFAULT_SORT_BY,
        description="Sort field",
    )
    sort_order: str = Field(
        default=DEFAULT_SORT_ORDER,
        description="Sort order",
    )

    # Filters
    tags: list[str] | None = Field(None, description="Comma-separated tags (match any)")
    is_public: bool | None = Field(None, description="Visibility filter")
    search: str | None = Field(None, description="Free-text search over title and description")

    @field_validator("page", mode="before")
    @classmethod
    def validate_page(cls, value: Any) -> int:
        page = _parse_int(value)
        if page is None or page < 1:
            raise ValueError("Invalid page number")
        return page

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, value: Any) -> int:
        limit = _parse_int(value)
        if limit is None or limit < MIN_LIMIT or limit > MAX_LIMIT:
            raise ValueError("Invalid limit")
        return limit

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: str) -> str:
        if value not in ALLOWED_SORT_FIELDS:
            raise ValueError("Invalid sort field")
        return value

    @field_validator("sort_order")
    @classmethod
    def validate_sort_order(cls, value: str) -> str:
        if value not in ALLOWED_SORT_ORDERS:
            raise ValueError("Invalid sort order")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str] | None:
        return normalize_tags(value) or None

    @field_validator("is_public", mode="before")
    @classmethod
    def parse_is_public(cls, value: Any) -> bool | None:
        """Any present value other than "true" means private."""
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            return value
        return str(value).strip() == "true"

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, value: str | None) -> str | None:
        return value or None

    def to_query(self) -> ImageQuery:
        """Convert to the service-level query."""
        return ImageQuery(
            page=self.page,
            limit=self.limit,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            tags=self.tags,
            is_public=self.is_public,
            search=self.search,
        )
