"""Pagination model."""

import math

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel


class PaginationInfo(BaseModel):
    """Page-number pagination metadata for list responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: StrictInt = Field(..., description="Requested page (1-based)")
    total_pages: StrictInt = Field(..., description="ceil(total_items / items_per_page)")
    total_items: StrictInt = Field(..., description="Number of items matching the query")
    items_per_page: StrictInt = Field(..., description="Maximum number of items per page")
    has_next_page: StrictBool = Field(..., description="Whether a later page exists")
    has_prev_page: StrictBool = Field(..., description="Whether an earlier page exists")

    @classmethod
    def from_counts(cls, *, page: int, limit: int, total_items: int) -> "PaginationInfo":
        """
        Build pagination metadata from the page request and match count.

        Example:
            from_counts(page=2, limit=20, total_items=45)
            → current_page=2, total_pages=3, has_next_page=True, has_prev_page=True
        """
        total_pages = math.ceil(total_items / limit) if limit > 0 else 0

        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
