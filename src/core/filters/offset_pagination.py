"""
Page-number pagination utilities.
"""

from typing import TypeVar

from core.models.pagination import PaginationInfo
from core.utils.constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MIN_LIMIT,
)

T = TypeVar("T")


class OffsetPagination:
    """
    Page-number pagination helper.

    Pages are 1-based; the slice for page ``p`` starts at ``(p - 1) * limit``.

    Typical usage:
    1. Validate page and limit parameters
    2. Slice the ordered list of items
    3. Return the page along with PaginationInfo metadata
    """

    @staticmethod
    def paginate(
        items: list[T],
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> tuple[list[T], PaginationInfo]:
        """
        Paginate an ordered list of items.

        Args:
            items: Full list of items, already filtered and sorted
            page: 1-based page number
            limit: Maximum number of items to include in the page

        Returns:
            A tuple containing:
            - page_items: Items for the requested page (empty past the end)
            - pagination: PaginationInfo computed from len(items)

        Example:
            items = [1, 2, 3, 4, 5]
            page = 2
            limit = 2

            → ([3, 4], PaginationInfo(total_pages=3, has_next_page=True, ...))
        """
        offset = (page - 1) * limit
        page_items = items[offset : offset + limit]

        return page_items, PaginationInfo.from_counts(
            page=page,
            limit=limit,
            total_items=len(items),
        )

    @staticmethod
    def validate(page: int, limit: int) -> tuple[bool, str]:
        """
        Validate pagination parameters.

        Validation rules:
        - page must be a positive integer
        - limit must be within [MIN_LIMIT, MAX_LIMIT]

        Returns:
            A tuple of:
            - is_valid: Whether parameters are valid
            - error_message: Human-readable error message if invalid
        """
        if page < 1:
            return False, "Invalid page number"

        if limit < MIN_LIMIT or limit > MAX_LIMIT:
            return False, "Invalid limit"

        return True, ""
