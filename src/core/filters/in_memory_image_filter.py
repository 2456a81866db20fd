"""
Image filtering service for list and search operations.

Provides a coordination layer that applies text search, sorting and
pagination strategies to in-memory image record collections. This service
does not perform data access and is intended to operate on records already
narrowed by the record store (tags, visibility).
"""

from aws_lambda_powertools import Logger

from core.filters.offset_pagination import OffsetPagination
from core.filters.text_search_filter import TextSearchFilter
from core.models.errors import FilterError
from core.models.gallery import ImagePage
from core.models.image import ImageRecord
from core.models.query import ImageQuery
from core.utils.constants import SORT_FIELD_MAP

logger = Logger(utc=True)


class InMemoryImageFilter:
    """
    Service responsible for searching, ordering and paginating records.

    This class orchestrates in-memory refinement strategies:
    - Free-text search (whole-word matching with relevance score)
    - Ordering by the requested field, relevance as secondary key
    - Page-number pagination

    IMPORTANT:
    - Tag and visibility filtering are NOT applied here.
    - Those filters are evaluated by the record store.
    """

    def __init__(self) -> None:
        """Initialize filter components used for orchestration."""
        self._search: TextSearchFilter = TextSearchFilter()
        self._pagination: OffsetPagination = OffsetPagination()

    def search(
        self,
        records: list[ImageRecord],
        *,
        search: str | None,
    ) -> tuple[list[ImageRecord], dict[str, int]]:
        """
        Keep only records matching ``search``.

        Returns:
            A tuple of (matching_records, relevance_by_record_id). When no
            search is requested, every record is kept with no scores.
        """
        if not search:
            return records, {}

        scores = self._search.apply(records, search)
        matches = [record for record in records if record.record_id in scores]

        logger.debug(
            "Text search applied",
            extra={"search": search, "candidates": len(records), "matches": len(matches)},
        )
        return matches, scores

    @staticmethod
    def sort(
        records: list[ImageRecord],
        *,
        sort_by: str,
        sort_order: str,
        scores: dict[str, int] | None = None,
    ) -> list[ImageRecord]:
        """
        Order records by ``sort_by``; ties fall back to relevance (highest first).

        Raises:
            FilterError: If ``sort_by`` is not a sortable field
        """
        field = SORT_FIELD_MAP.get(sort_by)
        if field is None:
            raise FilterError(
                message="Invalid sort field",
                details={"sort_by": sort_by},
            )

        # Python's sort is stable: apply keys from least to most significant
        ordered = sorted(records, key=lambda record: record.record_id)

        if scores:
            ordered.sort(key=lambda record: scores.get(record.record_id, 0), reverse=True)

        ordered.sort(
            key=lambda record: getattr(record, field),
            reverse=sort_order == "desc",
        )
        return ordered

    def apply(self, records: list[ImageRecord], query: ImageQuery) -> ImagePage:
        """
        Search, order and paginate ``records`` according to ``query``.

        Args:
            records: Records already filtered by tags / visibility
            query: Validated listing request

        Returns:
            ImagePage with the requested page and pagination metadata
        """
        matches, scores = self.search(records, search=query.search)

        ordered = self.sort(
            matches,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            scores=scores,
        )

        is_valid, error_message = self._pagination.validate(query.page, query.limit)
        if not is_valid:
            logger.error(
                "Invalid pagination parameters",
                extra={"page": query.page, "limit": query.limit, "error": error_message},
            )
            raise FilterError(message=error_message)

        page_items, pagination = self._pagination.paginate(ordered, query.page, query.limit)
        return ImagePage(images=page_items, pagination=pagination)
