"""Business logic for the image gallery.

This module coordinates the media store and the record store into the
gallery's composed operations (create, read, list/search, update, delete,
statistics, tags and storage synchronization). Infrastructure failures
arrive as domain errors from the stores and are propagated unchanged.
"""

import re
import uuid

from aws_lambda_powertools import Logger

from core.filters.in_memory_image_filter import InMemoryImageFilter
from core.models.errors import NotFoundError, ValidationError
from core.models.gallery import GalleryStats, ImagePage, SyncStatus
from core.models.image import ImageRecord
from core.models.query import ImageQuery, RecordPatch, normalize_tags
from core.repositories.metadata_repository import ImageRecordRepository
from core.repositories.storage_repository import MediaStoreRepository
from core.services.reconciliation import reconcile
from core.utils.constants import (
    ERROR_CODE_IMAGE_NOT_FOUND,
    RECORD_ID_PATTERN,
    RECORD_ID_PREFIX,
    SYNC_MAX_ASSETS,
)
from core.utils.time import utc_now_iso

logger = Logger(utc=True)

_RECORD_ID_RE = re.compile(RECORD_ID_PATTERN)


class GalleryService:
    """Application service for gallery operations.

    This service orchestrates:
    - Uploading assets and persisting their records
    - Listing, searching and paginating records
    - Patching records and replacing assets
    - Deleting assets and records
    - Aggregate statistics and the storage sync check

    It holds no global handles: both stores are injected.
    """

    def __init__(
        self,
        *,
        storage: MediaStoreRepository,
        records: ImageRecordRepository,
        image_filter: InMemoryImageFilter | None = None,
    ) -> None:
        """Initialize the service with its store dependencies."""
        self.storage = storage
        self.records = records
        self.image_filter = image_filter or InMemoryImageFilter()

    @staticmethod
    def generate_record_id() -> str:
        """Generate a unique record identifier."""
        return f"{RECORD_ID_PREFIX}{uuid.uuid4().hex}"

    @staticmethod
    def is_valid_record_id(record_id: str | None) -> bool:
        """Return True if ``record_id`` is syntactically a record identifier."""
        return bool(record_id) and _RECORD_ID_RE.match(record_id) is not None

    def _not_found(self, record_id: str) -> NotFoundError:
        return NotFoundError(
            message="Image not found",
            error_code=ERROR_CODE_IMAGE_NOT_FOUND,
            details={"record_id": record_id},
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_image(
        self,
        *,
        file_data: bytes,
        content_type: str,
        title: str,
        description: str | None = None,
        tags: list[str] | str | None = None,
        is_public: bool = True,
    ) -> ImageRecord:
        """Upload an image and persist its record.

        The create flow is:
        1. Validate payload and title
        2. Upload the asset to the media store
        3. Insert the record referencing the asset
        4. Delete the uploaded asset if the insert fails

        Raises:
            ValidationError: If the payload is empty, unreadable or untitled
            MediaStoreError: If the upload fails
            DuplicateImageError: If a record already references the asset
            RecordStoreError: If the insert fails
        """
        if not file_data:
            raise ValidationError(message="No file provided")

        if not title or not title.strip():
            raise ValidationError(message="Title is required")

        logger.debug("Starting image creation", extra={"size": len(file_data)})

        # Step 1: Upload asset
        asset = self.storage.upload_asset(file_data=file_data, content_type=content_type)

        # Step 2: Build record
        timestamp = utc_now_iso()
        record = ImageRecord(
            record_id=self.generate_record_id(),
            asset_id=asset.asset_id,
            asset_url=asset.url,
            title=title.strip(),
            description=(description or "").strip(),
            tags=normalize_tags(tags) or [],
            format=asset.format,
            width=asset.width,
            height=asset.height,
            byte_size=asset.byte_size,
            is_public=is_public,
            created_at=timestamp,
            updated_at=timestamp,
        )

        # Step 3: Persist record (compensate on failure)
        try:
            self.records.insert_record(record=record)
        except Exception:
            logger.exception(
                "Failed to persist image record",
                extra={"record_id": record.record_id, "asset_id": asset.asset_id},
            )

            # Best-effort cleanup to avoid orphaned assets
            try:
                self.storage.delete_asset(asset_id=asset.asset_id)
            except Exception:
                logger.warning(
                    "Failed to clean up uploaded asset after record failure",
                    extra={"asset_id": asset.asset_id},
                )

            raise

        logger.info(
            "Image created successfully",
            extra={"record_id": record.record_id, "asset_id": record.asset_id},
        )
        return record

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_image(self, record_id: str) -> ImageRecord:
        """Fetch a record by id.

        Raises:
            NotFoundError: If the id is malformed or no record exists
        """
        if not self.is_valid_record_id(record_id):
            logger.info("Malformed record id", extra={"record_id": record_id})
            raise self._not_found(record_id)

        record = self.records.fetch_record(record_id=record_id)
        if record is None:
            logger.info("Image record not found", extra={"record_id": record_id})
            raise self._not_found(record_id)

        return record

    def list_images(self, query: ImageQuery) -> ImagePage:
        """Return one page of records matching ``query``.

        Tag and visibility filters are evaluated by the record store; the
        optional text search, ordering and pagination run in memory.
        """
        candidates = self.records.query_records(record_filter=query.record_filter())
        page = self.image_filter.apply(candidates, query)

        logger.info(
            "Images listed",
            extra={
                "candidates": len(candidates),
                "returned": len(page.images),
                "page": query.page,
                "search": query.search,
            },
        )
        return page

    def search_images(self, search: str, query: ImageQuery | None = None) -> ImagePage:
        """Full-text search over title and description, paginated like ``list_images``."""
        base = query or ImageQuery()
        return self.list_images(base.model_copy(update={"search": search.strip() or None}))

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_image(
        self,
        record_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        tags: list[str] | str | None = None,
        is_public: bool | None = None,
        file_data: bytes | None = None,
        content_type: str | None = None,
    ) -> ImageRecord:
        """Patch a record and optionally replace its asset.

        Only supplied fields are written; ``updated_at`` is always refreshed.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the title is blank or the new file is unreadable
            MediaStoreError: If the asset replacement fails
            RecordStoreError: If the update fails
        """
        existing = self.get_image(record_id)

        # Field validation must pass before the stored asset is overwritten
        try:
            patch = RecordPatch(
                title=title,
                description=description,
                tags=tags,
                is_public=is_public,
                updated_at=utc_now_iso(),
            )
        except ValueError as exc:
            raise ValidationError(
                message=_first_error_message(exc),
                details={"record_id": record_id},
            ) from exc

        if file_data:
            asset = self.storage.replace_asset(
                asset_id=existing.asset_id,
                file_data=file_data,
                content_type=content_type or "application/octet-stream",
            )
            patch = patch.model_copy(
                update={
                    "asset_url": asset.url,
                    "format": asset.format,
                    "width": asset.width,
                    "height": asset.height,
                    "byte_size": asset.byte_size,
                }
            )
            logger.info(
                "Asset replaced",
                extra={"record_id": record_id, "asset_id": existing.asset_id},
            )

        updated = self.records.update_record(record_id=record_id, patch=patch)
        if updated is None:
            raise self._not_found(record_id)

        logger.info(
            "Image updated successfully",
            extra={"record_id": record_id, "fields": sorted(patch.changes())},
        )
        return updated

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_image(self, record_id: str) -> bool:
        """Delete the asset, then the record.

        Returns:
            True iff the record delete removed exactly one record

        Raises:
            NotFoundError: If the record does not exist
            MediaStoreError: If the asset delete fails
            RecordStoreError: If the record delete fails
        """
        existing = self.get_image(record_id)

        # Asset first: a failure below leaves an orphaned record for the sync check
        self.storage.delete_asset(asset_id=existing.asset_id)
        deleted = self.records.delete_record(record_id=record_id)

        logger.info(
            "Image deleted",
            extra={"record_id": record_id, "asset_id": existing.asset_id, "deleted": deleted},
        )
        return deleted

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def get_stats(self) -> GalleryStats:
        """Count records by visibility and aggregate byte sizes."""
        total = self.records.count_records()
        public = self.records.count_records(is_public=True)
        private = self.records.count_records(is_public=False)
        total_size, sized = self.records.byte_size_totals()

        # Integer half-up rounding of total_size / sized
        average = (2 * total_size + sized) // (2 * sized) if sized else 0

        return GalleryStats(
            total_images=total,
            public_images=public,
            private_images=private,
            total_size=total_size,
            average_size=average,
        )

    def get_all_tags(self) -> list[str]:
        """Return every distinct tag, sorted lexicographically."""
        return sorted(self.records.distinct_tags())

    def sync_with_storage(self) -> SyncStatus:
        """Compare record asset ids with the (capped) media store listing."""
        record_asset_ids = self.records.list_asset_ids()
        storage_asset_ids = self.storage.list_asset_ids(max_results=SYNC_MAX_ASSETS)

        status = reconcile(record_asset_ids, storage_asset_ids)

        log = logger.info if status.in_sync else logger.warning
        log(
            "Storage sync checked",
            extra={
                "in_sync": status.in_sync,
                "record_count": status.record_count,
                "asset_count": status.asset_count,
                "discrepancies": len(status.discrepancies),
            },
        )
        return status


def _first_error_message(exc: ValueError) -> str:
    """Extract a readable message from a pydantic validation error."""
    errors = getattr(exc, "errors", None)
    if callable(errors):
        for error in errors():
            message = str(error.get("msg", ""))
            return message.removeprefix("Value error, ")
    return str(exc)
