"""Abstract contract for image record persistence."""

from abc import ABC, abstractmethod

from core.models.image import ImageRecord
from core.models.query import RecordFilter, RecordPatch


class ImageRecordRepository(ABC):
    """Contract for storing and querying image records.

    Implementations could be DynamoDB, PostgreSQL, MongoDB, etc.
    The gallery service depends on this interface, not the implementation.
    """

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the backing table and indexes if missing (idempotent).

        Raises:
            RecordStoreError: If the schema cannot be created or verified
        """

    @abstractmethod
    def insert_record(self, *, record: ImageRecord) -> None:
        """Insert a new record.

        Raises:
            DuplicateImageError: If a record already exists for the id or asset
            RecordStoreError: If the insert fails
        """

    @abstractmethod
    def fetch_record(self, *, record_id: str) -> ImageRecord | None:
        """Fetch a record by id, or None if it does not exist.

        Raises:
            RecordStoreError: If the fetch fails
        """

    @abstractmethod
    def fetch_by_asset_id(self, *, asset_id: str) -> ImageRecord | None:
        """Fetch the record referencing ``asset_id``, or None.

        Raises:
            RecordStoreError: If the lookup fails
        """

    @abstractmethod
    def update_record(self, *, record_id: str, patch: RecordPatch) -> ImageRecord | None:
        """Apply ``patch`` and return the updated record, or None if absent.

        Raises:
            RecordStoreError: If the update fails
        """

    @abstractmethod
    def delete_record(self, *, record_id: str) -> bool:
        """Delete a record; True iff exactly one record was removed.

        Raises:
            RecordStoreError: If the delete fails
        """

    @abstractmethod
    def query_records(self, *, record_filter: RecordFilter) -> list[ImageRecord]:
        """Return every record matching ``record_filter`` (unordered).

        Raises:
            RecordStoreError: If the query fails
        """

    @abstractmethod
    def count_records(self, *, is_public: bool | None = None) -> int:
        """Count records, optionally restricted by visibility.

        Raises:
            RecordStoreError: If counting fails
        """

    @abstractmethod
    def distinct_tags(self) -> set[str]:
        """Return the distinct tag values across all records.

        Raises:
            RecordStoreError: If the aggregation fails
        """

    @abstractmethod
    def byte_size_totals(self) -> tuple[int, int]:
        """Return ``(sum_of_byte_sizes, record_count)`` across all records.

        Raises:
            RecordStoreError: If the aggregation fails
        """

    @abstractmethod
    def list_asset_ids(self) -> list[str]:
        """Return the asset id of every record (projection only).

        Raises:
            RecordStoreError: If the scan fails
        """
