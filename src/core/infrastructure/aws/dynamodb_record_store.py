"""DynamoDB-backed implementation of ImageRecordRepository."""

from functools import reduce
from operator import or_
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import (
    DuplicateImageError,
    RecordStoreError,
)
from core.models.image import ImageRecord
from core.models.query import RecordFilter, RecordPatch
from core.repositories.metadata_repository import ImageRecordRepository
from core.utils.constants import (
    ASSET_ID_INDEX_NAME,
    ERROR_CODE_RECORD_AGGREGATE_FAILED,
    ERROR_CODE_RECORD_CREATE_FAILED,
    ERROR_CODE_RECORD_DELETE_FAILED,
    ERROR_CODE_RECORD_FETCH_FAILED,
    ERROR_CODE_RECORD_QUERY_FAILED,
    ERROR_CODE_RECORD_UPDATE_FAILED,
    ERROR_CODE_SCHEMA_SETUP_FAILED,
)

Item = dict[str, Any]

logger = Logger(utc=True)


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class DynamoDBRecordStore(ImageRecordRepository):
    """DynamoDB-backed record storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.

    DynamoDB has no text index or aggregation pipeline: tag and visibility
    filters run as scan filter expressions, and counts, distinct tags and
    byte-size totals are computed over projection-only scans.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create the table and the asset-id index when missing.

        Safe to call on every cold start: an existing table is only
        verified, and a concurrent creation is treated as success.
        """
        try:
            description = self._db.describe_table()

        except ClientError as exc:
            if _error_code(exc) != "ResourceNotFoundException":
                logger.error("DynamoDB describe_table failed")
                raise RecordStoreError(
                    message="Unable to verify the image table",
                    error_code=ERROR_CODE_SCHEMA_SETUP_FAILED,
                ) from exc

            self._create_table()
            return

        index_names = {
            index["IndexName"] for index in description.get("GlobalSecondaryIndexes", [])
        }
        if ASSET_ID_INDEX_NAME not in index_names:
            logger.error(
                "Image table is missing the asset id index",
                extra={"indexes": sorted(index_names)},
            )
            raise RecordStoreError(
                message="Image table is missing required indexes",
                error_code=ERROR_CODE_SCHEMA_SETUP_FAILED,
                details={"missing_index": ASSET_ID_INDEX_NAME},
            )

        logger.debug("Image table verified", extra={"table": self._db.table_name})

    def _create_table(self) -> None:
        logger.info("Creating image table", extra={"table": self._db.table_name})

        try:
            self._db.create_table(
                BillingMode="PAY_PER_REQUEST",
                KeySchema=[{"AttributeName": "record_id", "KeyType": "HASH"}],
                AttributeDefinitions=[
                    {"AttributeName": "record_id", "AttributeType": "S"},
                    {"AttributeName": "asset_id", "AttributeType": "S"},
                ],
                GlobalSecondaryIndexes=[
                    {
                        "IndexName": ASSET_ID_INDEX_NAME,
                        "KeySchema": [{"AttributeName": "asset_id", "KeyType": "HASH"}],
                        "Projection": {"ProjectionType": "ALL"},
                    },
                ],
            )

        except ClientError as exc:
            if _error_code(exc) == "ResourceInUseException":
                logger.info("Image table created concurrently", extra={"table": self._db.table_name})
                return

            logger.error("DynamoDB create_table failed")
            raise RecordStoreError(
                message="Unable to create the image table",
                error_code=ERROR_CODE_SCHEMA_SETUP_FAILED,
            ) from exc

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def insert_record(self, *, record: ImageRecord) -> None:
        """Insert a record.

        Raises:
            DuplicateImageError: If the record id or asset id is already used
            RecordStoreError: If creation fails
        """
        logger.debug(
            "Creating record",
            extra={"record_id": record.record_id, "asset_id": record.asset_id},
        )

        if self.fetch_by_asset_id(asset_id=record.asset_id) is not None:
            raise DuplicateImageError(
                message="A record already references this asset",
                details={"asset_id": record.asset_id},
            )

        try:
            self._db.put_item(
                item=record.to_item(),
                condition_expression="attribute_not_exists(record_id)",  # Partition key
            )
            logger.info(
                "Record created",
                extra={"record_id": record.record_id, "asset_id": record.asset_id},
            )

        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"record_id": record.record_id})

            if _error_code(exc) == "ConditionalCheckFailedException":
                raise DuplicateImageError(
                    message="This image record already exists",
                    details={"record_id": record.record_id},
                ) from exc

            raise RecordStoreError(
                message="Unable to save image record at this time",
                error_code=ERROR_CODE_RECORD_CREATE_FAILED,
                details={"record_id": record.record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating record")
            raise RecordStoreError(
                message="Unable to save image record at this time",
                error_code=ERROR_CODE_RECORD_CREATE_FAILED,
                details={"record_id": record.record_id},
            ) from exc

    def fetch_record(self, *, record_id: str) -> ImageRecord | None:
        """Fetch a single record by id."""
        logger.debug("Fetching record", extra={"record_id": record_id})

        try:
            response = self._db.get_item(key={"record_id": record_id})
            item = response.get("Item")

            if item is None:
                return None

            return ImageRecord.from_item(item)

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching record")
            raise RecordStoreError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": record_id},
            ) from exc

    def fetch_by_asset_id(self, *, asset_id: str) -> ImageRecord | None:
        """Fetch the record referencing ``asset_id`` via the asset-id index."""
        logger.debug("Fetching record by asset", extra={"asset_id": asset_id})

        try:
            response = self._db.query(
                IndexName=ASSET_ID_INDEX_NAME,
                KeyConditionExpression=Key("asset_id").eq(asset_id),
                Limit=1,
            )
            items = response.get("Items", [])

            if not items:
                return None

            return ImageRecord.from_item(items[0])

        except ClientError as exc:
            logger.error("DynamoDB asset lookup failed", extra={"asset_id": asset_id})
            raise RecordStoreError(
                message="Unable to look up image record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"asset_id": asset_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error looking up record by asset")
            raise RecordStoreError(
                message="Unable to look up image record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"asset_id": asset_id},
            ) from exc

    def update_record(self, *, record_id: str, patch: RecordPatch) -> ImageRecord | None:
        """Apply a patch; returns None when the record does not exist."""
        changes = patch.changes()

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments: list[str] = []

        for index, (field, value) in enumerate(changes.items()):
            names[f"#f{index}"] = field
            values[f":v{index}"] = value
            assignments.append(f"#f{index} = :v{index}")

        logger.debug(
            "Updating record",
            extra={"record_id": record_id, "fields": sorted(changes)},
        )

        try:
            response = self._db.update_item(
                key={"record_id": record_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(record_id)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )

        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                logger.info("Record to update does not exist", extra={"record_id": record_id})
                return None

            logger.error("DynamoDB update_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to update image record",
                error_code=ERROR_CODE_RECORD_UPDATE_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating record")
            raise RecordStoreError(
                message="Unable to update image record",
                error_code=ERROR_CODE_RECORD_UPDATE_FAILED,
                details={"record_id": record_id},
            ) from exc

        logger.info("Record updated", extra={"record_id": record_id})
        return ImageRecord.from_item(response["Attributes"])

    def delete_record(self, *, record_id: str) -> bool:
        """Delete a record; returns True iff an item was removed."""
        logger.debug("Removing record", extra={"record_id": record_id})

        try:
            response = self._db.delete_item(
                key={"record_id": record_id},
                ReturnValues="ALL_OLD",
            )

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_RECORD_DELETE_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing record")
            raise RecordStoreError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_RECORD_DELETE_FAILED,
                details={"record_id": record_id},
            ) from exc

        deleted = bool(response.get("Attributes"))
        logger.info("Record removed", extra={"record_id": record_id, "deleted": deleted})
        return deleted

    # ------------------------------------------------------------------
    # Queries and aggregates
    # ------------------------------------------------------------------

    def query_records(self, *, record_filter: RecordFilter) -> list[ImageRecord]:
        """Scan for records matching the tag / visibility filter."""
        scan_kwargs: dict[str, Any] = {}
        condition = self._build_filter(record_filter)
        if condition is not None:
            scan_kwargs["FilterExpression"] = condition

        items = self._scan_all(
            error_message="Unable to retrieve images",
            error_code=ERROR_CODE_RECORD_QUERY_FAILED,
            **scan_kwargs,
        )

        records: list[ImageRecord] = []
        for item in items:
            try:
                records.append(ImageRecord.from_item(item))
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping malformed record",
                    extra={"record_id": item.get("record_id"), "errors": exc.errors()},
                )

        logger.info(
            "Records queried",
            extra={
                "count": len(records),
                "tags": record_filter.tags,
                "is_public": record_filter.is_public,
            },
        )
        return records

    def count_records(self, *, is_public: bool | None = None) -> int:
        """Count records, optionally filtered by visibility."""
        scan_kwargs: dict[str, Any] = {
            "ProjectionExpression": "#rid",
            "ExpressionAttributeNames": {"#rid": "record_id"},
        }
        if is_public is not None:
            scan_kwargs["FilterExpression"] = Attr("is_public").eq(is_public)

        items = self._scan_all(
            error_message="Unable to count images",
            error_code=ERROR_CODE_RECORD_AGGREGATE_FAILED,
            **scan_kwargs,
        )
        return len(items)

    def distinct_tags(self) -> set[str]:
        """Collect distinct tag values across all records."""
        items = self._scan_all(
            error_message="Unable to retrieve tags",
            error_code=ERROR_CODE_RECORD_AGGREGATE_FAILED,
            ProjectionExpression="#tags",
            ExpressionAttributeNames={"#tags": "tags"},
        )

        tags: set[str] = set()
        for item in items:
            tags.update(str(tag) for tag in item.get("tags") or [])
        return tags

    def byte_size_totals(self) -> tuple[int, int]:
        """Return the sum of byte sizes and the number of records."""
        items = self._scan_all(
            error_message="Unable to compute image statistics",
            error_code=ERROR_CODE_RECORD_AGGREGATE_FAILED,
            ProjectionExpression="#size",
            ExpressionAttributeNames={"#size": "byte_size"},
        )

        total = sum(int(item.get("byte_size") or 0) for item in items)
        return total, len(items)

    def list_asset_ids(self) -> list[str]:
        """Return every record's asset id using a projection-only scan."""
        items = self._scan_all(
            error_message="Unable to list image records",
            error_code=ERROR_CODE_RECORD_QUERY_FAILED,
            ProjectionExpression="#aid",
            ExpressionAttributeNames={"#aid": "asset_id"},
        )
        return [str(item["asset_id"]) for item in items if item.get("asset_id")]

    @staticmethod
    def _build_filter(record_filter: RecordFilter) -> ConditionBase | None:
        """Render a RecordFilter into a boto3 condition."""
        if record_filter.is_empty:
            return None

        conditions: list[ConditionBase] = []

        if record_filter.tags:
            conditions.append(
                reduce(or_, (Attr("tags").contains(tag) for tag in record_filter.tags))
            )

        if record_filter.is_public is not None:
            conditions.append(Attr("is_public").eq(record_filter.is_public))

        if not conditions:
            return None

        condition = conditions[0]
        for extra in conditions[1:]:
            condition = condition & extra
        return condition

    def _scan_all(
        self,
        *,
        error_message: str,
        error_code: str,
        **scan_kwargs: Any,
    ) -> list[Item]:
        """Run a scan to completion, following LastEvaluatedKey."""
        items: list[Item] = []
        last_evaluated_key: dict[str, Any] | None = None

        try:
            while True:
                if last_evaluated_key:
                    scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

                response = self._db.scan(**scan_kwargs)
                page_items = response.get("Items", [])

                if not isinstance(page_items, list):
                    raise RecordStoreError(
                        message="Invalid scan response from DynamoDB",
                        error_code=error_code,
                    )

                items.extend(page_items)

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

        except RecordStoreError:
            raise

        except ClientError as exc:
            logger.error("DynamoDB scan failed", extra={"error_code": error_code})
            raise RecordStoreError(message=error_message, error_code=error_code) from exc

        except Exception as exc:
            logger.exception("Unexpected error scanning records")
            raise RecordStoreError(message=error_message, error_code=error_code) from exc

        return items
