from typing import Any

import pytest
from botocore.exceptions import ClientError

from core.infrastructure.aws.dynamodb_record_store import DynamoDBRecordStore
from core.models.errors import DuplicateImageError, RecordStoreError
from core.models.query import RecordFilter, RecordPatch


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


class DummyAdapter:
    """DynamoDB adapter double raising the configured error for every call."""

    table_name = "dummy-table"

    def __init__(self, code: str = "InternalServerError") -> None:
        self.code = code

    def put_item(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "PutItem")

    def get_item(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "GetItem")

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "UpdateItem")

    def delete_item(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "DeleteItem")

    def query(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "Query")

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        raise _client_error(self.code, "Scan")

    def describe_table(self) -> dict[str, Any]:
        raise _client_error(self.code, "DescribeTable")

    def create_table(self, **kwargs: Any) -> None:
        raise _client_error(self.code, "CreateTable")


class PagedScanAdapter(DummyAdapter):
    """Serves scan results across two pages."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(dict(kwargs))
        if "ExclusiveStartKey" not in kwargs:
            return {"Items": [{"tags": ["a", "b"]}], "LastEvaluatedKey": {"record_id": "x"}}
        return {"Items": [{"tags": ["b", "c"]}]}


class TestEnsureSchema:
    def test_creates_missing_table(self, aws_mock, dynamodb_client) -> None:
        store = DynamoDBRecordStore()

        store.ensure_schema()

        table = dynamodb_client.describe_table(TableName="test-gallery-images")["Table"]
        assert [index["IndexName"] for index in table["GlobalSecondaryIndexes"]] == [
            "asset-id-index"
        ]

    def test_existing_table_is_verified(self, dynamodb_table) -> None:
        store = DynamoDBRecordStore()

        store.ensure_schema()
        store.ensure_schema()

    def test_table_without_index_is_rejected(self, dynamodb_resource) -> None:
        dynamodb_resource.create_table(
            TableName="test-gallery-images",
            BillingMode="PAY_PER_REQUEST",
            KeySchema=[{"AttributeName": "record_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "record_id", "AttributeType": "S"}],
        )

        with pytest.raises(RecordStoreError) as exc_info:
            DynamoDBRecordStore().ensure_schema()

        assert exc_info.value.error_code == "SCHEMA_SETUP_FAILED"

    def test_describe_failure(self) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            DynamoDBRecordStore(adapter=DummyAdapter("AccessDeniedException")).ensure_schema()

        assert exc_info.value.error_code == "SCHEMA_SETUP_FAILED"

    def test_concurrent_creation_is_success(self) -> None:
        class RacingAdapter(DummyAdapter):
            def describe_table(self) -> dict[str, Any]:
                raise _client_error("ResourceNotFoundException", "DescribeTable")

        DynamoDBRecordStore(adapter=RacingAdapter("ResourceInUseException")).ensure_schema()


class TestRecordCrud:
    def test_insert_and_fetch(self, dynamodb_table, make_record) -> None:
        store = DynamoDBRecordStore()
        record = make_record(1, title="Sunset", tags=["nature"])

        store.insert_record(record=record)

        assert store.fetch_record(record_id=record.record_id) == record
        assert store.fetch_by_asset_id(asset_id=record.asset_id) == record

    def test_fetch_missing_returns_none(self, dynamodb_table) -> None:
        store = DynamoDBRecordStore()

        assert store.fetch_record(record_id="img_" + "f" * 32) is None
        assert store.fetch_by_asset_id(asset_id="gallery/missing") is None

    def test_insert_same_record_id_is_duplicate(self, dynamodb_table, make_record) -> None:
        store = DynamoDBRecordStore()
        store.insert_record(record=make_record(1))

        with pytest.raises(DuplicateImageError):
            store.insert_record(record=make_record(1, asset_id="gallery/other"))

    def test_insert_same_asset_id_is_duplicate(self, dynamodb_table, make_record) -> None:
        store = DynamoDBRecordStore()
        store.insert_record(record=make_record(1))

        with pytest.raises(DuplicateImageError) as exc_info:
            store.insert_record(record=make_record(2, asset_id=make_record(1).asset_id))

        assert exc_info.value.error_code == "DUPLICATE_ASSET"

    def test_update_record(self, dynamodb_table, make_record) -> None:
        store = DynamoDBRecordStore()
        record = make_record(1, title="Old", tags=["a"])
        store.insert_record(record=record)

        updated = store.update_record(
            record_id=record.record_id,
            patch=RecordPatch(tags=["b", "c"], updated_at="2024-02-01T00:00:00+00:00"),
        )

        assert updated is not None
        assert updated.tags == ["b", "c"]
        assert updated.title == "Old"
        assert updated.asset_id == record.asset_id
        assert updated.updated_at == "2024-02-01T00:00:00+00:00"
        assert updated.created_at == record.created_at

    def test_update_missing_returns_none(self, dynamodb_table) -> None:
        store = DynamoDBRecordStore()

        result = store.update_record(
            record_id="img_" + "0" * 32,
            patch=RecordPatch(title="New", updated_at="2024-02-01T00:00:00+00:00"),
        )

        assert result is None

    def test_delete_record(self, dynamodb_table, make_record) -> None:
        store = DynamoDBRecordStore()
        record = make_record(1)
        store.insert_record(record=record)

        assert store.delete_record(record_id=record.record_id) is True
        assert store.delete_record(record_id=record.record_id) is False
        assert store.fetch_record(record_id=record.record_id) is None


class TestRecordQueries:
    def test_query_without_filter_returns_all(self, dynamodb_with_records) -> None:
        records = DynamoDBRecordStore().query_records(record_filter=RecordFilter())

        assert len(records) == 4

    def test_query_tags_match_any(self, dynamodb_with_records) -> None:
        records = DynamoDBRecordStore().query_records(
            record_filter=RecordFilter(tags=["trees", "city"])
        )

        assert sorted(r.title for r in records) == ["City lights", "Forest"]

    def test_query_tags_and_visibility(self, dynamodb_with_records) -> None:
        records = DynamoDBRecordStore().query_records(
            record_filter=RecordFilter(tags=["nature", "city"], is_public=True)
        )

        assert sorted(r.title for r in records) == ["Forest", "Sunset"]

    def test_query_private_only(self, dynamodb_with_records) -> None:
        records = DynamoDBRecordStore().query_records(record_filter=RecordFilter(is_public=False))

        assert sorted(r.title for r in records) == ["Beach", "City lights"]

    def test_query_skips_malformed_items(self, dynamodb_with_records, dynamodb_put_item) -> None:
        dynamodb_put_item({"record_id": "img_broken", "asset_id": "gallery/broken"})

        assert len(DynamoDBRecordStore().query_records(record_filter=RecordFilter())) == 4

    def test_count_records(self, dynamodb_with_records) -> None:
        store = DynamoDBRecordStore()

        assert store.count_records() == 4
        assert store.count_records(is_public=True) == 2
        assert store.count_records(is_public=False) == 2

    def test_distinct_tags(self, dynamodb_with_records) -> None:
        assert DynamoDBRecordStore().distinct_tags() == {"nature", "sky", "city", "trees", "sea"}

    def test_byte_size_totals(self, dynamodb_with_records) -> None:
        assert DynamoDBRecordStore().byte_size_totals() == (1000, 4)

    def test_byte_size_totals_empty(self, dynamodb_table) -> None:
        assert DynamoDBRecordStore().byte_size_totals() == (0, 0)

    def test_list_asset_ids(self, dynamodb_with_records) -> None:
        assert sorted(DynamoDBRecordStore().list_asset_ids()) == sorted(
            r.asset_id for r in dynamodb_with_records
        )

    def test_scan_follows_pagination(self) -> None:
        adapter = PagedScanAdapter()

        assert DynamoDBRecordStore(adapter=adapter).distinct_tags() == {"a", "b", "c"}
        assert len(adapter.calls) == 2
        assert adapter.calls[1]["ExclusiveStartKey"] == {"record_id": "x"}


class TestRecordStoreErrorTranslation:
    @pytest.fixture
    def failing_store(self) -> DynamoDBRecordStore:
        return DynamoDBRecordStore(adapter=DummyAdapter())

    def test_fetch_failure(self, failing_store) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            failing_store.fetch_record(record_id="img_x")

        assert exc_info.value.error_code == "RECORD_FETCH_FAILED"

    def test_insert_failure(self, failing_store, make_record) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            failing_store.insert_record(record=make_record(1))

        # the asset id lookup runs first
        assert exc_info.value.error_code == "RECORD_FETCH_FAILED"

    def test_update_failure(self, failing_store) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            failing_store.update_record(
                record_id="img_x",
                patch=RecordPatch(title="t", updated_at="2024-01-01T00:00:00+00:00"),
            )

        assert exc_info.value.error_code == "RECORD_UPDATE_FAILED"

    def test_delete_failure(self, failing_store) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            failing_store.delete_record(record_id="img_x")

        assert exc_info.value.error_code == "RECORD_DELETE_FAILED"

    def test_query_failure(self, failing_store) -> None:
        with pytest.raises(RecordStoreError) as exc_info:
            failing_store.query_records(record_filter=RecordFilter())

        assert exc_info.value.message == "Unable to retrieve images"
        assert exc_info.value.error_code == "RECORD_QUERY_FAILED"

    def test_aggregate_failure(self, failing_store) -> None:
        for call in (failing_store.count_records, failing_store.distinct_tags, failing_store.byte_size_totals):
            with pytest.raises(RecordStoreError) as exc_info:
                call()
            assert exc_info.value.error_code == "RECORD_AGGREGATE_FAILED"
