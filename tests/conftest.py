"""
Pytest configuration and fixtures for image gallery tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup.
"""

import base64
import os

# Must be set before any boto3 client / Powertools object is created
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-gallery-bucket")
os.environ.setdefault("IMAGE_METADATA_TABLE_NAME", "test-gallery-images")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageGallery")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-gallery")

from collections.abc import Callable, Iterator
from io import BytesIO
from types import SimpleNamespace
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image
import requests

from core.models.image import ImageRecord
from core.services.provider import get_gallery_service
from core.utils.constants import ASSET_ID_INDEX_NAME


@pytest.fixture(autouse=True)
def aws_endpoint_unset(monkeypatch) -> None:
    """Keep tests pointed at moto, never at a real or LocalStack endpoint."""
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("IMAGE_PUBLIC_BASE_URL", raising=False)


@pytest.fixture(scope="function")
def aws_mock() -> Iterator[None]:
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_client(aws_mock):
    return boto3.client("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_dynamodb_table(dynamodb_resource):
    """Helper to create the image table with its asset id index."""
    table_name = os.getenv("IMAGE_METADATA_TABLE_NAME")

    return dynamodb_resource.create_table(
        TableName=table_name,
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


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """
    Create the DynamoDB table for testing.

    The table lives inside the per-test moto context, so it is discarded
    together with its items when the test finishes.
    """
    table = _create_dynamodb_table(dynamodb_resource)
    table.wait_until_exists()
    return table


@pytest.fixture
def dynamodb_put_item(dynamodb_table) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """
    Helper to insert a single raw item into DynamoDB.

    Usage:
        item = dynamodb_put_item(make_record(title="Sunset").to_item())
    """

    def _put(item: dict[str, Any]) -> dict[str, Any]:
        dynamodb_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture
def dynamodb_put_multiple_items(
    dynamodb_table,
) -> Callable[[list[dict[str, Any]]], list[dict[str, Any]]]:
    """Helper to insert multiple raw items into DynamoDB."""

    def _put(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        with dynamodb_table.batch_writer() as batch:
            for item in items:
                batch.put_item(Item=item)
        return items

    return _put


@pytest.fixture
def dynamodb_get_item(dynamodb_table) -> Callable[[str], dict[str, Any] | None]:
    """Helper to get a single raw item from DynamoDB."""

    def _get(record_id: str) -> dict[str, Any] | None:
        response: dict[str, Any] = dynamodb_table.get_item(Key={"record_id": record_id})
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create the S3 bucket for testing.

    The bucket is discarded with the moto context at the end of each test.
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.create_bucket(Bucket=bucket_name)
    except ClientError as e:
        if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
            raise

    return s3_client


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("gallery/abc", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes = b"x", content_type: str = "application/octet-stream"):
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        return s3_bucket.put_object(
            Bucket=bucket_name, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """Helper to get an object body from S3."""

    def _get(key: str) -> bytes:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response: dict[str, Any] = s3_bucket.get_object(Bucket=bucket_name, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_list_keys(s3_bucket) -> Callable[[], list[str]]:
    """Helper to list every object key in the bucket."""

    def _list() -> list[str]:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response = s3_bucket.list_objects_v2(Bucket=bucket_name)
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _list


@pytest.fixture
def gallery_stack(s3_bucket, dynamodb_table) -> Iterator[None]:
    """Bucket and table ready; the cached gallery service is rebuilt per test."""
    get_gallery_service.cache_clear()
    yield
    get_gallery_service.cache_clear()


@pytest.fixture
def gallery_service(gallery_stack):
    """GalleryService wired to moto-backed S3 and DynamoDB."""
    return get_gallery_service()


def render_image(
    size: tuple[int, int] = (4, 3),
    color: tuple[int, int, int] = (200, 80, 40),
    image_format: str = "PNG",
) -> bytes:
    """Render a small real image that Pillow can probe."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """Factory rendering real images: image_factory(size=(10, 5), image_format="GIF")."""
    return render_image


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample PNG, 4x3 pixels."""
    return render_image()


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample JPEG, 8x6 pixels."""
    return render_image(size=(8, 6), image_format="JPEG")


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    """
    Factory for ImageRecord instances with sensible defaults.

    Usage:
        record = make_record(title="Sunset", tags=["nature"], n=1)
    """

    def _make(n: int = 1, **overrides: Any) -> ImageRecord:
        values: dict[str, Any] = {
            "record_id": f"img_{n:032x}",
            "asset_id": f"gallery/{n:032x}",
            "asset_url": f"https://test-gallery-bucket.s3.us-east-1.amazonaws.com/gallery/{n:032x}",
            "title": f"Image {n}",
            "description": "",
            "tags": [],
            "format": "png",
            "width": 4,
            "height": 3,
            "byte_size": 100 * n,
            "is_public": True,
            "created_at": f"2024-01-{n:02d}T10:00:00+00:00",
            "updated_at": f"2024-01-{n:02d}T10:00:00+00:00",
        }
        values.update(overrides)
        return ImageRecord(**values)

    return _make


@pytest.fixture
def sample_records(make_record) -> list[ImageRecord]:
    """Four records with mixed tags, visibility and sizes."""
    return [
        make_record(1, title="Sunset", description="Orange sunset over the sea", tags=["nature", "sky"]),
        make_record(2, title="City lights", description="Night skyline", tags=["city"], is_public=False),
        make_record(3, title="Forest", description="Sunset through the trees", tags=["nature", "trees"]),
        make_record(4, title="Beach", description="Sand and sea", tags=["sea"], is_public=False),
    ]


@pytest.fixture
def dynamodb_with_records(dynamodb_put_multiple_items, sample_records) -> list[ImageRecord]:
    """DynamoDB table pre-populated with ``sample_records``."""
    dynamodb_put_multiple_items([record.to_item() for record in sample_records])
    return sample_records


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


def encode_multipart(
    fields: dict[str, str] | None = None,
    files: dict[str, tuple[str, bytes, str]] | None = None,
) -> tuple[bytes, str]:
    """Encode a multipart/form-data body; returns (body, content_type header)."""
    prepared = requests.Request(
        "POST",
        "http://localhost/images/upload",
        data=fields or {},
        files=files or {},
    ).prepare()

    body = prepared.body if isinstance(prepared.body, bytes) else (prepared.body or "").encode()
    return body, prepared.headers["Content-Type"]


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway event with a base64-encoded multipart body.

    Usage:
        event = multipart_event(
            fields={"title": "Sunset"},
            files={"file": ("sunset.png", png_bytes, "image/png")},
        )
    """

    def _build(
        *,
        fields: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        method: str = "POST",
        path_parameters: dict[str, str] | None = None,
        base64_encoded: bool = True,
    ) -> dict[str, Any]:
        if not files:
            # requests only emits multipart bodies when a file part exists
            body_bytes, content_type = _encode_fields_only(fields or {})
        else:
            body_bytes, content_type = encode_multipart(fields, files)

        return {
            "httpMethod": method,
            "path": "/images/upload",
            "pathParameters": path_parameters,
            "queryStringParameters": None,
            "headers": {"Content-Type": content_type},
            "body": base64.b64encode(body_bytes).decode("ascii")
            if base64_encoded
            else body_bytes.decode("latin-1"),
            "isBase64Encoded": base64_encoded,
        }

    return _build


def _encode_fields_only(fields: dict[str, str]) -> tuple[bytes, str]:
    boundary = "testboundary7MA4YWxkTrZu0gW"
    parts: list[bytes] = []

    for name, value in fields.items():
        parts.append(
            (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
                f"{value}\r\n"
            ).encode("utf-8")
        )

    parts.append(f"--{boundary}--\r\n".encode())
    return b"".join(parts), f"multipart/form-data; boundary={boundary}"
