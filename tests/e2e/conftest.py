"""
E2E fixtures: run against the gallery API deployed on LocalStack.

Every test is skipped when LocalStack (or the deployed API) is unreachable.
"""

from io import BytesIO
import logging

import boto3
from botocore.exceptions import ClientError
from PIL import Image
import pytest
import requests

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

S3_IMAGE_BUCKET_NAME = "image-gallery-assets-snd"
DYNAMODB_TABLE_NAME = "image-gallery-records-snd"
ENDPOINT_BASE_URL = "http://localhost:4566"
HEALTH_URL = f"{ENDPOINT_BASE_URL}/_localstack/health"
STAGE = "snd"


class E2EAPIClient:
    """Wrapper for making HTTP requests to the gallery API"""

    def __init__(self, endpoint: str, headers: dict[str, str]) -> None:
        self.endpoint = endpoint
        self.headers = headers

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        merged = self.headers.copy()
        if headers:
            merged.update(headers)
        return merged

    def post_form(self, path, fields, files=None, headers=None):
        """POST a multipart form"""
        return requests.post(
            f"{self.endpoint}{path}",
            data=fields,
            files=files,
            headers=self._headers(headers),
            timeout=30,
        )

    def put_form(self, path, fields, files=None, headers=None):
        """PUT a multipart form"""
        return requests.put(
            f"{self.endpoint}{path}",
            data=fields,
            files=files,
            headers=self._headers(headers),
            timeout=30,
        )

    def get(self, path, params=None, headers=None):
        """Make GET request"""
        return requests.get(
            f"{self.endpoint}{path}",
            params=params,
            headers=self._headers(headers),
            timeout=30,
        )

    def delete(self, path, headers=None):
        """Make DELETE request"""
        return requests.delete(
            f"{self.endpoint}{path}",
            headers=self._headers(headers),
            timeout=30,
        )


# ============================================================================
# API Details Fixture
# ============================================================================


@pytest.fixture(scope="session")
def api_details():
    """Get API Gateway details from LocalStack"""
    try:
        requests.get(HEALTH_URL, timeout=2).raise_for_status()
    except requests.RequestException as e:
        pytest.skip(f"LocalStack is not reachable: {e}")

    try:
        apigateway = boto3.client("apigateway", endpoint_url=ENDPOINT_BASE_URL)

        apis = apigateway.get_rest_apis()
        api = next(api for api in apis["items"] if "image-gallery" in api["name"])
        api_id = api["id"]

        keys = apigateway.get_api_keys(includeValues=True)
        api_key = keys["items"][0]["value"] if keys["items"] else "test-key"

        endpoint = f"{ENDPOINT_BASE_URL}/restapis/{api_id}/{STAGE}/_user_request_/v1"

        return {"api_id": api_id, "api_key": api_key, "endpoint": endpoint, "stage": STAGE}
    except (ClientError, StopIteration) as e:
        logger.warning("Could not get API details from LocalStack: %s", e)
        pytest.skip(f"Could not get API details from LocalStack: {e}")


@pytest.fixture(scope="session")
def api_client(api_details):
    """HTTP client wrapper for E2E API testing"""
    return E2EAPIClient(api_details["endpoint"], {"x-api-key": api_details["api_key"]})


@pytest.fixture(scope="function", autouse=True)
def cleanup_storage_after_each_test(api_details):
    """Clean S3 and DynamoDB so every test starts from an empty gallery."""
    _cleanup_s3()
    _cleanup_dynamodb()
    yield
    _cleanup_s3()
    _cleanup_dynamodb()


def _cleanup_s3():
    """Clean all objects from the asset bucket"""
    s3_client = boto3.client("s3", endpoint_url=ENDPOINT_BASE_URL)

    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        deleted = 0

        for page in paginator.paginate(Bucket=S3_IMAGE_BUCKET_NAME):
            for obj in page.get("Contents", []):
                s3_client.delete_object(Bucket=S3_IMAGE_BUCKET_NAME, Key=obj["Key"])
                deleted += 1

        logger.info("Deleted %d objects from S3 bucket", deleted)

    except ClientError as err:
        logger.error("Failed to cleanup S3 bucket: %s", S3_IMAGE_BUCKET_NAME, exc_info=err)


def _cleanup_dynamodb():
    """Delete all items from the image record table."""
    table = boto3.resource("dynamodb", endpoint_url=ENDPOINT_BASE_URL).Table(DYNAMODB_TABLE_NAME)

    try:
        deleted = 0
        start_key = None

        while True:
            scan_kwargs = {"ProjectionExpression": "record_id"}
            if start_key:
                scan_kwargs["ExclusiveStartKey"] = start_key

            response = table.scan(**scan_kwargs)

            for item in response.get("Items", []):
                table.delete_item(Key={"record_id": item["record_id"]})
                deleted += 1

            start_key = response.get("LastEvaluatedKey")
            if not start_key:
                break

        logger.info("Deleted %d items from DynamoDB table", deleted)

    except ClientError as err:
        logger.error("Failed to cleanup DynamoDB table: %s", DYNAMODB_TABLE_NAME, exc_info=err)


# ============================================================================
# Sample Image Data
# ============================================================================


def _png(color=(250, 120, 40), size=(16, 12)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_file():
    """A multipart ``files`` entry holding a small PNG"""
    return {"file": ("sunset.png", _png(), "image/png")}


@pytest.fixture
def upload_image(api_client, png_file):
    """Upload one image and return its API representation."""

    def _upload(title="Sunset", tags="nature,sky", is_public="true", description="Orange sky"):
        response = api_client.post_form(
            "/images/upload",
            {"title": title, "description": description, "tags": tags, "isPublic": is_public},
            files=png_file,
        )
        assert response.status_code == 201, f"Upload failed: {response.text}"
        return response.json()["data"]

    return _upload
