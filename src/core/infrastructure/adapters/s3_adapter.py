"""Thin adapter over the boto3 S3 client for the gallery asset bucket."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3

from core.utils.constants import (
    DEFAULT_AWS_REGION,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_PUBLIC_BASE_URL,
    ENV_IMAGE_S3_BUCKET_NAME,
)

S3Object = Mapping[str, Any]


class S3AdapterProtocol(Protocol):
    """Object operations the media store needs (repository-facing)."""

    def put_object(
        self, *, key: str, body: bytes, content_type: str, metadata: dict[str, str]
    ) -> None: ...

    def head_object(self, *, key: str) -> S3Object: ...

    def delete_object(self, *, key: str) -> None: ...

    def list_objects(self, *, prefix: str, max_keys: int) -> list[S3Object]: ...

    def object_url(self, *, key: str) -> str: ...


class S3Adapter:
    """Bucket-scoped S3 calls. botocore errors propagate unchanged.

    Configuration comes from the environment:
    - IMAGE_S3_BUCKET_NAME (required)
    - AWS_ENDPOINT_URL for LocalStack
    - IMAGE_PUBLIC_BASE_URL when assets are served from a CDN
    """

    def __init__(self) -> None:
        bucket_name = os.getenv(ENV_IMAGE_S3_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_IMAGE_S3_BUCKET_NAME} environment variable is not set")

        self._bucket = bucket_name
        self._endpoint_url = os.getenv(ENV_AWS_ENDPOINT_URL)
        self._region = os.getenv(ENV_AWS_REGION) or DEFAULT_AWS_REGION
        self._public_base_url = os.getenv(ENV_IMAGE_PUBLIC_BASE_URL)

        self._client = boto3.client("s3", endpoint_url=self._endpoint_url, region_name=self._region)

    def _bucket_call(self, operation: str, **kwargs: Any) -> Any:
        return getattr(self._client, operation)(Bucket=self._bucket, **kwargs)

    def put_object(
        self, *, key: str, body: bytes, content_type: str, metadata: dict[str, str]
    ) -> None:
        self._bucket_call(
            "put_object", Key=key, Body=body, ContentType=content_type, Metadata=metadata
        )

    def head_object(self, *, key: str) -> S3Object:
        response: S3Object = self._bucket_call("head_object", Key=key)
        return response

    def delete_object(self, *, key: str) -> None:
        self._bucket_call("delete_object", Key=key)

    def list_objects(self, *, prefix: str, max_keys: int) -> list[S3Object]:
        """One ListObjectsV2 call; continuation tokens are not followed."""
        response = self._bucket_call("list_objects_v2", Prefix=prefix, MaxKeys=max_keys)
        return list(response.get("Contents", []))

    def object_url(self, *, key: str) -> str:
        """Public URL of ``key``: CDN base, LocalStack path style, or virtual-hosted S3."""
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{key}"

        if self._endpoint_url:
            return f"{self._endpoint_url.rstrip('/')}/{self._bucket}/{key}"

        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"
