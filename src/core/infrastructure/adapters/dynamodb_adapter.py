"""Thin adapter over the boto3 DynamoDB resource for the image record table."""

import os
from typing import Any, Protocol

import boto3

from core.utils.constants import (
    DEFAULT_AWS_REGION,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_METADATA_TABLE_NAME,
)

Item = dict[str, Any]


class DynamoDBAdapterProtocol(Protocol):
    """Table operations the record store needs (repository-facing)."""

    table_name: str

    def put_item(self, *, item: Item, condition_expression: str | None = None) -> Item: ...

    def get_item(self, *, key: Item) -> Item: ...

    def update_item(self, *, key: Item, **kwargs: Any) -> Item: ...

    def delete_item(self, *, key: Item, **kwargs: Any) -> Item: ...

    def query(self, **kwargs: Any) -> Item: ...

    def scan(self, **kwargs: Any) -> Item: ...

    def describe_table(self) -> Item: ...

    def create_table(self, **kwargs: Any) -> None: ...


class DynamoDBAdapter:
    """Table-scoped DynamoDB calls. botocore errors propagate unchanged.

    Configuration comes from the environment:
    - IMAGE_METADATA_TABLE_NAME (required)
    - AWS_ENDPOINT_URL for LocalStack
    """

    def __init__(self) -> None:
        table_name = os.getenv(ENV_IMAGE_METADATA_TABLE_NAME)
        if not table_name:
            raise RuntimeError(f"{ENV_IMAGE_METADATA_TABLE_NAME} environment variable is not set")

        self.table_name = table_name
        self._resource = boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION) or DEFAULT_AWS_REGION,
        )
        self._table = self._resource.Table(table_name)

    def _table_call(self, operation: str, **kwargs: Any) -> Item:
        response: Item = getattr(self._table, operation)(**kwargs)
        return response

    def put_item(self, *, item: Item, condition_expression: str | None = None) -> Item:
        if condition_expression:
            return self._table_call("put_item", Item=item, ConditionExpression=condition_expression)
        return self._table_call("put_item", Item=item)

    def get_item(self, *, key: Item) -> Item:
        return self._table_call("get_item", Key=key)

    def update_item(self, *, key: Item, **kwargs: Any) -> Item:
        return self._table_call("update_item", Key=key, **kwargs)

    def delete_item(self, *, key: Item, **kwargs: Any) -> Item:
        return self._table_call("delete_item", Key=key, **kwargs)

    def query(self, **kwargs: Any) -> Item:
        return self._table_call("query", **kwargs)

    def scan(self, **kwargs: Any) -> Item:
        """A single scan page; the caller follows ``LastEvaluatedKey``."""
        return self._table_call("scan", **kwargs)

    def describe_table(self) -> Item:
        response = self._resource.meta.client.describe_table(TableName=self.table_name)
        table: Item = response["Table"]
        return table

    def create_table(self, **kwargs: Any) -> None:
        """Create the table and block until DynamoDB reports it as existing."""
        table = self._resource.create_table(TableName=self.table_name, **kwargs)
        table.wait_until_exists()
