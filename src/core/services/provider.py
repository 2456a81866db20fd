"""Composition root for the gallery service.

Stores are built once per Lambda container and injected into the service;
schema setup runs as part of that one-time construction.
"""

from functools import lru_cache

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_record_store import DynamoDBRecordStore
from core.infrastructure.aws.s3_media_store import S3MediaStore
from core.services.gallery_service import GalleryService

logger = Logger(utc=True)


@lru_cache(maxsize=1)
def get_gallery_service() -> GalleryService:
    """Return the process-wide GalleryService, building it on first use."""
    storage = S3MediaStore()
    records = DynamoDBRecordStore()
    records.ensure_schema()

    logger.info("Gallery service initialized")
    return GalleryService(storage=storage, records=records)
