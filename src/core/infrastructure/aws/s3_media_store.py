"""S3-backed implementation of MediaStoreRepository."""

from io import BytesIO
import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from PIL import Image, UnidentifiedImageError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.asset import AssetInfo, UploadedAsset
from core.models.errors import (
    MediaStoreError,
    NotFoundError,
    ValidationError,
)
from core.repositories.storage_repository import MediaStoreRepository
from core.utils.constants import (
    ASSET_FOLDER,
    ERROR_CODE_ASSET_DELETE_FAILED,
    ERROR_CODE_ASSET_FETCH_FAILED,
    ERROR_CODE_ASSET_LIST_FAILED,
    ERROR_CODE_ASSET_NOT_FOUND,
    ERROR_CODE_ASSET_REPLACE_FAILED,
    ERROR_CODE_ASSET_UPLOAD_FAILED,
    ERROR_CODE_INVALID_IMAGE,
    PILLOW_FORMAT_MAP,
)

logger = Logger(utc=True)

_MISSING_OBJECT_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3MediaStore(MediaStoreRepository):
    """Media store implementation backed by Amazon S3.

    Assets are stored under the ``gallery/`` prefix and the object key is
    the asset identifier.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    @staticmethod
    def generate_asset_id() -> str:
        """Generate a unique asset identifier (the object key)."""
        return f"{ASSET_FOLDER}/{uuid.uuid4().hex}"

    @staticmethod
    def probe_image(file_data: bytes) -> tuple[str, int, int]:
        """Read format and dimensions from the image header.

        Raises:
            ValidationError: If Pillow cannot identify the payload
        """
        try:
            with Image.open(BytesIO(file_data)) as image:
                pillow_format = image.format or ""
                width, height = image.size
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            logger.warning("Unreadable image payload", extra={"size": len(file_data)})
            raise ValidationError(
                message="File is not a readable image",
                error_code=ERROR_CODE_INVALID_IMAGE,
            ) from exc

        image_format = PILLOW_FORMAT_MAP.get(pillow_format.upper(), pillow_format.lower())
        return image_format or "bin", width, height

    def upload_asset(
        self,
        *,
        file_data: bytes,
        content_type: str,
        asset_id: str | None = None,
    ) -> UploadedAsset:
        """Upload image bytes to S3 and describe the stored asset."""
        image_format, width, height = self.probe_image(file_data)
        key = asset_id or self.generate_asset_id()

        logger.debug(
            "Uploading asset",
            extra={"asset_id": key, "size": len(file_data), "format": image_format},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=content_type,
                metadata={
                    "format": image_format,
                    "width": str(width),
                    "height": str(height),
                },
            )
            logger.info("Asset uploaded successfully", extra={"asset_id": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"asset_id": key})
            raise MediaStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_ASSET_UPLOAD_FAILED,
                details={"asset_id": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading asset")
            raise MediaStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_ASSET_UPLOAD_FAILED,
                details={"asset_id": key},
            ) from exc

        return UploadedAsset(
            asset_id=key,
            url=self._s3.object_url(key=key),
            format=image_format,
            width=width,
            height=height,
            byte_size=len(file_data),
        )

    def replace_asset(
        self,
        *,
        asset_id: str,
        file_data: bytes,
        content_type: str,
    ) -> UploadedAsset:
        """Replace an asset by deleting it and re-uploading under the same key."""
        # Reject unreadable payloads before the existing object is removed
        self.probe_image(file_data)

        logger.debug("Replacing asset", extra={"asset_id": asset_id})

        try:
            self._s3.delete_object(key=asset_id)
        except ClientError as exc:
            logger.error("S3 deletion before replace failed", extra={"asset_id": asset_id})
            raise MediaStoreError(
                message="Unable to replace image at this time",
                error_code=ERROR_CODE_ASSET_REPLACE_FAILED,
                details={"asset_id": asset_id},
            ) from exc

        return self.upload_asset(
            file_data=file_data,
            content_type=content_type,
            asset_id=asset_id,
        )

    def delete_asset(self, *, asset_id: str) -> None:
        """Delete an asset object from S3."""
        logger.debug("Deleting asset", extra={"asset_id": asset_id})

        try:
            self._s3.delete_object(key=asset_id)
            logger.info("Asset deleted successfully", extra={"asset_id": asset_id})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"asset_id": asset_id})
            raise MediaStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_ASSET_DELETE_FAILED,
                details={"asset_id": asset_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting asset")
            raise MediaStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_ASSET_DELETE_FAILED,
                details={"asset_id": asset_id},
            ) from exc

    def fetch_asset(self, *, asset_id: str) -> AssetInfo:
        """Fetch asset details with a HEAD request."""
        logger.debug("Fetching asset details", extra={"asset_id": asset_id})

        try:
            response = self._s3.head_object(key=asset_id)

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                raise NotFoundError(
                    message="Asset not found",
                    error_code=ERROR_CODE_ASSET_NOT_FOUND,
                    details={"asset_id": asset_id},
                ) from exc

            logger.error("S3 head_object failed", extra={"asset_id": asset_id})
            raise MediaStoreError(
                message="Unable to retrieve image details",
                error_code=ERROR_CODE_ASSET_FETCH_FAILED,
                details={"asset_id": asset_id},
            ) from exc

        last_modified = response.get("LastModified")

        return AssetInfo(
            asset_id=asset_id,
            byte_size=int(response.get("ContentLength", 0)),
            content_type=response.get("ContentType"),
            last_modified=last_modified.isoformat() if last_modified else None,
            etag=response.get("ETag"),
        )

    def list_asset_ids(self, *, max_results: int) -> list[str]:
        """List asset ids under the gallery prefix (single bounded call)."""
        logger.debug("Listing assets", extra={"max_results": max_results})

        try:
            objects = self._s3.list_objects(
                prefix=f"{ASSET_FOLDER}/",
                max_keys=max_results,
            )

        except ClientError as exc:
            logger.error("S3 list_objects_v2 failed")
            raise MediaStoreError(
                message="Unable to list stored images",
                error_code=ERROR_CODE_ASSET_LIST_FAILED,
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing assets")
            raise MediaStoreError(
                message="Unable to list stored images",
                error_code=ERROR_CODE_ASSET_LIST_FAILED,
            ) from exc

        asset_ids = [str(obj["Key"]) for obj in objects]
        logger.info("Assets listed", extra={"count": len(asset_ids)})
        return asset_ids
