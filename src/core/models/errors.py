"""Domain errors raised by the gallery stores and service."""

from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_DUPLICATE_ASSET,
    ERROR_CODE_INVALID_FILTER,
    ERROR_CODE_MEDIA_STORE,
    ERROR_CODE_RECORD_STORE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_VALIDATION_FAILED,
)


class GalleryError(Exception):
    """
    Base exception for all gallery service errors.

    ``message`` is safe to return to API clients. ``error_code`` defaults
    to the subclass's ``default_error_code`` and ``details`` carries
    identifiers for logging (record id, asset id).
    """

    default_error_code: ClassVar[str] = "GALLERY_ERROR"

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}

        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, error_code={self.error_code!r})"


class ValidationError(GalleryError):
    """Request or payload validation failed."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class NotFoundError(GalleryError):
    """A requested record or asset does not exist."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class DuplicateImageError(GalleryError):
    """A record with the same record id or asset id already exists."""

    default_error_code = ERROR_CODE_DUPLICATE_ASSET


class FilterError(GalleryError):
    """Query, sort or pagination parameters are invalid."""

    default_error_code = ERROR_CODE_INVALID_FILTER


class MediaStoreError(GalleryError):
    """An S3 asset operation failed."""

    default_error_code = ERROR_CODE_MEDIA_STORE


class RecordStoreError(GalleryError):
    """A DynamoDB record operation failed."""

    default_error_code = ERROR_CODE_RECORD_STORE
