"""Gallery-wide constants.

Error codes, upload and listing limits, CORS values, and the names of the
environment variables the adapters read. Handlers, stores, and tests import
these instead of repeating literals.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_FILTER = "INVALID_FILTER"
ERROR_CODE_INVALID_IMAGE = "INVALID_IMAGE"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
ERROR_CODE_ASSET_NOT_FOUND = "ASSET_NOT_FOUND"

# Media Store (S3) Errors
ERROR_CODE_MEDIA_STORE = "MEDIA_STORE_ERROR"
ERROR_CODE_ASSET_UPLOAD_FAILED = "ASSET_UPLOAD_FAILED"
ERROR_CODE_ASSET_REPLACE_FAILED = "ASSET_REPLACE_FAILED"
ERROR_CODE_ASSET_DELETE_FAILED = "ASSET_DELETE_FAILED"
ERROR_CODE_ASSET_FETCH_FAILED = "ASSET_FETCH_FAILED"
ERROR_CODE_ASSET_LIST_FAILED = "ASSET_LIST_FAILED"

# Record Store (DynamoDB) Errors
ERROR_CODE_RECORD_STORE = "RECORD_STORE_ERROR"
ERROR_CODE_DUPLICATE_ASSET = "DUPLICATE_ASSET"
ERROR_CODE_RECORD_CREATE_FAILED = "RECORD_CREATE_FAILED"
ERROR_CODE_RECORD_FETCH_FAILED = "RECORD_FETCH_FAILED"
ERROR_CODE_RECORD_UPDATE_FAILED = "RECORD_UPDATE_FAILED"
ERROR_CODE_RECORD_DELETE_FAILED = "RECORD_DELETE_FAILED"
ERROR_CODE_RECORD_QUERY_FAILED = "RECORD_QUERY_FAILED"
ERROR_CODE_RECORD_AGGREGATE_FAILED = "RECORD_AGGREGATE_FAILED"
ERROR_CODE_SCHEMA_SETUP_FAILED = "SCHEMA_SETUP_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes

ALLOWED_CONTENT_TYPE_PREFIX = "image/"

# Pillow format name -> format name reported by the media store
PILLOW_FORMAT_MAP: Final[dict[str, str]] = {
    "JPEG": "jpg",
    "MPO": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "WEBP": "webp",
    "BMP": "bmp",
    "TIFF": "tiff",
    "ICO": "ico",
}


# ============================================================================
# Media Store Configuration
# ============================================================================

ASSET_FOLDER = "gallery"
SYNC_MAX_ASSETS = 500


# ============================================================================
# Record Store Configuration
# ============================================================================

RECORD_ID_PREFIX = "img_"
RECORD_ID_PATTERN = r"^img_[0-9a-f]{32}$"
ASSET_ID_INDEX_NAME = "asset-id-index"


# ============================================================================
# Pagination Constraints
# ============================================================================

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100

# ============================================================================
# Sorting Constraints
# ============================================================================

# API sort key -> stored attribute
SORT_FIELD_MAP: Final[dict[str, str]] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
}
ALLOWED_SORT_FIELDS: Final[frozenset[str]] = frozenset(SORT_FIELD_MAP)
ALLOWED_SORT_ORDERS: Final[frozenset[str]] = frozenset({"asc", "desc"})
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

TRUTHY_FORM_VALUES: Final[frozenset[str]] = frozenset({"true", "1", "on"})

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Observability
# ============================================================================

METRICS_NAMESPACE = "ImageGallery"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
ENV_IMAGE_PUBLIC_BASE_URL = "IMAGE_PUBLIC_BASE_URL"
DEFAULT_AWS_REGION = "us-east-1"

# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
