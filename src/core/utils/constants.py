"""Global constants used throughout the application.

This module centralizes error codes, MIME tables, and request constraints
shared by handlers, services, and infrastructure implementations.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Authentication / Authorization
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_RATE_LIMITED = "RATE_LIMITED"

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_INVALID_IMAGE = "INVALID_IMAGE"
ERROR_CODE_INVALID_CURSOR = "INVALID_CURSOR"
ERROR_CODE_UPLOAD_FAILED = "UPLOAD_FAILED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_MEDIA_NOT_FOUND = "MEDIA_NOT_FOUND"

# Storage Errors
ERROR_CODE_S3 = "S3_ERROR"
ERROR_CODE_OBJECT_UPLOAD_FAILED = "OBJECT_UPLOAD_FAILED"
ERROR_CODE_OBJECT_DELETE_FAILED = "OBJECT_DELETE_FAILED"
ERROR_CODE_PRESIGNED_URL_FAILED = "PRESIGNED_URL_FAILED"
ERROR_CODE_BUCKET_PROVISION_FAILED = "BUCKET_PROVISION_FAILED"

# Metadata / DynamoDB Errors
ERROR_CODE_DYNAMODB = "DYNAMODB_ERROR"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"

# Notifier / Rate limiter
ERROR_CODE_EVENT_PUBLISH_FAILED = "EVENT_PUBLISH_FAILED"
ERROR_CODE_RATE_LIMITER_FAILED = "RATE_LIMITER_FAILED"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB in bytes

MIME_TYPE_EXTENSION_MAP: Final[dict[str, str]] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/avif": "avif",
}

DEFAULT_ALLOWED_MIME_TYPES: Final[tuple[str, ...]] = tuple(MIME_TYPE_EXTENSION_MAP)

GENERIC_BINARY_MIME_TYPE = "application/octet-stream"

SINGLE_FILE_FIELD = "file"
MULTI_FILE_FIELD = "files"
MAX_FILES_PER_FIELD: Final[dict[str, int]] = {
    SINGLE_FILE_FIELD: 1,
    MULTI_FILE_FIELD: 10,
}

FALLBACK_FILENAME_BASE = "file"
FALLBACK_FILENAME_MAX_LENGTH = 180
UNKNOWN_ORIGINAL_NAME = "unknown"

OBJECT_KEY_PREFIX = "uploads"

# ============================================================================
# Identity Constraints
# ============================================================================

USER_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.@:|-]{0,127}$"
DEFAULT_ROLE = "USER"
PRIVILEGED_ROLE = "ADMIN"

# ============================================================================
# Pagination Constraints
# ============================================================================

DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 50

# ============================================================================
# Metadata Table Layout
# ============================================================================

MEDIA_PARTITION_VALUE = "media"
OWNER_UPLOADED_INDEX = "owner-uploaded-index"
PARTITION_UPLOADED_INDEX = "partition-uploaded-index"
UPLOADED_SORT_KEY_ATTRIBUTE = "uploaded_key"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key,X-User-Id,X-User-Role"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

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
