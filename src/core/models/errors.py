"""Domain error taxonomy for the media service.

Every error raised by services and infrastructure implementations derives from
``MediaServiceError`` and declares an ``ErrorKind``. The kind is the only thing
the transport layer looks at (see ``core.utils.response``).
"""

from enum import Enum
from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_DYNAMODB,
    ERROR_CODE_EVENT_PUBLISH_FAILED,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_FORBIDDEN,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_INVALID_CURSOR,
    ERROR_CODE_INVALID_IMAGE,
    ERROR_CODE_RATE_LIMITED,
    ERROR_CODE_RATE_LIMITER_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_S3,
    ERROR_CODE_UNAUTHORIZED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_UPLOAD_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
)


class ErrorKind(str, Enum):
    """Transport-independent error categories."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL = "internal"


class MediaServiceError(Exception):
    """
    Base exception for all media service errors.

    Subclasses pick a ``kind`` and a default error code. Callers must provide a
    message; optional contextual information can be supplied via `details`.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    default_error_code: ClassVar[str] = ERROR_CODE_INTERNAL_ERROR

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


class UnauthorizedError(MediaServiceError):
    """Raised when the caller identity is missing or invalid."""

    kind = ErrorKind.UNAUTHORIZED
    default_error_code = ERROR_CODE_UNAUTHORIZED


class ForbiddenError(MediaServiceError):
    """Raised when the caller is neither the owner nor privileged."""

    kind = ErrorKind.FORBIDDEN
    default_error_code = ERROR_CODE_FORBIDDEN


class NotFoundError(MediaServiceError):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND
    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class ValidationError(MediaServiceError):
    """Raised when request validation fails."""

    kind = ErrorKind.VALIDATION
    default_error_code = ERROR_CODE_VALIDATION_FAILED


class MIMETypeError(ValidationError):
    """Raised when a MIME type is not in the allow-list."""

    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE


class FileSizeError(ValidationError):
    """Raised when a declared file size exceeds the configured ceiling."""

    default_error_code = ERROR_CODE_FILE_SIZE_EXCEEDED


class InvalidImageError(ValidationError):
    """Raised when an uploaded payload is not a decodable raster image."""

    default_error_code = ERROR_CODE_INVALID_IMAGE


class InvalidCursorError(ValidationError):
    """Raised when a pagination cursor cannot be parsed."""

    default_error_code = ERROR_CODE_INVALID_CURSOR


class UploadBatchFailedError(ValidationError):
    """Raised when every file of an upload batch failed."""

    default_error_code = ERROR_CODE_UPLOAD_FAILED


class PayloadTooLargeError(MediaServiceError):
    """Raised when an uploaded file exceeds the size ceiling."""

    kind = ErrorKind.PAYLOAD_TOO_LARGE
    default_error_code = ERROR_CODE_FILE_SIZE_EXCEEDED


class RateLimitedError(MediaServiceError):
    """Raised when the caller exhausted its request window."""

    kind = ErrorKind.RATE_LIMITED
    default_error_code = ERROR_CODE_RATE_LIMITED


class UpstreamFailureError(MediaServiceError):
    """Raised when a managed collaborator fails."""

    kind = ErrorKind.UPSTREAM_FAILURE


class StorageError(UpstreamFailureError):
    """Raised when an object storage operation fails."""

    default_error_code = ERROR_CODE_S3


class MetadataStoreError(UpstreamFailureError):
    """Raised when a metadata store operation fails."""

    default_error_code = ERROR_CODE_DYNAMODB


class EventPublishError(UpstreamFailureError):
    """Raised when a media event cannot be published."""

    default_error_code = ERROR_CODE_EVENT_PUBLISH_FAILED


class RateLimiterError(UpstreamFailureError):
    """Raised when the rate limiter backend fails."""

    default_error_code = ERROR_CODE_RATE_LIMITER_FAILED
