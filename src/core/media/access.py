"""Ownership checks shared by retrieval and deletion."""

from aws_lambda_powertools import Logger

from core.models.auth import AuthContext
from core.models.errors import ForbiddenError, NotFoundError
from core.models.media import MediaObject
from core.repositories.metadata_repository import MediaMetadataRepository
from core.utils.constants import ERROR_CODE_MEDIA_NOT_FOUND

logger = Logger(utc=True)


def media_not_found(media_id: str) -> NotFoundError:
    return NotFoundError(
        message="Not found",
        error_code=ERROR_CODE_MEDIA_NOT_FOUND,
        details={"media_id": media_id},
    )


def load_accessible_media(
    metadata: MediaMetadataRepository,
    *,
    auth: AuthContext,
    media_id: str,
) -> MediaObject:
    """Fetch a record and check the caller may act on it.

    Raises:
        NotFoundError: If the record does not exist
        ForbiddenError: If the caller is neither the owner nor ADMIN
    """
    record = metadata.get_media(media_id=media_id)

    if record is None:
        logger.info("Media not found", extra={"media_id": media_id})
        raise media_not_found(media_id)

    if not auth.can_access(record.owner_id):
        logger.warning(
            "Media access denied",
            extra={"media_id": media_id, "user_id": auth.user_id},
        )
        raise ForbiddenError(message="Forbidden", details={"media_id": media_id})

    return record
