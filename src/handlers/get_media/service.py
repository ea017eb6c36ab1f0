"""Business logic for fetching a single media record."""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.container import ServiceContainer
from core.media.access import load_accessible_media, media_not_found
from core.media.urls import DownloadUrlResolver
from core.models.auth import AuthContext
from core.models.media import MediaObjectResponse
from core.repositories.metadata_repository import MediaMetadataRepository

logger = Logger(utc=True)


class GetService:
    """Application service responsible for single-media retrieval."""

    def __init__(self, *, metadata: MediaMetadataRepository, urls: DownloadUrlResolver) -> None:
        self.metadata = metadata
        self.urls = urls

    @classmethod
    def from_container(cls, container: ServiceContainer) -> GetService:
        return cls(metadata=container.metadata, urls=container.urls)

    def get_media(
        self,
        *,
        auth: AuthContext,
        media_id: str,
        presign: bool = False,
    ) -> MediaObjectResponse:
        """Return a record with its download URL.

        Deleted records are only visible to ADMIN callers, and never carry a
        URL.

        Raises:
            NotFoundError: If absent, or deleted and the caller is not ADMIN
            ForbiddenError: If the caller is neither the owner nor ADMIN
            StorageError: If URL signing fails
        """
        record = load_accessible_media(self.metadata, auth=auth, media_id=media_id)

        if not record.is_active and not auth.is_privileged:
            raise media_not_found(media_id)

        url = self.urls.resolve_for(record)
        presigned_url = self.urls.signed_url_for(record) if presign else None

        logger.info(
            "Media retrieved",
            extra={"media_id": media_id, "user_id": auth.user_id, "presign": presign},
        )

        return MediaObjectResponse.from_record(record, url=url, presigned_url=presigned_url)
