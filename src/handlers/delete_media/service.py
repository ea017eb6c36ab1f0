"""Business logic for media deletion.

Deletion is a soft delete: the metadata row moves from ACTIVE to DELETED and
the stored object is kept unless a purge is requested. The ordering is fixed:
metadata transition, event publish, then the optional object purge.
"""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.container import ServiceContainer
from core.media.access import load_accessible_media, media_not_found
from core.media.events import publish_event
from core.models.auth import AuthContext
from core.models.media import MediaEventKind
from core.repositories.event_publisher import MediaEventPublisher
from core.repositories.metadata_repository import MediaMetadataRepository
from core.repositories.storage_repository import MediaStorageRepository

from .models import DeleteMediaResponse

logger = Logger(utc=True)


class DeleteService:
    """Application service responsible for deleting media."""

    def __init__(
        self,
        *,
        storage: MediaStorageRepository,
        metadata: MediaMetadataRepository,
        events: MediaEventPublisher,
    ) -> None:
        self.storage = storage
        self.metadata = metadata
        self.events = events

    @classmethod
    def from_container(cls, container: ServiceContainer) -> DeleteService:
        return cls(
            storage=container.storage,
            metadata=container.metadata,
            events=container.events,
        )

    def soft_delete(
        self,
        *,
        auth: AuthContext,
        media_id: str,
        purge: bool = False,
    ) -> DeleteMediaResponse:
        """Soft-delete a media record, optionally purging its object.

        Raises:
            NotFoundError: If the record is absent or already deleted
            ForbiddenError: If the caller is neither the owner nor ADMIN
            MetadataStoreError: If the status transition fails
            StorageError: If the purge fails
        """
        logger.debug("Starting media deletion", extra={"media_id": media_id, "purge": purge})

        load_accessible_media(self.metadata, auth=auth, media_id=media_id)

        deleted = self.metadata.soft_delete_media(media_id=media_id)
        if deleted is None:
            # lost the race, or the record was already deleted
            raise media_not_found(media_id)

        publish_event(self.events, MediaEventKind.DELETED, deleted)

        if purge:
            self.storage.delete_object(key=deleted.stored_key)

        logger.info(
            "Media deleted",
            extra={"media_id": media_id, "user_id": auth.user_id, "purged": purge},
        )

        return DeleteMediaResponse(
            id=deleted.id,
            deleted_at=deleted.deleted_at or "",
            purged=purge,
        )
