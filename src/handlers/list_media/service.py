"""Business logic for listing media."""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.container import ServiceContainer
from core.filters.cursor_pagination import CursorPagination
from core.media.urls import DownloadUrlResolver
from core.models.auth import AuthContext
from core.models.errors import MediaServiceError
from core.models.media import MediaObject, MediaObjectResponse
from core.models.pagination import ListMediaResponse
from core.repositories.metadata_repository import MediaMetadataRepository

from .models import ListMediaRequest

logger = Logger(utc=True)


class ListService:
    """Application service responsible for keyset-paginated listings."""

    def __init__(self, *, metadata: MediaMetadataRepository, urls: DownloadUrlResolver) -> None:
        self.metadata = metadata
        self.urls = urls

    @classmethod
    def from_container(cls, container: ServiceContainer) -> ListService:
        return cls(metadata=container.metadata, urls=container.urls)

    def list_media(self, *, auth: AuthContext, request: ListMediaRequest) -> ListMediaResponse:
        """
        Raises:
            InvalidCursorError: If the cursor was not issued by this service
            MetadataStoreError: If the query fails
        """
        cursor = CursorPagination.parse_cursor(request.cursor)

        list_everything = request.scope == "all" and auth.is_privileged
        owner_id = None if list_everything else auth.user_id

        records, next_cursor = self.metadata.list_media(
            owner_id=owner_id,
            limit=request.limit,
            cursor=cursor,
            include_deleted=list_everything,
        )

        logger.info(
            "Media listed",
            extra={
                "user_id": auth.user_id,
                "scope": "all" if list_everything else "self",
                "count": len(records),
            },
        )

        return ListMediaResponse(
            items=[self._with_url(record) for record in records],
            next_cursor=CursorPagination.encode_cursor(next_cursor) if next_cursor else None,
        )

    def _with_url(self, record: MediaObject) -> MediaObjectResponse:
        try:
            url = self.urls.resolve_for(record)
        except MediaServiceError:
            logger.warning(
                "Download URL unavailable for listed media",
                extra={"media_id": record.id},
            )
            url = None

        return MediaObjectResponse.from_record(record, url=url)
