"""Abstract contract for media metadata persistence."""

from abc import ABC, abstractmethod

from core.models.media import MediaObject


class MediaMetadataRepository(ABC):
    """Contract for storing and retrieving media metadata.

    Implementations could be DynamoDB, PostgreSQL, MongoDB, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def create_media(self, *, record: MediaObject) -> MediaObject:
        """Persist a new ACTIVE media record and return it.

        Raises:
            MetadataStoreError: If creation fails
        """

    @abstractmethod
    def list_media(
        self,
        *,
        owner_id: str | None,
        limit: int,
        cursor: str | None = None,
        include_deleted: bool = False,
    ) -> tuple[list[MediaObject], str | None]:
        """List media newest first using keyset pagination on ``uploaded_at#id``.

        Args:
            owner_id: Restrict to one owner, or None for every owner
            limit: Page size
            cursor: Sort key (``CursorPagination.sort_key``); rows whose
                sort key is ``<= cursor`` are returned
            include_deleted: Include DELETED records

        Returns:
            Tuple of (records, next_cursor). ``next_cursor`` is the sort key
            of the first record after the page, or None.

        Raises:
            MetadataStoreError: If the query fails
        """

    @abstractmethod
    def get_media(self, *, media_id: str) -> MediaObject | None:
        """Fetch a single record regardless of status, or None if absent.

        Raises:
            MetadataStoreError: If fetch fails
        """

    @abstractmethod
    def soft_delete_media(self, *, media_id: str) -> MediaObject | None:
        """Transition an ACTIVE record to DELETED.

        Returns:
            The updated record, or None when the record is absent or
            already DELETED

        Raises:
            MetadataStoreError: If the update fails
        """
