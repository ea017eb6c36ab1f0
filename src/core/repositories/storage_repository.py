"""Abstract contract for media object storage."""

from abc import ABC, abstractmethod


class MediaStorageRepository(ABC):
    """Contract for storing media objects and issuing signed URLs.

    Implementations could be S3, GCS, MinIO, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def ensure_bucket(self) -> None:
        """Create the backing bucket when it does not exist (idempotent).

        Raises:
            StorageError: If provisioning fails
        """

    @abstractmethod
    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Store an object under ``key``.

        Raises:
            StorageError: If upload fails
        """

    @abstractmethod
    def delete_object(self, *, key: str) -> None:
        """Delete an object by key.

        Raises:
            StorageError: If deletion fails
        """

    @abstractmethod
    def generate_presigned_put_url(
        self,
        *,
        key: str,
        content_type: str,
        expires_in: int,
    ) -> str:
        """Issue a signed URL allowing one PUT of ``key`` with ``content_type``.

        Raises:
            StorageError: If signing fails
        """

    @abstractmethod
    def generate_presigned_get_url(
        self,
        *,
        key: str,
        expires_in: int,
        content_disposition: str | None = None,
    ) -> str:
        """Issue a signed GET URL, optionally overriding Content-Disposition.

        Raises:
            StorageError: If signing fails
        """
