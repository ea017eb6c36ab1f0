"""Business logic for client-direct (presigned) uploads."""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.config import MediaSettings
from core.container import ServiceContainer
from core.media.keys import build_object_key, extension_from, generate_media_id
from core.models.auth import AuthContext
from core.models.errors import FileSizeError
from core.repositories.storage_repository import MediaStorageRepository
from core.utils.constants import format_file_size
from core.utils.mime import assert_mime_type

from .models import PresignMetadata, PresignUploadRequest, PresignUploadResponse

logger = Logger(utc=True)


class PresignService:
    """Issues signed PUT URLs so clients can upload straight to storage."""

    def __init__(self, *, storage: MediaStorageRepository, settings: MediaSettings) -> None:
        self.storage = storage
        self.settings = settings

    @classmethod
    def from_container(cls, container: ServiceContainer) -> PresignService:
        return cls(storage=container.storage, settings=container.settings)

    def create_upload_intent(
        self,
        *,
        auth: AuthContext,
        request: PresignUploadRequest,
    ) -> PresignUploadResponse:
        """
        Raises:
            MIMETypeError: If the declared MIME type is not allowed
            FileSizeError: If the declared size exceeds the upload ceiling
            StorageError: If signing fails
        """
        mime_type = request.mime_type.lower()
        assert_mime_type(mime_type, self.settings.allowed_mime_types_list)

        if request.size_bytes > self.settings.max_upload_bytes:
            raise FileSizeError(
                message="File exceeds size limit",
                details={
                    "size_bytes": request.size_bytes,
                    "max_size": format_file_size(self.settings.max_upload_bytes),
                },
            )

        media_id = generate_media_id()
        extension = extension_from(mime_type, request.file_name)
        key = build_object_key(auth.user_id, media_id, extension)
        expires_in = self.settings.presign_expiration_seconds

        upload_url = self.storage.generate_presigned_put_url(
            key=key,
            content_type=mime_type,
            expires_in=expires_in,
        )

        logger.info(
            "Presigned upload issued",
            extra={"media_id": media_id, "owner_id": auth.user_id, "key": key},
        )

        return PresignUploadResponse(
            id=media_id,
            upload_url=upload_url,
            key=key,
            expires_in=expires_in,
            metadata=PresignMetadata(
                owner_id=auth.user_id,
                mime_type=mime_type,
                size_bytes=request.size_bytes,
            ),
        )
