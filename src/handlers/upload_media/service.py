"""Business logic for server-mediated media uploads.

Each file of a batch runs the same sequential pipeline: MIME allow-list,
raster probe, key derivation, object write, metadata write, event publish and
URL resolution. A file that fails any step is reported in ``failed`` and never
aborts the rest of the batch.
"""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.config import MediaSettings
from core.container import ServiceContainer
from core.media.events import publish_event
from core.media.filename import (
    build_ascii_fallback_filename,
    build_content_disposition,
    normalize_upload_filename,
)
from core.media.keys import build_object_key, extension_from, generate_media_id
from core.media.probe import probe_image
from core.media.urls import DownloadUrlResolver
from core.models.auth import AuthContext
from core.models.errors import MediaServiceError, UploadBatchFailedError
from core.models.media import MediaEventKind, MediaObject, MediaObjectResponse
from core.repositories.event_publisher import MediaEventPublisher
from core.repositories.metadata_repository import MediaMetadataRepository
from core.repositories.storage_repository import MediaStorageRepository
from core.utils.constants import UNKNOWN_ORIGINAL_NAME
from core.utils.mime import assert_mime_type, resolve_mime_type
from core.utils.multipart import UploadedFile
from core.utils.time import utc_now_iso

from .models import UploadBatchResponse, UploadFailure

logger = Logger(utc=True)

UPLOAD_FAILED_MESSAGE = "Upload failed"


class UploadService:
    """Application service responsible for media uploads."""

    def __init__(
        self,
        *,
        storage: MediaStorageRepository,
        metadata: MediaMetadataRepository,
        events: MediaEventPublisher,
        urls: DownloadUrlResolver,
        settings: MediaSettings,
    ) -> None:
        self.storage = storage
        self.metadata = metadata
        self.events = events
        self.urls = urls
        self.settings = settings

    @classmethod
    def from_container(cls, container: ServiceContainer) -> UploadService:
        return cls(
            storage=container.storage,
            metadata=container.metadata,
            events=container.events,
            urls=container.urls,
            settings=container.settings,
        )

    def upload_files(self, *, auth: AuthContext, files: list[UploadedFile]) -> UploadBatchResponse:
        """Upload every file independently, in input order.

        Returns:
            Batch outcome with ``items`` and ``failed`` preserving input order

        Raises:
            UploadBatchFailedError: If every file failed
        """
        result = UploadBatchResponse()

        for uploaded in files:
            display_name = normalize_upload_filename(uploaded.filename or UNKNOWN_ORIGINAL_NAME)

            try:
                result.items.append(self.upload_file(auth=auth, uploaded=uploaded))
            except MediaServiceError as exc:
                logger.warning(
                    "File rejected",
                    extra={
                        "owner_id": auth.user_id,
                        "file_name": display_name,
                        "error_code": exc.error_code,
                    },
                )
                result.failed.append(UploadFailure(file_name=display_name, message=exc.message))

        if not result.items:
            first_message = result.failed[0].message if result.failed else UPLOAD_FAILED_MESSAGE
            raise UploadBatchFailedError(
                message=first_message,
                details={"failed": [failure.to_response() for failure in result.failed]},
            )

        logger.info(
            "Upload batch processed",
            extra={
                "owner_id": auth.user_id,
                "succeeded": len(result.items),
                "failed": len(result.failed),
            },
        )
        return result

    def upload_file(self, *, auth: AuthContext, uploaded: UploadedFile) -> MediaObjectResponse:
        """Run the upload pipeline for a single file.

        Raises:
            MIMETypeError: If the MIME type is not allowed
            InvalidImageError: If the payload is not a decodable image
            StorageError: If the object write fails
            MetadataStoreError: If the metadata write fails
        """
        # Step 1: MIME allow-list
        mime_type = resolve_mime_type(uploaded.content_type, uploaded.data)
        assert_mime_type(mime_type, self.settings.allowed_mime_types_list)

        # Step 2: Probe raster dimensions
        dimensions = probe_image(uploaded.data, include_detail=not self.settings.is_production)

        # Step 3: Identity and key
        media_id = generate_media_id()
        original_name = normalize_upload_filename(uploaded.filename or UNKNOWN_ORIGINAL_NAME)
        extension = extension_from(mime_type, original_name)
        key = build_object_key(auth.user_id, media_id, extension)
        fallback_name = build_ascii_fallback_filename(original_name, extension)

        # Step 4: Object first, so a failure leaves no metadata row behind
        self.storage.put_object(
            key=key,
            body=uploaded.data,
            content_type=mime_type,
            content_disposition=build_content_disposition(original_name, fallback_name),
            metadata={"owner": auth.user_id},
        )

        # Step 5: Metadata
        record = self.metadata.create_media(
            record=MediaObject(
                id=media_id,
                owner_id=auth.user_id,
                original_name=original_name,
                stored_key=key,
                mime_type=mime_type,
                size_bytes=uploaded.size,
                width=dimensions.width,
                height=dimensions.height,
                uploaded_at=utc_now_iso(),
            )
        )

        # Step 6: Notify
        publish_event(self.events, MediaEventKind.UPLOADED, record)

        # Step 7: Download URL
        url = self.urls.resolve(record.stored_key, record.original_name)

        logger.info(
            "Media uploaded",
            extra={"media_id": record.id, "owner_id": record.owner_id, "key": key},
        )
        return MediaObjectResponse.from_record(record, url=url)

