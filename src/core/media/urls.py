"""Download URL synthesis for stored media."""

from urllib.parse import quote

from core.media.filename import build_ascii_fallback_filename, build_content_disposition
from core.media.keys import extension_from
from core.models.media import MediaObject
from core.repositories.storage_repository import MediaStorageRepository
from core.utils.constants import GENERIC_BINARY_MIME_TYPE


class DownloadUrlResolver:
    """Chooses between public CDN URLs and signed storage URLs.

    Public URLs are issued only when public reads are enabled and a CDN base is
    configured. Every other case falls back to a time-limited signed GET whose
    response carries an inline Content-Disposition for the display name.
    """

    def __init__(
        self,
        storage: MediaStorageRepository,
        *,
        public_read: bool,
        cdn_base_url: str | None,
        expires_in: int,
    ) -> None:
        self._storage = storage
        self._public_read = public_read
        self._cdn_base_url = cdn_base_url
        self._expires_in = expires_in

    @property
    def public_urls_enabled(self) -> bool:
        return self._public_read and bool(self._cdn_base_url)

    def resolve(self, key: str, display_name: str | None = None) -> str:
        if self.public_urls_enabled:
            return self.public_url(key)
        return self.signed_url(key, display_name)

    def public_url(self, key: str) -> str:
        base = (self._cdn_base_url or "").rstrip("/")
        return f"{base}/{quote(key, safe='/')}"

    def signed_url(self, key: str, display_name: str | None = None) -> str:
        content_disposition = None
        if display_name:
            extension = extension_from(GENERIC_BINARY_MIME_TYPE, display_name)
            fallback = build_ascii_fallback_filename(display_name, extension)
            content_disposition = build_content_disposition(display_name, fallback)

        return self._storage.generate_presigned_get_url(
            key=key,
            expires_in=self._expires_in,
            content_disposition=content_disposition,
        )

    def resolve_for(self, record: MediaObject) -> str | None:
        """Return the download URL for a record, or None once it is deleted."""
        if not record.is_active:
            return None
        return self.resolve(record.stored_key, record.original_name)

    def signed_url_for(self, record: MediaObject) -> str | None:
        if not record.is_active:
            return None
        return self.signed_url(record.stored_key, record.original_name)
