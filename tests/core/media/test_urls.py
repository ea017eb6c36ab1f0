from unittest.mock import MagicMock

from core.media.urls import DownloadUrlResolver
from core.models.media import MediaStatus


def make_resolver(*, public_read=False, cdn_base_url=None, expires_in=900):
    storage = MagicMock()
    storage.generate_presigned_get_url.return_value = "https://signed.example/url"
    resolver = DownloadUrlResolver(
        storage,
        public_read=public_read,
        cdn_base_url=cdn_base_url,
        expires_in=expires_in,
    )
    return resolver, storage


class TestResolve:
    def test_public_mode_concatenates_base_and_key(self) -> None:
        resolver, storage = make_resolver(public_read=True, cdn_base_url="https://cdn.example.com/")

        url = resolver.resolve("uploads/user-1/abc.png", "사진.png")

        assert url == "https://cdn.example.com/uploads/user-1/abc.png"
        storage.generate_presigned_get_url.assert_not_called()

    def test_public_mode_uri_encodes_key(self) -> None:
        resolver, _ = make_resolver(public_read=True, cdn_base_url="https://cdn.example.com")

        assert resolver.resolve("uploads/a b/x.png") == "https://cdn.example.com/uploads/a%20b/x.png"

    def test_public_read_without_cdn_signs(self) -> None:
        resolver, storage = make_resolver(public_read=True, cdn_base_url=None)

        assert resolver.resolve("uploads/user-1/abc.png") == "https://signed.example/url"
        storage.generate_presigned_get_url.assert_called_once()

    def test_cdn_without_public_read_signs(self) -> None:
        resolver, storage = make_resolver(public_read=False, cdn_base_url="https://cdn.example.com")

        resolver.resolve("uploads/user-1/abc.png")

        storage.generate_presigned_get_url.assert_called_once()

    def test_signed_url_carries_disposition_and_expiry(self) -> None:
        resolver, storage = make_resolver(expires_in=120)

        resolver.resolve("uploads/user-1/abc.png", "사진.png")

        storage.generate_presigned_get_url.assert_called_once_with(
            key="uploads/user-1/abc.png",
            expires_in=120,
            content_disposition="inline; filename=\"file.png\"; filename*=UTF-8''%EC%82%AC%EC%A7%84.png",
        )

    def test_signed_url_without_display_name(self) -> None:
        resolver, storage = make_resolver()

        resolver.resolve("uploads/user-1/abc.png")

        storage.generate_presigned_get_url.assert_called_once_with(
            key="uploads/user-1/abc.png",
            expires_in=900,
            content_disposition=None,
        )

    def test_every_call_signs_again(self) -> None:
        resolver, storage = make_resolver()

        resolver.resolve("k")
        resolver.resolve("k")

        assert storage.generate_presigned_get_url.call_count == 2


class TestRecordResolution:
    def test_active_record_gets_url(self, make_media_record) -> None:
        resolver, _ = make_resolver()

        assert resolver.resolve_for(make_media_record()) == "https://signed.example/url"

    def test_deleted_record_never_gets_url(self, make_media_record) -> None:
        resolver, storage = make_resolver(public_read=True, cdn_base_url="https://cdn.example.com")
        record = make_media_record(status=MediaStatus.DELETED, deleted_at="2024-01-02T00:00:00.000000+00:00")

        assert resolver.resolve_for(record) is None
        assert resolver.signed_url_for(record) is None
        storage.generate_presigned_get_url.assert_not_called()

    def test_signed_url_for_ignores_public_mode(self, make_media_record) -> None:
        resolver, storage = make_resolver(public_read=True, cdn_base_url="https://cdn.example.com")

        assert resolver.signed_url_for(make_media_record()) == "https://signed.example/url"
        storage.generate_presigned_get_url.assert_called_once()
