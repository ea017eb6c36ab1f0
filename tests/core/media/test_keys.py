import uuid

import pytest

from core.media.keys import build_object_key, extension_from, generate_media_id


class TestExtensionFrom:
    @pytest.mark.parametrize(
        "mime_type,expected",
        [
            ("image/jpeg", "jpg"),
            ("image/png", "png"),
            ("image/webp", "webp"),
            ("image/gif", "gif"),
            ("image/avif", "avif"),
        ],
    )
    def test_known_mime_types(self, mime_type: str, expected: str) -> None:
        assert extension_from(mime_type, "ignored.bin") == expected

    def test_falls_back_to_filename_suffix(self) -> None:
        assert extension_from("application/octet-stream", "Photo.TIFF") == "tiff"

    def test_suffix_is_sanitized(self) -> None:
        assert extension_from("application/octet-stream", "x.p-n_g!") == "png"

    def test_no_filename(self) -> None:
        assert extension_from("application/octet-stream") == ""

    def test_filename_without_suffix(self) -> None:
        assert extension_from("application/octet-stream", "README") == ""


class TestBuildObjectKey:
    def test_with_extension(self) -> None:
        assert build_object_key("user-1", "abc", "png") == "uploads/user-1/abc.png"

    def test_without_extension(self) -> None:
        assert build_object_key("user-1", "abc", "") == "uploads/user-1/abc"

    def test_key_never_contains_client_name(self) -> None:
        key = build_object_key("user-1", generate_media_id(), extension_from("image/png", "../../x.png"))

        assert ".." not in key
        assert key.count("/") == 2


class TestGenerateMediaId:
    def test_is_uuid4(self) -> None:
        assert uuid.UUID(generate_media_id()).version == 4

    def test_is_unique(self) -> None:
        assert len({generate_media_id() for _ in range(100)}) == 100
