from collections.abc import Mapping

from core.models.errors import MIMETypeError
from core.utils.constants import GENERIC_BINARY_MIME_TYPE

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}

# ISO-BMFF brands, found at offset 8 after the "ftyp" box marker
AVIF_BRANDS = (b"avif", b"avis")


def detect_mime_type(file_data: bytes) -> str | None:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    if file_data[4:8] == b"ftyp" and file_data[8:12] in AVIF_BRANDS:
        return "image/avif"

    return None


def resolve_mime_type(declared: str | None, file_data: bytes) -> str:
    """Return the declared MIME type, sniffing the payload when it is generic.

    Browsers send ``application/octet-stream`` (or nothing) for files whose
    type they do not know; in that case the magic bytes decide.
    """
    normalized = (declared or "").split(";", 1)[0].strip().lower()

    if normalized and normalized != GENERIC_BINARY_MIME_TYPE:
        return normalized

    return detect_mime_type(file_data) or normalized or GENERIC_BINARY_MIME_TYPE


def assert_mime_type(mime_type: str, allowed: list[str]) -> None:
    """
    Raises:
        MIMETypeError: If ``mime_type`` is not in the allow-list
    """
    if mime_type not in allowed:
        raise MIMETypeError(
            message=f"Unsupported mime type. Allowed: {', '.join(allowed)}",
            details={"mime_type": mime_type},
        )
