"""multipart/form-data parsing for API Gateway proxy events.

API Gateway hands binary bodies to Lambda base64-encoded. The body is decoded
and parsed with the standard ``email`` MIME parser; only file parts are kept.
"""

import base64
import binascii
from dataclasses import dataclass
from email.message import Message
from email.parser import BytesParser
from typing import Any

from core.models.errors import PayloadTooLargeError, ValidationError
from core.utils.constants import MAX_FILES_PER_FIELD, format_file_size


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """Single file part as received from the transport.

    ``filename`` is the raw name with one character per header byte, exactly as
    browsers' UTF-8 bytes look after single-byte decoding.
    """

    field_name: str
    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def get_header(headers: dict[str, Any] | None, name: str) -> str | None:
    """Case-insensitive header lookup (API Gateway preserves client casing)."""
    if not headers:
        return None

    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def decode_body(event: dict[str, Any]) -> bytes:
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(message="Invalid request body encoding") from exc

    if isinstance(body, bytes):
        return body
    return body.encode("utf-8", errors="surrogateescape")


def _raw_filename(part: Message) -> str | None:
    filename = part.get_filename()
    if filename is None:
        return None

    # compat32 decodes raw header bytes with surrogateescape; restore them
    # one-per-character so the filename normalizer sees the transport form.
    try:
        return filename.encode("ascii", errors="surrogateescape").decode("latin-1")
    except UnicodeEncodeError:
        return filename


def parse_multipart_files(event: dict[str, Any], *, max_upload_bytes: int) -> list[UploadedFile]:
    """Extract file parts from a multipart/form-data proxy event.

    Files are returned in body order, ``file`` parts before ``files`` parts.

    Raises:
        ValidationError: If the body is not multipart, a file field is unknown,
            a field holds too many files, or no file was sent
        PayloadTooLargeError: If a part exceeds ``max_upload_bytes``
    """
    content_type = get_header(event.get("headers"), "content-type") or ""
    if not content_type.lower().startswith("multipart/form-data"):
        raise ValidationError(message="Content-Type must be multipart/form-data")

    body = decode_body(event)
    envelope = f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n".encode("latin-1")
    message = BytesParser().parsebytes(envelope + body)

    if not message.is_multipart():
        raise ValidationError(message="Malformed multipart body")

    grouped: dict[str, list[UploadedFile]] = {field: [] for field in MAX_FILES_PER_FIELD}

    for part in message.get_payload():
        if not isinstance(part, Message):
            continue

        field_name = part.get_param("name", header="content-disposition")
        if not isinstance(field_name, str):
            continue

        filename = _raw_filename(part)
        if filename is None:
            # plain form field
            continue

        if field_name not in grouped:
            raise ValidationError(
                message=f"Unexpected file field: {field_name}",
                details={"field": field_name},
            )

        if len(grouped[field_name]) >= MAX_FILES_PER_FIELD[field_name]:
            raise ValidationError(
                message=f"Too many files for field: {field_name}",
                details={"field": field_name, "max": MAX_FILES_PER_FIELD[field_name]},
            )

        data = part.get_payload(decode=True) or b""
        if len(data) > max_upload_bytes:
            raise PayloadTooLargeError(
                message="File too large",
                details={"field": field_name, "max_size": format_file_size(max_upload_bytes)},
            )

        grouped[field_name].append(
            UploadedFile(
                field_name=field_name,
                filename=filename,
                content_type=part.get("Content-Type"),
                data=data,
            )
        )

    files = [uploaded for field in MAX_FILES_PER_FIELD for uploaded in grouped[field]]
    if not files:
        raise ValidationError(message="file field is required")

    return files
