"""Filename normalization and Content-Disposition synthesis.

Client filenames are untrusted and frequently mangled in transit: multipart
parsers commonly decode header bytes one byte per character, so a UTF-8 name
such as ``사진.png`` arrives as Latin-1 mojibake. These helpers recover the
display name, derive a header-safe ASCII fallback, and build a dual-valued
``Content-Disposition`` header (RFC 6266 / RFC 5987).
"""

import posixpath
import re
import unicodedata
from urllib.parse import quote

from core.utils.constants import FALLBACK_FILENAME_BASE, FALLBACK_FILENAME_MAX_LENGTH

REPLACEMENT_CHARACTER = "\ufffd"

_UNSAFE_FALLBACK_CHARS = re.compile(r"[^A-Za-z0-9_.\-]+")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]")


def normalize_upload_filename(original_name: str) -> str:
    """Recover a UTF-8 filename that was decoded as single-byte text.

    Names containing any code point above U+00FF were already decoded as
    multi-byte text and are returned unchanged. Otherwise the Latin-1 bytes are
    reinterpreted as UTF-8; if that produces a replacement character the name
    was genuinely single-byte and the original is kept.
    """
    if any(ord(char) > 0xFF for char in original_name):
        return original_name

    decoded = original_name.encode("latin-1").decode("utf-8", errors="replace")
    if REPLACEMENT_CHARACTER in decoded:
        return original_name

    return decoded


def build_ascii_fallback_filename(original_name: str, extension: str) -> str:
    """Build an ASCII-only filename matching ``^[A-Za-z0-9._-]+$``."""
    base = posixpath.splitext(posixpath.basename(original_name))[0]

    normalized_base = unicodedata.normalize("NFKD", base)
    normalized_base = _UNSAFE_FALLBACK_CHARS.sub("_", normalized_base).strip("_")

    if not _ALPHANUMERIC.search(normalized_base):
        normalized_base = FALLBACK_FILENAME_BASE

    suffix = f".{extension}" if extension else ""
    return f"{normalized_base}{suffix}"[:FALLBACK_FILENAME_MAX_LENGTH]


def encode_rfc5987_value(value: str) -> str:
    """Percent-encode a value for an RFC 5987 extended parameter.

    Only unreserved characters survive; ``! ' ( ) *`` are encoded as well since
    they are not ``attr-char``.
    """
    return quote(value, safe="", encoding="utf-8")


def build_content_disposition(
    original_name: str,
    fallback_name: str,
    *,
    disposition: str = "inline",
) -> str:
    encoded = encode_rfc5987_value(original_name)
    return f"{disposition}; filename=\"{fallback_name}\"; filename*=UTF-8''{encoded}"
