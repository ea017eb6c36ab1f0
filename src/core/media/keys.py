"""Storage key derivation.

Keys never contain any part of the client filename: the generated media id is
the discriminating component and the owner segment allows prefix-based
auditing in the bucket.
"""

import posixpath
import re
import uuid

from core.utils.constants import MIME_TYPE_EXTENSION_MAP, OBJECT_KEY_PREFIX

_UNSAFE_EXTENSION_CHARS = re.compile(r"[^a-z0-9]+")


def generate_media_id() -> str:
    """Generate a unique media identifier."""
    return str(uuid.uuid4())


def extension_from(mime_type: str, file_name: str | None = None) -> str:
    """Return the storage extension for a MIME type, falling back to the filename."""
    mapped = MIME_TYPE_EXTENSION_MAP.get(mime_type)
    if mapped:
        return mapped

    if not file_name:
        return ""

    raw_extension = posixpath.splitext(file_name)[1].lower()[1:]
    return _UNSAFE_EXTENSION_CHARS.sub("", raw_extension)


def build_object_key(owner_id: str, media_id: str, extension: str) -> str:
    suffix = f".{extension}" if extension else ""
    return f"{OBJECT_KEY_PREFIX}/{owner_id}/{media_id}{suffix}"
