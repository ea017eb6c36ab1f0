"""
Keyset (cursor) pagination utilities.

Records are ordered newest first by a sort key made of ``uploaded_at`` and the
media id, so records sharing a timestamp still have a total order. A page of
``limit`` items is produced by fetching ``limit + 1`` rows; the extra row, if
present, only contributes its sort key as the next cursor. The next page then
selects rows with ``sort_key <= cursor`` so the boundary row is neither skipped
nor repeated.

Cursors handed to clients are the URL-safe base64 form of that sort key.
"""

import base64
from collections.abc import Callable, Sequence
from typing import TypeVar

from core.models.errors import InvalidCursorError
from core.utils.time import normalize_iso_timestamp

RowT = TypeVar("RowT")

SORT_KEY_SEPARATOR = "#"


class CursorPagination:
    """Keyset pagination helper for ``uploaded_at``-ordered listings."""

    @staticmethod
    def sort_key(uploaded_at: str, media_id: str) -> str:
        """Build the unique, lexicographically ordered listing key of a record."""
        return f"{uploaded_at}{SORT_KEY_SEPARATOR}{media_id}"

    @staticmethod
    def encode_cursor(sort_key: str) -> str:
        """Wrap a sort key into the opaque cursor returned as ``nextCursor``."""
        return base64.urlsafe_b64encode(sort_key.encode("utf-8")).decode("ascii").rstrip("=")

    @staticmethod
    def parse_cursor(cursor: str | None) -> str | None:
        """
        Decode an opaque cursor back into a normalized sort key.

        Raises:
            InvalidCursorError: If the cursor was not issued by this service
        """
        if cursor is None or not cursor.strip():
            return None

        try:
            token = cursor.strip()
            decoded = base64.b64decode(
                token + "=" * (-len(token) % 4),
                altchars=b"-_",
                validate=True,
            ).decode("utf-8")

            uploaded_at, separator, media_id = decoded.partition(SORT_KEY_SEPARATOR)
            if not separator or not media_id:
                raise ValueError("cursor has no media id")

            return CursorPagination.sort_key(normalize_iso_timestamp(uploaded_at), media_id)
        except (ValueError, OverflowError) as exc:
            raise InvalidCursorError(
                message="Invalid cursor",
                details={"cursor": cursor},
            ) from exc

    @staticmethod
    def fetch_size(limit: int) -> int:
        """Rows to read from the store for a page of ``limit`` items."""
        return limit + 1

    @staticmethod
    def page(
        rows: Sequence[RowT],
        limit: int,
        *,
        cursor_of: Callable[[RowT], str],
    ) -> tuple[list[RowT], str | None]:
        """
        Split ``limit + 1`` rows into the page and the next cursor.

        Args:
            rows: Rows ordered newest first, at most ``limit + 1`` of them
            limit: Page size
            cursor_of: Callable returning the cursor value of a row

        Returns:
            (page_items, next_cursor); next_cursor is None on the last page

        Example:
            rows = [r5, r4, r3], limit = 2

            → ([r5, r4], cursor_of(r3))
        """
        items = list(rows[:limit])
        next_cursor = cursor_of(rows[limit]) if len(rows) > limit else None
        return items, next_cursor
