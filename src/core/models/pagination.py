"""Pagination model."""

from pydantic import Field

from core.models.media import CamelModel, MediaObjectResponse


class ListMediaResponse(CamelModel):
    """Keyset-paginated response for listing media."""

    items: list[MediaObjectResponse] = Field(..., description="Media records, newest first")
    next_cursor: str | None = Field(
        None,
        description="Cursor to use for the next page, if available",
    )

    def to_response(self) -> dict:
        payload: dict = {"items": [item.to_response() for item in self.items]}
        if self.next_cursor is not None:
            payload["nextCursor"] = self.next_cursor
        return payload
