"""
Pydantic models for list media request.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT


class ListMediaRequest(BaseModel):
    """
    Validation model for list media API.

    ``scope=all`` only widens the listing for ADMIN callers; everyone else is
    downgraded to their own media.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=MIN_LIMIT,
        le=MAX_LIMIT,
        description=f"Results per page ({MIN_LIMIT}-{MAX_LIMIT})",
    )
    cursor: str | None = Field(
        None,
        description="Opaque position of the first item of the page (from nextCursor)",
    )
    scope: Literal["self", "all"] = Field(default="self", description="Listing scope")
