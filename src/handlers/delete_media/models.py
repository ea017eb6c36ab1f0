"""Pydantic models for delete media request/response."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.media import CamelModel


class DeleteMediaRequest(BaseModel):
    """Validation model for the delete media API."""

    model_config = ConfigDict(str_strip_whitespace=True)

    media_id: str = Field(..., min_length=1, description="Media identifier")
    purge: bool = Field(default=False, description="Also delete the stored object")


class DeleteMediaResponse(CamelModel):
    """Response model for a successful soft delete."""

    id: str = Field(..., description="Deleted media identifier")
    message: str = Field(default="Deleted", description="Confirmation message")
    deleted_at: str = Field(..., description="Deletion timestamp")
    purged: bool = Field(..., description="Whether the stored object was removed")
