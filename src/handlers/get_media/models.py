"""Pydantic models for get media request."""

from pydantic import BaseModel, ConfigDict, Field


class GetMediaRequest(BaseModel):
    """Validation model for the get media API."""

    model_config = ConfigDict(str_strip_whitespace=True)

    media_id: str = Field(..., min_length=1, description="Media identifier")
    presign: bool = Field(default=False, description="Also return a signed URL")
