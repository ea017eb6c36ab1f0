"""Pydantic models for presigned upload request/response."""

from pydantic import ConfigDict, Field, StrictInt

from core.models.media import CamelModel


class PresignUploadRequest(CamelModel):
    """Validation model for the presign request body."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file_name: str = Field(..., min_length=1, description="Client-side file name")
    mime_type: str = Field(..., min_length=1, description="Declared MIME type")
    size_bytes: StrictInt = Field(..., gt=0, description="Declared payload size in bytes")


class PresignMetadata(CamelModel):
    owner_id: str
    mime_type: str
    size_bytes: int


class PresignUploadResponse(CamelModel):
    """Ephemeral upload intent; no metadata row exists for it."""

    id: str = Field(..., description="Identifier reserved for the upload")
    upload_url: str = Field(..., description="Signed PUT URL bound to the content type")
    key: str = Field(..., description="Object storage key")
    expires_in: int = Field(..., description="URL lifetime in seconds")
    metadata: PresignMetadata
