"""Pydantic models for media upload responses."""

from typing import Any

from pydantic import Field

from core.models.media import CamelModel, MediaObjectResponse


class UploadFailure(CamelModel):
    """Per-file failure entry of a batch upload."""

    file_name: str = Field(..., description="Recovered name of the rejected file")
    message: str = Field(..., description="Reason the file was rejected")


class UploadBatchResponse(CamelModel):
    """Outcome of a multi-file upload, both lists in input order."""

    items: list[MediaObjectResponse] = Field(default_factory=list)
    failed: list[UploadFailure] = Field(default_factory=list)

    @property
    def is_single_success(self) -> bool:
        return len(self.items) == 1 and not self.failed

    def to_response(self) -> dict[str, Any]:
        return {
            "items": [item.to_response() for item in self.items],
            "failed": [failure.to_response() for failure in self.failed],
        }
