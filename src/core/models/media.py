"""Shared media metadata models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


class MediaStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class MediaEventKind(str, Enum):
    UPLOADED = "media.uploaded"
    DELETED = "media.deleted"

    @property
    def action(self) -> str:
        return self.value.split(".", 1)[1]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class MediaObject(CamelModel):
    """Media metadata record owned by the metadata store."""

    id: StrictStr = Field(..., description="Unique media identifier")
    owner_id: StrictStr = Field(..., description="Identity of the uploading user")
    original_name: StrictStr = Field(..., description="Recovered human-readable file name")
    stored_key: StrictStr = Field(..., description="Object storage key")
    mime_type: StrictStr = Field(..., description="Validated MIME type")
    size_bytes: int = Field(..., ge=0, description="Payload size in bytes")
    width: int | None = Field(None, description="Raster width in pixels")
    height: int | None = Field(None, description="Raster height in pixels")
    status: MediaStatus = Field(MediaStatus.ACTIVE, description="Lifecycle status")
    uploaded_at: StrictStr = Field(..., description="ISO-8601 upload timestamp (UTC)")
    deleted_at: StrictStr | None = Field(None, description="ISO-8601 deletion timestamp (UTC)")

    @property
    def is_active(self) -> bool:
        return self.status is MediaStatus.ACTIVE


class MediaObjectResponse(MediaObject):
    """Media record enriched with download URLs for API responses."""

    url: str | None = Field(None, description="Download URL, absent for deleted media")
    presigned_url: str | None = Field(None, description="Signed URL requested via presign=true")

    @classmethod
    def from_record(
        cls,
        record: MediaObject,
        *,
        url: str | None,
        presigned_url: str | None = None,
    ) -> "MediaObjectResponse":
        return cls(**record.model_dump(), url=url, presigned_url=presigned_url)

    def to_response(self) -> dict[str, Any]:
        payload = super().to_response()
        if self.presigned_url is None:
            payload.pop("presignedUrl", None)
        return payload


class MediaEvent(CamelModel):
    """Payload published to the notifier."""

    id: str
    owner_id: str
    stored_key: str
    action: str
    timestamp: str
