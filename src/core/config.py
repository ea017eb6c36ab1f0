"""Runtime configuration for the media service.

Values are read from the Lambda environment (or a local ``.env`` file) once per
process and shared read-only by every collaborator.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.constants import DEFAULT_ALLOWED_MIME_TYPES, DEFAULT_MAX_UPLOAD_BYTES

PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod"})


class MediaSettings(BaseSettings):
    environment: str = "development"

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None
    storage_public_endpoint: str | None = None
    storage_force_path_style: bool = True

    media_s3_bucket_name: str
    media_metadata_table_name: str
    rate_limit_table_name: str
    media_events_topic_arn: str | None = None

    # Download URLs
    cdn_base_url: str | None = None
    public_read: bool = False
    presign_expiration_seconds: int = Field(default=900, gt=0)

    # Rate limiting
    rate_limit_window_seconds: int = Field(default=60, gt=0)
    rate_limit_max_requests: int = Field(default=100, gt=0)

    # Uploads
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    allowed_mime_types: str = ",".join(DEFAULT_ALLOWED_MIME_TYPES)

    # Bearer tokens
    jwt_public_key: str | None = None
    jwt_audience: str | None = None
    jwt_issuer: str | None = None
    jwt_algorithms: str = "RS256,RS512,ES256,ES384"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("jwt_public_key")
    @classmethod
    def unescape_newlines(cls, value: str | None) -> str | None:
        # PEM keys are often stored in env vars with literal "\n"
        if value is None or not value.strip():
            return None
        return value.replace("\\n", "\n")

    @field_validator("aws_endpoint_url", "storage_public_endpoint", "cdn_base_url")
    @classmethod
    def blank_as_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def allowed_mime_types_list(self) -> list[str]:
        """Convert allowed_mime_types string to list"""
        items = [v.strip().lower() for v in self.allowed_mime_types.split(",") if v.strip()]
        return items or list(DEFAULT_ALLOWED_MIME_TYPES)

    @property
    def jwt_algorithms_list(self) -> list[str]:
        return [v.strip() for v in self.jwt_algorithms.split(",") if v.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS


@lru_cache(maxsize=1)
def get_settings() -> MediaSettings:
    return MediaSettings()  # type: ignore[call-arg]
