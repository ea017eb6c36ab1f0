"""Process-wide wiring of collaborators.

Every Lambda invocation in a warm container reuses the same clients, so the
collaborators are built once per process and shared. Services receive them
through their constructors; nothing below reads the environment directly.
"""

from __future__ import annotations

import atexit
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit

from core.auth.authenticator import RequestAuthenticator
from core.config import MediaSettings, get_settings
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.adapters.sns_adapter import SNSAdapter
from core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from core.infrastructure.aws.dynamodb_rate_limiter import DynamoDBRateLimiter
from core.infrastructure.aws.s3_media_storage import S3MediaStorage
from core.infrastructure.aws.sns_event_publisher import LoggingEventPublisher, SNSEventPublisher
from core.media.urls import DownloadUrlResolver
from core.models.auth import AuthContext
from core.models.errors import RateLimitedError
from core.repositories.event_publisher import MediaEventPublisher
from core.repositories.metadata_repository import MediaMetadataRepository
from core.repositories.rate_limiter import RateLimiter
from core.repositories.storage_repository import MediaStorageRepository

logger = Logger(utc=True)
# shares the metric set flushed by each handler's log_metrics
metrics = Metrics()


@dataclass(frozen=True)
class ServiceContainer:
    settings: MediaSettings
    storage: MediaStorageRepository
    metadata: MediaMetadataRepository
    events: MediaEventPublisher
    rate_limiter: RateLimiter
    authenticator: RequestAuthenticator
    urls: DownloadUrlResolver
    closeables: tuple[Any, ...] = ()

    def authorize(self, event: dict[str, Any], *, rate_limited: bool = False) -> AuthContext:
        """Authenticate the caller and optionally count the request.

        Raises:
            UnauthorizedError: If no valid identity can be established
            RateLimitedError: If the caller exhausted its window
        """
        auth = self.authenticator.authenticate(event)

        if rate_limited and not self.rate_limiter.admit(auth.user_id):
            metrics.add_metric(name="RateLimited", unit=MetricUnit.Count, value=1)
            raise RateLimitedError(
                message="Too many requests",
                details={"retry_after_seconds": self.settings.rate_limit_window_seconds},
            )

        return auth

    def close(self) -> None:
        for closeable in self.closeables:
            closeable.close()

    def __enter__(self) -> ServiceContainer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def build_container(settings: MediaSettings | None = None) -> ServiceContainer:
    """Construct every collaborator from settings and provision the bucket."""
    settings = settings or get_settings()

    s3_adapter = S3Adapter(
        bucket_name=settings.media_s3_bucket_name,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        public_endpoint_url=settings.storage_public_endpoint,
        force_path_style=settings.storage_force_path_style,
    )
    metadata_adapter = DynamoDBAdapter(
        table_name=settings.media_metadata_table_name,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )
    rate_limit_adapter = DynamoDBAdapter(
        table_name=settings.rate_limit_table_name,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )
    closeables: list[Any] = [s3_adapter, metadata_adapter, rate_limit_adapter]

    events: MediaEventPublisher
    if settings.media_events_topic_arn:
        sns_adapter = SNSAdapter(
            topic_arn=settings.media_events_topic_arn,
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )
        closeables.append(sns_adapter)
        events = SNSEventPublisher(sns_adapter)
    else:
        logger.info("No media events topic configured, logging events instead")
        events = LoggingEventPublisher()

    storage = S3MediaStorage(s3_adapter)
    storage.ensure_bucket()

    return ServiceContainer(
        settings=settings,
        storage=storage,
        metadata=DynamoDBMetadata(metadata_adapter),
        events=events,
        rate_limiter=DynamoDBRateLimiter(
            rate_limit_adapter,
            window_seconds=settings.rate_limit_window_seconds,
            max_requests=settings.rate_limit_max_requests,
        ),
        authenticator=RequestAuthenticator(
            public_key=settings.jwt_public_key,
            algorithms=settings.jwt_algorithms_list,
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        ),
        urls=DownloadUrlResolver(
            storage,
            public_read=settings.public_read,
            cdn_base_url=settings.cdn_base_url,
            expires_in=settings.presign_expiration_seconds,
        ),
        closeables=tuple(closeables),
    )


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    container = build_container()
    atexit.register(container.close)
    return container
