"""Media event publishers."""

import json

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.sns_adapter import SNSAdapterProtocol
from core.models.errors import EventPublishError
from core.models.media import MediaEvent, MediaEventKind
from core.repositories.event_publisher import MediaEventPublisher
from core.utils.constants import ERROR_CODE_EVENT_PUBLISH_FAILED

logger = Logger(utc=True)


class SNSEventPublisher(MediaEventPublisher):
    """Publishes media events to an SNS topic as camelCase JSON."""

    def __init__(self, adapter: SNSAdapterProtocol) -> None:
        self._sns = adapter

    def publish(self, kind: MediaEventKind, event: MediaEvent) -> None:
        try:
            self._sns.publish(
                message=json.dumps(event.to_response()),
                attributes={"event_type": kind.value},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(
                "SNS publish failed",
                extra={"event_type": kind.value, "media_id": event.id},
            )
            raise EventPublishError(
                message="Unable to publish media event",
                error_code=ERROR_CODE_EVENT_PUBLISH_FAILED,
                details={"event_type": kind.value, "media_id": event.id},
            ) from exc

        logger.debug("Media event published", extra={"event_type": kind.value, "media_id": event.id})


class LoggingEventPublisher(MediaEventPublisher):
    """Writes events to the structured log when no topic is configured."""

    def publish(self, kind: MediaEventKind, event: MediaEvent) -> None:
        logger.info(
            "Media event",
            extra={"event_type": kind.value, "event": event.to_response()},
        )
