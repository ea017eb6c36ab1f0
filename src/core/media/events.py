"""Best-effort media lifecycle notifications."""

from aws_lambda_powertools import Logger

from core.models.errors import MediaServiceError
from core.models.media import MediaEvent, MediaEventKind, MediaObject
from core.repositories.event_publisher import MediaEventPublisher
from core.utils.time import utc_now_iso

logger = Logger(utc=True)


def build_event(kind: MediaEventKind, record: MediaObject) -> MediaEvent:
    return MediaEvent(
        id=record.id,
        owner_id=record.owner_id,
        stored_key=record.stored_key,
        action=kind.action,
        timestamp=utc_now_iso(),
    )


def publish_event(events: MediaEventPublisher, kind: MediaEventKind, record: MediaObject) -> bool:
    """Publish a lifecycle event, logging instead of failing the request.

    Returns:
        True when the publisher accepted the event
    """
    try:
        events.publish(kind, build_event(kind, record))
    except MediaServiceError:
        logger.exception(
            "Media event publish failed",
            extra={"event_type": kind.value, "media_id": record.id},
        )
        return False

    return True
