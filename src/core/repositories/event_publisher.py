"""Abstract contract for media event notification."""

from abc import ABC, abstractmethod

from core.models.media import MediaEvent, MediaEventKind


class MediaEventPublisher(ABC):
    """Fire-and-forget notifier for media lifecycle events.

    No delivery guarantee is expected from implementations; callers treat a
    failed publish as a logged, non-fatal condition.
    """

    @abstractmethod
    def publish(self, kind: MediaEventKind, event: MediaEvent) -> None:
        """Publish a single event.

        Raises:
            EventPublishError: If the event cannot be handed to the transport
        """
