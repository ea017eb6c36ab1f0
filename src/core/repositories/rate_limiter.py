"""Abstract contract for per-identity admission control."""

from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """Fixed-window request counter keyed by caller identity."""

    @abstractmethod
    def admit(self, identity: str) -> bool:
        """Count one request for ``identity``.

        Returns:
            True when the request fits in the current window, False otherwise

        Raises:
            RateLimiterError: If the counter backend fails
        """
