"""DynamoDB-backed fixed-window rate limiter.

One item per identity holds the request count of the current window and the
epoch-millisecond instant the window ends. The first request of a window
(re)creates the item with a count of one; later requests atomically increment
it. An ``expires_at`` attribute lets DynamoDB TTL reap idle counters.
"""

import time
from collections.abc import Callable

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapterProtocol
from core.models.errors import RateLimiterError
from core.repositories.rate_limiter import RateLimiter

logger = Logger(utc=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class DynamoDBRateLimiter(RateLimiter):
    def __init__(
        self,
        adapter: DynamoDBAdapterProtocol,
        *,
        window_seconds: int,
        max_requests: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db = adapter
        self._window_ms = window_seconds * 1000
        self._max_requests = max_requests
        self._clock = clock

    @staticmethod
    def counter_key(identity: str) -> dict[str, str]:
        return {"id": f"rate:{identity}"}

    def admit(self, identity: str) -> bool:
        try:
            count = self._increment(identity)
            if count is None:
                count = self._start_window(identity)
            if count is None:
                # another request opened the window between both calls
                count = self._increment(identity)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Rate limiter backend failed", extra={"identity": identity})
            raise RateLimiterError(
                message="Unable to evaluate rate limit",
                details={"identity": identity},
            ) from exc

        if count is None:
            raise RateLimiterError(
                message="Unable to evaluate rate limit",
                details={"identity": identity},
            )

        admitted = count <= self._max_requests
        if not admitted:
            logger.warning(
                "Rate limit exceeded",
                extra={"identity": identity, "count": count, "max_requests": self._max_requests},
            )
        return admitted

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _increment(self, identity: str) -> int | None:
        try:
            response = self._db.update_item(
                key=self.counter_key(identity),
                update_expression="ADD request_count :one",
                condition_expression="attribute_exists(#id) AND window_ends_at_ms > :now",
                expression_names={"#id": "id"},
                expression_values={":one": 1, ":now": self._now_ms()},
                return_values="UPDATED_NEW",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED:
                return None
            raise

        return int(response["Attributes"]["request_count"])

    def _start_window(self, identity: str) -> int | None:
        now_ms = self._now_ms()
        window_ends_at_ms = now_ms + self._window_ms

        try:
            self._db.put_item(
                item={
                    **self.counter_key(identity),
                    "request_count": 1,
                    "window_ends_at_ms": window_ends_at_ms,
                    "expires_at": window_ends_at_ms // 1000 + 1,
                },
                condition_expression="attribute_not_exists(#id) OR window_ends_at_ms <= :now",
                expression_names={"#id": "id"},
                expression_values={":now": now_ms},
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED:
                return None
            raise

        return 1
