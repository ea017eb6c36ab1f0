from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.aws.dynamodb_rate_limiter import DynamoDBRateLimiter
from core.models.errors import RateLimiterError


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(rate_limit_table, clock) -> DynamoDBRateLimiter:
    adapter = DynamoDBAdapter(table_name=rate_limit_table.name, region_name="us-east-1")
    return DynamoDBRateLimiter(adapter, window_seconds=60, max_requests=3, clock=clock)


def conditional_failure() -> ClientError:
    return ClientError(
        {"Error": {"Code": "ConditionalCheckFailedException", "Message": "failed"}},
        "UpdateItem",
    )


class TestDynamoDBRateLimiter:
    def test_admits_up_to_max(self, limiter) -> None:
        results = [limiter.admit("user-1") for _ in range(4)]

        assert results == [True, True, True, False]

    def test_identities_are_independent(self, limiter) -> None:
        for _ in range(3):
            limiter.admit("user-1")

        assert limiter.admit("user-1") is False
        assert limiter.admit("user-2") is True

    def test_window_resets(self, limiter, clock) -> None:
        for _ in range(4):
            limiter.admit("user-1")

        clock.now += 60

        assert limiter.admit("user-1") is True

    def test_counter_item_layout(self, limiter, rate_limit_table, clock) -> None:
        limiter.admit("user-1")
        limiter.admit("user-1")

        item = rate_limit_table.get_item(Key={"id": "rate:user-1"})["Item"]
        assert item["request_count"] == 2
        assert item["window_ends_at_ms"] == int(clock.now * 1000) + 60_000
        assert item["expires_at"] == int(clock.now) + 61

    def test_lost_race_retries_increment(self, clock) -> None:
        adapter = MagicMock()
        adapter.update_item.side_effect = [
            conditional_failure(),
            {"Attributes": {"request_count": 2}},
        ]
        adapter.put_item.side_effect = conditional_failure()
        limiter = DynamoDBRateLimiter(adapter, window_seconds=60, max_requests=3, clock=clock)

        assert limiter.admit("user-1") is True
        assert adapter.update_item.call_count == 2

    def test_unresolvable_race(self, clock) -> None:
        adapter = MagicMock()
        adapter.update_item.side_effect = conditional_failure()
        adapter.put_item.side_effect = conditional_failure()
        limiter = DynamoDBRateLimiter(adapter, window_seconds=60, max_requests=3, clock=clock)

        with pytest.raises(RateLimiterError):
            limiter.admit("user-1")

    def test_backend_failure(self, clock) -> None:
        adapter = MagicMock()
        adapter.update_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow"}},
            "UpdateItem",
        )
        limiter = DynamoDBRateLimiter(adapter, window_seconds=60, max_requests=3, clock=clock)

        with pytest.raises(RateLimiterError):
            limiter.admit("user-1")

    def test_unreachable_backend(self, clock) -> None:
        adapter = MagicMock()
        adapter.update_item.side_effect = EndpointConnectionError(
            endpoint_url="https://dynamodb.us-east-1.amazonaws.com"
        )
        limiter = DynamoDBRateLimiter(adapter, window_seconds=60, max_requests=3, clock=clock)

        with pytest.raises(RateLimiterError):
            limiter.admit("user-1")
