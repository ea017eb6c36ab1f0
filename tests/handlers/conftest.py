import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event.

    Usage:
        event = api_event("GET", "/media", user_id="user-1", query={"limit": "5"})
    """

    def _build(
        method: str,
        path: str,
        *,
        user_id: str | None = "user-1",
        role: str | None = None,
        path_params: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        event_headers: dict[str, str] = {"Content-Type": "application/json"}
        if user_id:
            event_headers["x-user-id"] = user_id
        if role:
            event_headers["x-user-role"] = role
        if headers:
            event_headers.update(headers)

        return {
            "httpMethod": method,
            "path": path,
            "headers": event_headers,
            "pathParameters": path_params,
            "queryStringParameters": query,
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "isBase64Encoded": False,
        }

    return _build


@pytest.fixture
def response_json() -> Callable[[dict[str, Any]], dict[str, Any]]:
    def _parse(response: dict[str, Any]) -> dict[str, Any]:
        return json.loads(response["body"])

    return _parse
