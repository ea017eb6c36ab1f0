"""Thin adapter for publishing to Amazon SNS."""

from typing import Any, Protocol

import boto3


class SNSAdapterProtocol(Protocol):
    def publish(
        self,
        *,
        message: str,
        attributes: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...


class SNSAdapter:
    """Low-level SNS operations (mechanical, no error handling)."""

    def __init__(
        self,
        *,
        topic_arn: str,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        if not topic_arn:
            raise RuntimeError("SNS topic ARN is not configured")

        self._topic_arn = topic_arn
        self._client = boto3.client(
            "sns",
            endpoint_url=endpoint_url,
            region_name=region_name,
        )

    def publish(
        self,
        *,
        message: str,
        attributes: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Publish a message to the configured topic.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"TopicArn": self._topic_arn, "Message": message}

        if attributes:
            kwargs["MessageAttributes"] = {
                name: {"DataType": "String", "StringValue": value}
                for name, value in attributes.items()
            }

        return self._client.publish(**kwargs)

    def close(self) -> None:
        self._client.close()
