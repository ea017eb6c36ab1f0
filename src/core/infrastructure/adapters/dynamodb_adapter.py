"""Thin DynamoDB adapter wrapping boto3 table operations."""

from typing import Any, Protocol, cast

import boto3


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Repository-facing DynamoDB adapter protocol."""

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: Any = None,
        expression_names: dict[str, str] | None = None,
        expression_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]: ...

    def update_item(
        self,
        *,
        key: dict[str, Any],
        update_expression: str,
        condition_expression: Any = None,
        expression_names: dict[str, str] | None = None,
        expression_values: dict[str, Any] | None = None,
        return_values: str = "NONE",
    ) -> dict[str, Any]: ...

    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 DynamoDB resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(
        self,
        *,
        table_name: str,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        if not table_name:
            raise RuntimeError("DynamoDB table name is not configured")

        dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region_name,
        )

        self._resource = dynamodb
        self.table_name = table_name
        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(table_name),
        )

    @staticmethod
    def _expression_kwargs(
        condition_expression: Any,
        expression_names: dict[str, str] | None,
        expression_values: dict[str, Any] | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}

        if condition_expression is not None:
            kwargs["ConditionExpression"] = condition_expression
        if expression_names:
            kwargs["ExpressionAttributeNames"] = expression_names
        if expression_values:
            kwargs["ExpressionAttributeValues"] = expression_values

        return kwargs

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: Any = None,
        expression_names: dict[str, str] | None = None,
        expression_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs = self._expression_kwargs(condition_expression, expression_names, expression_values)
        return self.table.put_item(Item=item, **kwargs)

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=consistent_read)

    def update_item(
        self,
        *,
        key: dict[str, Any],
        update_expression: str,
        condition_expression: Any = None,
        expression_names: dict[str, str] | None = None,
        expression_values: dict[str, Any] | None = None,
        return_values: str = "NONE",
    ) -> dict[str, Any]:
        """Update item attributes.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs = self._expression_kwargs(condition_expression, expression_names, expression_values)
        return self.table.update_item(
            Key=key,
            UpdateExpression=update_expression,
            ReturnValues=return_values,
            **kwargs,
        )

    def query(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB query.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.query(**kwargs)

    def close(self) -> None:
        self._resource.meta.client.close()
