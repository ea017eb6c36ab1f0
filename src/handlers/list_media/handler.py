"""
Lambda handler responsible for listing media.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.container import get_container
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ListMediaRequest
from .service import ListService

logger = Logger(service="media-service", utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    List media newest first.

    Query parameters:
        limit: 1-50, default 20
        cursor: nextCursor of the previous page
        scope: ``self`` (default) or ``all``
    """
    logger.info(
        "Received list media request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    container = get_container()
    auth = container.authorize(event)

    query_params = event.get("queryStringParameters") or {}
    params = {key: value for key, value in query_params.items() if key in ("limit", "cursor", "scope")}

    try:
        request = validate_request(ListMediaRequest, params)
    except PydanticValidationError as exc:
        logger.warning("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    response = ListService.from_container(container).list_media(auth=auth, request=request)

    return ResponseBuilder.ok(response.to_response())
