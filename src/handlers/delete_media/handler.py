"""
Lambda handler responsible for media deletion.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.container import get_container
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteMediaRequest
from .service import DeleteService

logger = Logger(service="media-service", utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Soft-delete a media record.

    ``purge=true`` also removes the stored object once the record is marked
    deleted.
    """
    logger.info(
        "Received delete media request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    container = get_container()
    auth = container.authorize(event, rate_limited=True)

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    params = {
        "media_id": path_params.get("id"),
        "purge": str(query_params.get("purge", "false")).lower() == "true",
    }

    try:
        request = validate_request(DeleteMediaRequest, params)
    except PydanticValidationError as exc:
        logger.warning("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    result = DeleteService.from_container(container).soft_delete(
        auth=auth,
        media_id=request.media_id,
        purge=request.purge,
    )

    metrics.add_metric(name="MediaDeleted", unit=MetricUnit.Count, value=1)
    if result.purged:
        metrics.add_metric(name="MediaPurged", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(result.to_response())
