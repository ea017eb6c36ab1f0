"""
Lambda handler responsible for single media retrieval.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.container import get_container
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetMediaRequest
from .service import GetService

logger = Logger(service="media-service", utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Return one media record with its download URL.

    ``presign=true`` adds ``presignedUrl``, always a signed URL even when
    public URLs are enabled.
    """
    logger.info(
        "Received get media request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    container = get_container()
    auth = container.authorize(event)

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    params = {
        "media_id": path_params.get("id"),
        "presign": str(query_params.get("presign", "false")).lower() == "true",
    }

    try:
        request = validate_request(GetMediaRequest, params)
    except PydanticValidationError as exc:
        logger.warning("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    media = GetService.from_container(container).get_media(
        auth=auth,
        media_id=request.media_id,
        presign=request.presign,
    )

    return ResponseBuilder.ok(media.to_response())
