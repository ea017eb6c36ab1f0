"""
Lambda handler issuing presigned upload URLs.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.container import get_container
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import decode_body
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import PresignUploadRequest
from .service import PresignService

logger = Logger(service="media-service", utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle presigned upload requests.

    Expected body:
    {
        "fileName": "photo.png",
        "mimeType": "image/png",
        "sizeBytes": 12345
    }
    """
    logger.info(
        "Received presign request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    container = get_container()
    auth = container.authorize(event, rate_limited=True)

    try:
        body = json.loads(decode_body(event) or b"{}")
    except ValueError as exc:
        logger.warning("Invalid JSON body received", extra={"error": str(exc)})
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(PresignUploadRequest, body)
    except PydanticValidationError as exc:
        logger.warning("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    intent = PresignService.from_container(container).create_upload_intent(
        auth=auth,
        request=request,
    )
    metrics.add_metric(name="PresignedUploadIssued", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.created(intent.to_response())
