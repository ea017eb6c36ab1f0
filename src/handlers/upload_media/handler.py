"""
Lambda handler responsible for server-mediated media uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
from core.models.errors import UploadBatchFailedError
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_multipart_files
from core.utils.response import ResponseBuilder

from .service import UploadService

logger = Logger(service="media-service", utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle multipart media uploads.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "<base64 multipart body>",
        "isBase64Encoded": true
    }

    File parts are read from the ``file`` field (one file) and the ``files``
    field (up to ten files).

    Returns:
        201 with the created object for a single successful file, otherwise
        201 with ``{items, failed}``
    """
    logger.info(
        "Received media upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    container = get_container()
    auth = container.authorize(event, rate_limited=True)

    files = parse_multipart_files(event, max_upload_bytes=container.settings.max_upload_bytes)
    service = UploadService.from_container(container)

    try:
        result = service.upload_files(auth=auth, files=files)
    except UploadBatchFailedError:
        metrics.add_metric(name="MediaUploadFailed", unit=MetricUnit.Count, value=len(files))
        raise

    metrics.add_metric(name="MediaUploaded", unit=MetricUnit.Count, value=len(result.items))
    if result.failed:
        metrics.add_metric(name="MediaUploadFailed", unit=MetricUnit.Count, value=len(result.failed))

    if result.is_single_success:
        return ResponseBuilder.created(result.items[0].to_response())

    return ResponseBuilder.created(result.to_response())
