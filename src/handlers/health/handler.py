"""
Lambda handler for liveness checks.
"""

from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.time import utc_now_iso

logger = Logger(service="media-service", utc=True)


@api_gateway_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Report liveness without touching any collaborator or requiring auth."""
    logger.debug("Health check", extra={"request_id": getattr(context, "aws_request_id", None)})
    return ResponseBuilder.ok({"status": "ok", "time": utc_now_iso()})
