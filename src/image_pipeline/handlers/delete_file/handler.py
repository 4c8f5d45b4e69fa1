"""
Lambda handler responsible for deleting stored objects.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from image_pipeline.core.utils.decorators import api_gateway_handler
from image_pipeline.core.utils.response import ResponseBuilder
from image_pipeline.core.utils.validators import (
    sanitize_validation_errors,
    validate_request,
)

from .models import DeleteFileRequest
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``DELETE /file/delete?key=...`` requests.

    This function:
    - Extracts the object key from the query string
    - Validates the incoming request
    - Delegates deletion to the service layer

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible response wrapping the storage ServiceResult
    """
    logger.info(
        "Received file delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(DeleteFileRequest, {"key": query_params.get("key")})
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="File key is required",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    result = DeleteService().delete_file(request.key)
    return ResponseBuilder.service_result(result)
