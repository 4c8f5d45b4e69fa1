"""
Lambda handler responsible for uploading images to object storage.
"""

import json
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from image_pipeline.core.models.errors import MIMETypeError, ProcessingError
from image_pipeline.core.utils.decorators import api_gateway_handler
from image_pipeline.core.utils.response import ResponseBuilder
from image_pipeline.core.utils.validators import (
    sanitize_validation_errors,
    validate_request,
)

from .models import UploadFileRequest
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected API Gateway event structure:
    {
        "body": "{\"file\": \"<base64>\", \"file_name\": \"photo.png\", ...}"
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible response wrapping the storage ServiceResult
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(UploadFileRequest, body)
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = UploadService()

    try:
        result = service.upload_file(
            file_data=request.file_data,
            file_name=request.file_name,
            content_type=request.content_type,
        )
    except MIMETypeError as exc:
        logger.warning("Unsupported upload type", extra={"error": exc.message})
        return ResponseBuilder.bad_request(message=exc.message)

    except ProcessingError as exc:
        logger.exception("Failed to prepare image for upload")
        return ResponseBuilder.domain_error(exc, status=HTTPStatus.UNPROCESSABLE_ENTITY)

    return ResponseBuilder.service_result(result, success_status=HTTPStatus.CREATED)
