"""
Lambda handlers for the resize, compress, crop and multi-resolution endpoints.
"""

import json
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from image_pipeline.core.models.errors import (
    MIMETypeError,
    ProcessingError,
    ValidationError,
)
from image_pipeline.core.utils.decorators import api_gateway_handler
from image_pipeline.core.utils.response import ResponseBuilder
from image_pipeline.core.utils.validators import (
    sanitize_validation_errors,
    validate_request,
)

from .models import (
    CompressRequest,
    CropRequest,
    GenerateImagesRequest,
    ResizeRequest,
    TransformRequest,
)
from .service import TransformService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


def _handle_transform(
    event: dict[str, Any],
    context: LambdaContext,
    *,
    model: type[TransformRequest],
    success_message: str,
) -> dict[str, Any]:
    logger.info(
        "Received image transform request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_model": model.__name__,
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
        request = validate_request(model, body)
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Missing required parameters.",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = TransformService()

    try:
        variants = service.transform(
            file_data=request.file_data,
            folder_name=request.folder_name,
            spec=request.to_spec(),
            content_type=request.content_type,
        )
    except (ValidationError, MIMETypeError) as exc:
        logger.warning(
            "Transform request rejected",
            extra={"folder_name": request.folder_name, "error": exc.message},
        )
        return ResponseBuilder.domain_error(exc, status=HTTPStatus.BAD_REQUEST)

    except ProcessingError as exc:
        logger.exception(
            "Failed to process image",
            extra={"folder_name": request.folder_name},
        )
        return ResponseBuilder.domain_error(exc, status=HTTPStatus.UNPROCESSABLE_ENTITY)

    return ResponseBuilder.ok(
        {
            "message": success_message,
            "files": [variant.path for variant in variants],
            "variants": [variant.model_dump(exclude_none=True) for variant in variants],
        }
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def resize_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle ``POST /file/resize``: resize to an exact width and height."""
    return _handle_transform(
        event, context, model=ResizeRequest, success_message="Image resized successfully."
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def compress_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle ``POST /file/compress``: re-encode at a given JPEG quality."""
    return _handle_transform(
        event,
        context,
        model=CompressRequest,
        success_message="Image compressed successfully.",
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def crop_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle ``POST /file/crop``: extract a rectangle."""
    return _handle_transform(
        event, context, model=CropRequest, success_message="Image cropped successfully."
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def generate_images_handler(
    event: dict[str, Any], context: LambdaContext
) -> dict[str, Any]:
    """Handle ``POST /file/genimage``: evenly spaced multi-resolution batch."""
    return _handle_transform(
        event,
        context,
        model=GenerateImagesRequest,
        success_message="Images generated successfully.",
    )
