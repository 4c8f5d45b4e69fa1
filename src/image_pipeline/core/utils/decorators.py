"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any, NamedTuple

from aws_lambda_powertools import Logger

from image_pipeline.core.models.errors import (
    ImageServiceError,
    MIMETypeError,
    ProcessingError,
    ValidationError,
)
from image_pipeline.core.utils.constants import get_max_file_size_mb
from image_pipeline.core.utils.response import JsonDict, ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)


class _ErrorRule(NamedTuple):
    exc_types: tuple[type[BaseException], ...]
    status: HTTPStatus
    log_message: str
    response_message: str | None
    level: str


# Checked in order; the first matching rule wins. A ``None`` response
# message means the exception text is shown to the client.
_ERROR_RULES: tuple[_ErrorRule, ...] = (
    _ErrorRule(
        (ValidationError, MIMETypeError),
        HTTPStatus.BAD_REQUEST,
        "Validation error in handler",
        None,
        "warning",
    ),
    _ErrorRule(
        (ProcessingError,),
        HTTPStatus.UNPROCESSABLE_ENTITY,
        "Image processing error in handler",
        None,
        "warning",
    ),
    _ErrorRule(
        (ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        "Invalid input in handler",
        None,
        "warning",
    ),
    _ErrorRule(
        (PermissionError,),
        HTTPStatus.FORBIDDEN,
        "Permission denied in handler",
        "You don't have permission to perform this action.",
        "warning",
    ),
    _ErrorRule(
        (FileNotFoundError, LookupError),
        HTTPStatus.NOT_FOUND,
        "Resource not found",
        "The requested resource was not found.",
        "warning",
    ),
    _ErrorRule(
        (MemoryError,),
        HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
        "Memory error - payload too large",
        f"The file is too large to process. Maximum size is {get_max_file_size_mb()}MB.",
        "warning",
    ),
    _ErrorRule(
        (TimeoutError,),
        HTTPStatus.GATEWAY_TIMEOUT,
        "Request timeout",
        "The request took too long to process. Please try again.",
        "exception",
    ),
    _ErrorRule(
        (ConnectionError, OSError),
        HTTPStatus.SERVICE_UNAVAILABLE,
        "Connection error",
        "Unable to connect to required services. Please try again later.",
        "exception",
    ),
)


def _get_user_friendly_message(exc: BaseException) -> str:
    """
    Convert technical exception messages into user-friendly ones.

    Domain errors and messages that already read like sentences for the
    client are passed through unchanged.
    """
    if isinstance(exc, ImageServiceError):
        return exc.message

    exc_str = str(exc)
    friendly_prefixes = (
        "Invalid",
        "Missing",
        "Required",
        "Must",
        "Cannot",
        "Unable to",
        "Failed to",
        "Image",
        "File",
        "Quality",
    )

    if exc_str and exc_str.startswith(friendly_prefixes):
        return exc_str

    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."

    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."

    return "The provided data is invalid. Please check your input and try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: BaseException,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra: dict[str, Any] = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, ImageServiceError):
        log_extra["error_code"] = exc.error_code

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Last-resort translation of exceptions into HTTP error responses
    - Request ID tracking and structured logging

    Example:
        @api_gateway_handler
        def handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)
        except Exception as exc:
            rule = next(
                (rule for rule in _ERROR_RULES if isinstance(exc, rule.exc_types)),
                None,
            )

            if rule is None:
                _log_error(
                    "Unexpected error in handler",
                    handler_name=func.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="exception",
                )
                return ResponseBuilder.internal_error(
                    "We're experiencing technical difficulties. Please try again in a few moments.",
                    request_id=request_id,
                    cors_origin=cors_origin,
                )

            _log_error(
                rule.log_message,
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level=rule.level,
            )

            error_code = exc.error_code if isinstance(exc, ImageServiceError) else None
            return ResponseBuilder.error(
                status=rule.status,
                error=error_code,
                message=rule.response_message or _get_user_friendly_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
