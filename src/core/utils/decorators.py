"""
Handler decorator and domain error mapping for the gallery API.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import (
    FilterError,
    GalleryError,
    NotFoundError,
    ValidationError,
)
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

JsonDict = dict[str, Any]
Handler = Callable[..., JsonDict]

CLIENT_ERRORS = (ValidationError, FilterError, NotFoundError)

# Messages starting with these are already written for API clients
_CLIENT_FACING_PREFIXES = (
    "Invalid",
    "Missing",
    "Cannot",
    "Unable to",
    "Failed to",
    "Image",
    "Title",
    "File",
    "No file",
)

_GENERIC_MESSAGES: tuple[tuple[type[Exception], str], ...] = (
    (ValueError, "The provided data is invalid. Please check your input and try again."),
    (KeyError, "A required field is missing. Please ensure all required fields are provided."),
    (AttributeError, "A required field is missing. Please ensure all required fields are provided."),
    (TypeError, "The data format is incorrect. Please check the request format."),
)


def client_message(exc: Exception) -> str:
    """Message for a 400 caused by a non-domain exception."""
    text = str(exc)
    if text.startswith(_CLIENT_FACING_PREFIXES):
        return text

    for exc_type, message in _GENERIC_MESSAGES:
        if isinstance(exc, exc_type):
            return message
    return "We encountered an issue processing your request. Please try again."


def domain_error_response(
    exc: GalleryError,
    *,
    failure_message: str,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> JsonDict:
    """
    Map a domain error onto the response envelope.

    - ValidationError / FilterError → 400 with the error's own message
    - NotFoundError → 404 "Image not found"
    - any other GalleryError → 500 with ``failure_message``; the
      collaborator's message is returned in ``error``
    """
    common: JsonDict = {"request_id": request_id, "cors_origin": cors_origin}

    if isinstance(exc, (ValidationError, FilterError)):
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, **common)

    if isinstance(exc, NotFoundError):
        return ResponseBuilder.not_found("Image not found", error=exc.message, **common)

    return ResponseBuilder.internal_error(failure_message, error=exc.message, **common)


def api_gateway_handler(func: Handler) -> Handler:
    """
    Wrap an API Gateway Lambda handler.

    OPTIONS requests are answered directly with the CORS preflight
    response. Exceptions escaping ``func`` are logged with the request id
    and turned into envelope responses:

    - GalleryError → see ``domain_error_response``
    - ValueError, KeyError, TypeError, AttributeError → 400
    - anything else → 500 "Failed to process request"

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok("Images retrieved successfully", data=[])
    """

    @wraps(func)
    def wrapper(event: Any, context: Any, *, cors_origin: str | None = None) -> JsonDict:
        if (event or {}).get("httpMethod") == "OPTIONS":
            return ResponseBuilder.options(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)
        log_extra: JsonDict = {"handler": func.__name__, "request_id": request_id}

        try:
            return func(event, context)

        except GalleryError as exc:
            log_extra.update(error=exc.message, error_code=exc.error_code)
            if isinstance(exc, CLIENT_ERRORS):
                logger.warning("Domain error in handler", extra=log_extra)
            else:
                logger.exception("Domain error in handler", extra=log_extra)

            return domain_error_response(
                exc,
                failure_message="Failed to process request",
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning(
                "Bad request in handler",
                extra={**log_extra, "error": str(exc), "error_type": type(exc).__name__},
                exc_info=True,
            )
            return ResponseBuilder.bad_request(
                client_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception as exc:
            logger.exception(
                "Unexpected error in handler",
                extra={**log_extra, "error_type": type(exc).__name__},
            )
            return ResponseBuilder.internal_error(
                "Failed to process request",
                error=str(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
