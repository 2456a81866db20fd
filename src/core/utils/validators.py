"""Request model validation for handlers."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.utils.response import ResponseBuilder

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error,"


def _client_message(error: dict[str, Any]) -> str:
    error_type = str(error.get("type", ""))

    if error_type == "missing":
        return "This field is required"

    # int_type, string_type, bool_type, ...
    if error_type.endswith("_type"):
        return "Invalid value type"

    message = str(error.get("msg", "Invalid value"))
    return message.removeprefix(_VALUE_ERROR_PREFIX).strip()


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic errors to ``{"field", "message"}`` pairs.

    Input values, ``ctx`` and documentation URLs are dropped. Model-level
    errors have no location and are reported against ``body``.
    """
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())) or "body",
            "message": _client_message(error),
        }
        for error in errors
    ]


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Validate handler input against a request model.

    The 400 message is the first sanitized error so clients see e.g.
    "Invalid page number"; all errors are listed under ``details``.

    Returns:
        (True, validated_model) on success
        (False, error_response) on validation failure
    """
    try:
        return True, model.model_validate(data)

    except ValidationError as exc:
        details = sanitize_validation_errors(exc.errors())
        message = details[0]["message"] if details else "Invalid request payload"

        return False, ResponseBuilder.validation_error(
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )
