"""
API Gateway proxy responses in the gallery envelope.

Every JSON body has the shape::

    {"success": bool, "message": str, "data"?, "pagination"?, "error"?, "details"?}

Absent members are omitted rather than serialized as null.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel

from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)

JsonDict = dict[str, Any]


class Envelope(BaseModel):
    """Response body shared by every endpoint."""

    success: bool
    message: str
    data: Any = None
    pagination: JsonDict | None = None
    error: str | None = None
    details: Any = None
    request_id: str | None = None


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    @staticmethod
    def build_headers(cors_origin: str | None = None) -> dict[str, str]:
        return {
            "Content-Type": DEFAULT_CONTENT_TYPE,
            "Access-Control-Allow-Origin": cors_origin or CORS_ORIGIN,
            "Access-Control-Allow-Headers": CORS_HEADERS,
            "Access-Control-Allow-Methods": CORS_METHODS,
        }

    @classmethod
    def respond(
        cls,
        status: HTTPStatus,
        envelope: Envelope,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return {
            "statusCode": status.value,
            "headers": cls.build_headers(cors_origin),
            "body": envelope.model_dump_json(exclude_none=True),
        }

    @classmethod
    def ok(
        cls,
        message: str,
        data: Any = None,
        *,
        pagination: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        envelope = Envelope(
            success=True,
            message=message,
            data=data,
            pagination=pagination,
            request_id=request_id,
        )
        return cls.respond(HTTPStatus.OK, envelope, cors_origin=cors_origin)

    @classmethod
    def created(
        cls,
        message: str,
        data: Any = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        envelope = Envelope(success=True, message=message, data=data, request_id=request_id)
        return cls.respond(HTTPStatus.CREATED, envelope, cors_origin=cors_origin)

    @classmethod
    def options(cls, *, cors_origin: str | None = None) -> JsonDict:
        """CORS preflight: 200 with an empty body."""
        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": cls.build_headers(cors_origin),
            "body": "",
        }

    @classmethod
    def error(
        cls,
        status: HTTPStatus,
        message: str,
        *,
        error: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        envelope = Envelope(
            success=False,
            message=message,
            error=error or None,
            details=details or None,
            request_id=request_id,
        )
        return cls.respond(status, envelope, cors_origin=cors_origin)

    @classmethod
    def bad_request(cls, message: str, **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.BAD_REQUEST, message, **kwargs)

    @classmethod
    def validation_error(cls, *, message: str, **kwargs: Any) -> JsonDict:
        """400 raised by request model validation."""
        return cls.error(
            HTTPStatus.BAD_REQUEST,
            message,
            error=ERROR_CODE_VALIDATION_FAILED,
            **kwargs,
        )

    @classmethod
    def not_found(cls, message: str = "Image not found", **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.NOT_FOUND, message, **kwargs)

    @classmethod
    def internal_error(cls, message: str = "Internal server error", **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.INTERNAL_SERVER_ERROR, message, **kwargs)
