"""Multipart form parsing for API Gateway proxy events."""

import base64
import binascii
from io import BytesIO
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field
from werkzeug.datastructures import FileStorage
from werkzeug.formparser import parse_form_data
from werkzeug.utils import secure_filename

from core.models.errors import ValidationError

logger = Logger(utc=True)


class UploadedFile(BaseModel):
    """A file part extracted from a multipart body."""

    filename: str = Field("", description="Sanitized client filename")
    content_type: str = Field("application/octet-stream", description="Declared MIME type")
    data: bytes = Field(b"", description="Raw file content")

    @property
    def size(self) -> int:
        return len(self.data)


class MultipartForm(BaseModel):
    """Text fields and files from a multipart/form-data request."""

    fields: dict[str, str] = Field(default_factory=dict)
    files: dict[str, UploadedFile] = Field(default_factory=dict)


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup on an API Gateway event."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_body_bytes(event: dict[str, Any]) -> bytes:
    """Return the raw request body, decoding API Gateway base64 bodies.

    Raises:
        ValidationError: If a base64-flagged body cannot be decoded
    """
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(message="Invalid request body encoding") from exc

    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def _to_uploaded_file(storage: FileStorage) -> UploadedFile:
    return UploadedFile(
        filename=secure_filename(storage.filename or ""),
        content_type=storage.mimetype or "application/octet-stream",
        data=storage.read(),
    )


def parse_multipart(event: dict[str, Any]) -> MultipartForm:
    """Parse a multipart/form-data API Gateway event.

    A request that is not multipart yields an empty form. File parts
    without a filename or content are ignored.
    """
    content_type = get_header(event, "Content-Type") or ""
    if not content_type.lower().startswith("multipart/form-data"):
        logger.debug("Request body is not multipart", extra={"content_type": content_type})
        return MultipartForm()

    body = get_body_bytes(event)

    # werkzeug parses WSGI environs; build the minimal one it reads
    environ = {
        "REQUEST_METHOD": event.get("httpMethod") or "POST",
        "CONTENT_TYPE": content_type,
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": BytesIO(body),
    }

    try:
        _, form, files = parse_form_data(environ)
    except ValueError as exc:
        raise ValidationError(message="Invalid form data") from exc

    parsed_files = {
        name: _to_uploaded_file(storage)
        for name, storage in files.items()
        if storage.filename
    }
    parsed_files = {name: upload for name, upload in parsed_files.items() if upload.data}

    logger.debug(
        "Multipart body parsed",
        extra={"fields": sorted(form.keys()), "files": sorted(parsed_files)},
    )
    return MultipartForm(fields=form.to_dict(), files=parsed_files)
