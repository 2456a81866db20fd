"""Pydantic models for image upload request."""

from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.models.query import normalize_tags
from core.utils.constants import (
    ALLOWED_CONTENT_TYPE_PREFIX,
    MAX_FILE_SIZE,
    TRUTHY_FORM_VALUES,
    format_file_size,
)
from core.utils.multipart import MultipartForm, UploadedFile

logger = Logger(utc=True)


def parse_form_bool(value: Any) -> bool:
    """Form checkbox semantics: "true", "1" and "on" are true."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY_FORM_VALUES


def check_image_file(file: UploadedFile) -> None:
    """
    Validate an uploaded file part:
    - declared content type must start with image/
    - size must not exceed MAX_FILE_SIZE
    """
    if not file.content_type.lower().startswith(ALLOWED_CONTENT_TYPE_PREFIX):
        logger.warning("Rejected file type", extra={"content_type": file.content_type})
        raise ValueError("Invalid file type")

    if file.size > MAX_FILE_SIZE:
        logger.warning(
            "Rejected oversized file",
            extra={"size": format_file_size(file.size), "limit": format_file_size(MAX_FILE_SIZE)},
        )
        raise ValueError("File too large")


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request (multipart form)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: UploadedFile | None = Field(None, description="Image file part")
    title: str | None = Field(None, max_length=255, description="Image title")
    description: str = Field("", max_length=1000, description="Image description")
    tags: list[str] = Field(default_factory=list, description="Comma-separated tags")
    is_public: bool = Field(False, description="Visibility flag (true/1/on)")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str]:
        return normalize_tags(value) or []

    @field_validator("is_public", mode="before")
    @classmethod
    def validate_is_public(cls, value: Any) -> bool:
        return parse_form_bool(value) if value is not None else False

    @model_validator(mode="after")
    def validate_upload(self) -> "ImageUploadRequest":
        """Check file presence, title, file type and size, in that order."""
        if self.file is None:
            raise ValueError("No file provided")

        if not self.title:
            raise ValueError("Title is required")

        check_image_file(self.file)
        return self

    @classmethod
    def from_form(cls, form: MultipartForm) -> dict[str, Any]:
        """Map multipart form parts to model fields."""
        fields = form.fields
        return {
            "file": form.files.get("file"),
            "title": fields.get("title"),
            "description": fields.get("description") or "",
            "tags": fields.get("tags"),
            "is_public": fields.get("isPublic"),
        }
