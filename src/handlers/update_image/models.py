"""Pydantic models for image update request."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.models.query import normalize_tags
from core.utils.multipart import MultipartForm, UploadedFile
from handlers.upload_image.models import check_image_file, parse_form_bool


class ImageUpdateRequest(BaseModel):
    """
    Validation model for image update request (multipart form).

    Every field is optional; only supplied fields are patched. An empty
    ``tags`` field clears the tags.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(None, description="Image record id from the path")
    file: UploadedFile | None = Field(None, description="Replacement image file")
    title: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=1000)
    tags: list[str] | None = Field(None)
    is_public: bool | None = Field(None)

    @field_validator("id")
    @classmethod
    def validate_id_present(cls, value: str | None) -> str:
        if not value:
            raise ValueError("Image ID is required")
        return value

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise ValueError("Title cannot be empty")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return normalize_tags(value) or []

    @field_validator("is_public", mode="before")
    @classmethod
    def validate_is_public(cls, value: Any) -> bool | None:
        return parse_form_bool(value) if value is not None else None

    @model_validator(mode="after")
    def validate_file(self) -> "ImageUpdateRequest":
        if self.file is not None:
            check_image_file(self.file)
        return self

    @classmethod
    def from_form(cls, record_id: str | None, form: MultipartForm) -> dict[str, Any]:
        """Map path id and multipart parts to model fields."""
        fields = form.fields
        return {
            "id": record_id,
            "file": form.files.get("file"),
            "title": fields.get("title"),
            "description": fields.get("description"),
            "tags": fields.get("tags"),
            "is_public": fields.get("isPublic"),
        }
