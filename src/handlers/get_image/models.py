"""Pydantic models for get image request."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(None, description="Image record id to retrieve")

    @field_validator("id")
    @classmethod
    def validate_id_present(cls, value: str | None) -> str:
        if not value:
            raise ValueError("Image ID is required")
        return value
