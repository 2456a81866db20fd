"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(None, description="Image record id to delete")

    @field_validator("id")
    @classmethod
    def validate_id_present(cls, value: str | None) -> str:
        if not value:
            raise ValueError("Image ID is required")
        return value


class DeleteImageResponse(BaseModel):
    """Response model for successful image deletion."""

    id: str = Field(..., description="Deleted image record id")
    deleted: bool = Field(True, description="Always true on success")
