"""Media store asset models."""

from pydantic import BaseModel, Field, StrictStr


class UploadedAsset(BaseModel):
    """Descriptive metadata returned by the media store after an upload."""

    asset_id: StrictStr = Field(..., description="Object key assigned by the media store")
    url: StrictStr = Field(..., description="Resolvable URL of the stored asset")
    format: StrictStr = Field(..., description="Image format (e.g. jpg, png)")
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    byte_size: int = Field(..., ge=0)


class AssetInfo(BaseModel):
    """Asset details fetched from the media store."""

    asset_id: StrictStr
    byte_size: int = Field(..., ge=0)
    content_type: StrictStr | None = None
    last_modified: StrictStr | None = None
    etag: StrictStr | None = None
