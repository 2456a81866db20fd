"""Gallery-level result models (listing pages, statistics, sync report)."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel

from core.models.image import ImageRecord
from core.models.pagination import PaginationInfo


class ImagePage(BaseModel):
    """One page of image records plus pagination metadata."""

    images: list[ImageRecord] = Field(default_factory=list)
    pagination: PaginationInfo


class GalleryStats(BaseModel):
    """Aggregate statistics across all image records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_images: StrictInt = 0
    public_images: StrictInt = 0
    private_images: StrictInt = 0
    total_size: StrictInt = Field(0, description="Sum of byte sizes")
    average_size: StrictInt = Field(0, description="Mean byte size, rounded half up")


class SyncStatus(BaseModel):
    """Result of comparing record-side and storage-side asset identifiers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    in_sync: StrictBool
    record_count: StrictInt = Field(..., description="Records read from the record store")
    asset_count: StrictInt = Field(..., description="Assets listed from the media store")
    discrepancies: list[str] = Field(default_factory=list)
