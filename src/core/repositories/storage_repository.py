"""Abstract contract for the media store holding image binaries."""

from abc import ABC, abstractmethod

from core.models.asset import AssetInfo, UploadedAsset


class MediaStoreRepository(ABC):
    """Contract for storing image binaries under an opaque asset id.

    Implementations could be S3, GCS, an image CDN, etc.
    The gallery service depends on this interface, not the implementation.
    """

    @abstractmethod
    def upload_asset(
        self,
        *,
        file_data: bytes,
        content_type: str,
        asset_id: str | None = None,
    ) -> UploadedAsset:
        """Upload image bytes and describe the stored asset.

        Args:
            file_data: Binary image content
            content_type: Declared MIME type (e.g. 'image/png')
            asset_id: Reuse this identifier instead of assigning a new one

        Returns:
            Asset id, URL and image metadata read from the payload

        Raises:
            ValidationError: If the payload is not a readable image
            MediaStoreError: If the upload fails
        """

    @abstractmethod
    def replace_asset(
        self,
        *,
        asset_id: str,
        file_data: bytes,
        content_type: str,
    ) -> UploadedAsset:
        """Replace the binary stored under ``asset_id``.

        Raises:
            ValidationError: If the payload is not a readable image
            MediaStoreError: If the replacement fails
        """

    @abstractmethod
    def delete_asset(self, *, asset_id: str) -> None:
        """Delete the asset stored under ``asset_id``.

        Raises:
            MediaStoreError: If deletion fails
        """

    @abstractmethod
    def fetch_asset(self, *, asset_id: str) -> AssetInfo:
        """Fetch stored asset details.

        Raises:
            NotFoundError: If no asset exists under ``asset_id``
            MediaStoreError: If the lookup fails
        """

    @abstractmethod
    def list_asset_ids(self, *, max_results: int) -> list[str]:
        """List at most ``max_results`` asset identifiers in one call.

        Raises:
            MediaStoreError: If listing fails
        """
