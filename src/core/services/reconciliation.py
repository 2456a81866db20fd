"""Drift detection between the record store and the media store."""

from collections.abc import Iterable

from core.models.gallery import SyncStatus

DATABASE_ONLY_MESSAGE = "Image {asset_id} exists in database but not in storage"
STORAGE_ONLY_MESSAGE = "Image {asset_id} exists in storage but not in database"


def reconcile(
    record_asset_ids: Iterable[str],
    storage_asset_ids: Iterable[str],
) -> SyncStatus:
    """Compare the asset ids referenced by records with the ids listed in storage.

    One discrepancy is reported per asymmetric identifier: record-side
    orphans first (in record order), then storage-side orphans (in listing
    order). Both sides are materialized as hash sets, so the comparison is
    linear in the size of the inputs.

    Example:
        reconcile(["a", "b"], ["b", "c"])
        → in_sync=False, discrepancies=[
              "Image a exists in database but not in storage",
              "Image c exists in storage but not in database",
          ]
    """
    record_ids = list(record_asset_ids)
    storage_ids = list(storage_asset_ids)

    record_set = set(record_ids)
    storage_set = set(storage_ids)

    discrepancies: list[str] = []

    for asset_id in dict.fromkeys(record_ids):
        if asset_id not in storage_set:
            discrepancies.append(DATABASE_ONLY_MESSAGE.format(asset_id=asset_id))

    for asset_id in dict.fromkeys(storage_ids):
        if asset_id not in record_set:
            discrepancies.append(STORAGE_ONLY_MESSAGE.format(asset_id=asset_id))

    return SyncStatus(
        in_sync=not discrepancies,
        record_count=len(record_ids),
        asset_count=len(storage_ids),
        discrepancies=discrepancies,
    )
