"""
Timestamp helpers for image records.

Record timestamps are compared as strings when listings are sorted by
``createdAt`` / ``updatedAt``, so every value must share one fixed-width
ISO-8601 layout in UTC.
"""

from datetime import datetime, timezone


def to_record_timestamp(moment: datetime) -> str:
    """Render ``moment`` as a fixed-width UTC ISO-8601 string.

    Naive datetimes are taken to be UTC.

    Example:
        2024-01-15T10:42:31.000000+00:00
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utc_now_iso() -> str:
    """Return the current UTC time as a record timestamp."""
    return to_record_timestamp(datetime.now(timezone.utc))
