"""
Storage classification for koji lots.

Koji is normally added the day after it comes off the shelf. When the
addition is scheduled later, the koji has to be kept cold in the meantime:

    gap 1 day      -> none (same-cycle handling)
    gap 2-3 days   -> refrigerated
    gap 4+ days    -> frozen
    anything else  -> none
"""

from datetime import date
from typing import Optional

from models.koji import StorageType


def storage_gap_days(completion_date: date, addition_date: Optional[date]) -> Optional[int]:
    """Whole days from drying completion to the scheduled addition."""
    if addition_date is None:
        return None
    return (addition_date - completion_date).days


def classify_storage(completion_date: date, addition_date: Optional[date]) -> StorageType:
    """
    Classify the cold-storage handling a lot needs.

    Args:
        completion_date: Date the koji finished drying
        addition_date: Scheduled addition date, None when there is no pairing

    Returns:
        StorageType (never raises)
    """
    gap_days = storage_gap_days(completion_date, addition_date)
    if gap_days is None:
        return StorageType.NONE
    if gap_days == 1:
        return StorageType.NONE
    if gap_days in (2, 3):
        return StorageType.REFRIGERATED
    if gap_days >= 4:
        return StorageType.FROZEN
    return StorageType.NONE
