"""
Business logic services.

Each service handles one step of the koji out-feed pipeline.
"""

from services.storage_service import classify_storage, storage_gap_days
from services.lot_service import LotService, get_lot_service
from services.shelf_allocation_service import (
    ShelfAllocationService,
    get_shelf_allocation_service,
)
from services.yield_service import calculate_true_yield_rate
from services.dekoji_service import DekojiService, get_dekoji_service

__all__ = [
    "classify_storage",
    "storage_gap_days",
    "LotService",
    "get_lot_service",
    "ShelfAllocationService",
    "get_shelf_allocation_service",
    "calculate_true_yield_rate",
    "DekojiService",
    "get_dekoji_service",
]
