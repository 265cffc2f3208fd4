"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.koji import (
    ProductionRole,
    ROLE_PRECEDENCE,
    StorageType,
    role_for_stage_code,
    ProductionRecord,
    Lot,
    ShelfCell,
    ShelfAllocation,
    ShelfCapacityExceeded,
    ShelfAllocationResult,
)
from models.dekoji import (
    DekojiPlanRequest,
    DekojiSummary,
    DekojiPlan,
    AllocationRequest,
    TrueYieldRequest,
    TrueYieldResponse,
    StorageClassificationRequest,
    StorageClassificationResponse,
    DekojiResultUpdate,
    ResultUpdatesRequest,
)

__all__ = [
    # Base
    "BaseSchema",

    # Koji
    "ProductionRole",
    "ROLE_PRECEDENCE",
    "StorageType",
    "role_for_stage_code",
    "ProductionRecord",
    "Lot",
    "ShelfCell",
    "ShelfAllocation",
    "ShelfCapacityExceeded",
    "ShelfAllocationResult",

    # Dekoji
    "DekojiPlanRequest",
    "DekojiSummary",
    "DekojiPlan",
    "AllocationRequest",
    "TrueYieldRequest",
    "TrueYieldResponse",
    "StorageClassificationRequest",
    "StorageClassificationResponse",
    "DekojiResultUpdate",
    "ResultUpdatesRequest",
]
