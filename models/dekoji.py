"""
Dekoji (koji out-feed) request and response schemas.
"""

from datetime import date
from typing import List, Optional

from pydantic import Field

from models.base import BaseSchema
from models.koji import Lot, ProductionRecord, ShelfAllocationResult, StorageType


class DekojiPlanRequest(BaseSchema):
    """
    Records for one out-feed day and the predicted yield rate.

    When completion_date is given, koji records finishing on other days are
    ignored. Without it the records are taken as one day's set.
    """

    records: List[ProductionRecord] = Field(
        default_factory=list,
        description="Koji records and their paired addition records"
    )
    completion_date: Optional[date] = Field(
        None,
        description="Out-feed day to plan"
    )
    yield_rate: Optional[float] = Field(
        None,
        gt=0,
        description="Predicted yield rate (%); settings default when omitted"
    )


class DekojiSummary(BaseSchema):
    """Day totals shown beside the shelf."""

    lot_count: int = Field(default=0, ge=0)
    total_rice_weight_kg: float = Field(default=0.0, ge=0)
    total_sheet_count: int = Field(default=0, ge=0)
    predicted_koji_weight_kg: float = Field(default=0.0, ge=0)


class DekojiPlan(BaseSchema):
    """Full out-feed plan for one day."""

    completion_date: Optional[date] = None
    yield_rate: float = Field(..., gt=0)
    lots: List[Lot] = Field(default_factory=list, description="Lots in out-feed order")
    allocation: ShelfAllocationResult
    summary: DekojiSummary = Field(default_factory=DekojiSummary)
    column_storage_types: List[StorageType] = Field(
        default_factory=list,
        description="Storage handling per column A-D (empty when not allocated)"
    )
    last_sheet_weight_kg: Optional[float] = Field(
        None,
        description="Last sheet measurement saved by an earlier out-feed"
    )
    actual_yield_rate: Optional[float] = Field(
        None,
        description="Corrected yield rate saved by an earlier out-feed"
    )


class AllocationRequest(BaseSchema):
    """Lots to place on the shelf."""

    lots: List[Lot] = Field(default_factory=list)


class TrueYieldRequest(BaseSchema):
    """Inputs for the corrected yield rate."""

    total_rice_weight_kg: float = Field(..., gt=0, description="Day's total rice weight")
    predicted_rate: float = Field(..., gt=0, description="Predicted yield rate (%)")
    measured_last_sheet_weight_kg: float = Field(
        ...,
        gt=0,
        description="Measured koji weight of the last sheet"
    )


class TrueYieldResponse(BaseSchema):
    """Corrected yield rate, one decimal."""

    true_yield_rate: float
    total_rice_weight_kg: float
    predicted_rate: float
    measured_last_sheet_weight_kg: float


class StorageClassificationRequest(BaseSchema):
    completion_date: date
    addition_date: Optional[date] = None


class StorageClassificationResponse(BaseSchema):
    storage_type: StorageType
    gap_days: Optional[int] = None


class DekojiResultUpdate(BaseSchema):
    """Derived fields to write back onto one koji record."""

    batch_id: str
    stage_code: str
    brewing_year: Optional[int] = None
    predicted_yield_rate: float
    last_sheet_weight_kg: Optional[float] = None
    actual_yield_rate: Optional[float] = None
    storage_type: StorageType = StorageType.NONE


class ResultUpdatesRequest(BaseSchema):
    lots: List[Lot] = Field(default_factory=list)
    yield_rate: float = Field(..., gt=0)
    last_sheet_weight_kg: Optional[float] = Field(None, ge=0)
    actual_yield_rate: Optional[float] = Field(None, ge=0)
