"""
Koji production and shelf schemas.

A day's koji records are grouped into lots (one per batch and role), and the
lots are packed onto the 4-column drying shelf. The shelf result is a tagged
union: either an allocated matrix or a capacity overflow, never both.
"""

from datetime import date
from enum import Enum
from math import isfinite
from typing import Annotated, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from config.koji import ADDITION_STAGE_CODES, KOJI_MARKER, STAGE_ROLE_PREFIXES
from models.base import BaseSchema


class ProductionRole(str, Enum):
    """Brewing stage a koji lot is made for."""
    STARTER = "starter"
    FIRST_ADDITION = "first_addition"
    SECOND_ADDITION = "second_addition"
    THIRD_ADDITION = "third_addition"
    OTHER = "other"


# Out-feed order: starter first, "other" last
ROLE_PRECEDENCE = {
    ProductionRole.STARTER: 0,
    ProductionRole.FIRST_ADDITION: 1,
    ProductionRole.SECOND_ADDITION: 2,
    ProductionRole.THIRD_ADDITION: 3,
    ProductionRole.OTHER: 4,
}


class StorageType(str, Enum):
    """Cold-storage handling required between drying and addition."""
    NONE = "none"
    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"


ADDITION_CODES = frozenset(ADDITION_STAGE_CODES.values())


def role_for_stage_code(stage_code: str) -> ProductionRole:
    """Map a stage code such as "soeKoji" or "soeKake" to its role."""
    for prefix, role in STAGE_ROLE_PREFIXES.items():
        if stage_code.startswith(prefix):
            return ProductionRole(role)
    return ProductionRole.OTHER


class ProductionRecord(BaseSchema):
    """
    One production record supplied by the persistence layer.

    Koji records carry the completion (drying finished) date; the paired
    addition record of the same batch and role carries the scheduled
    addition date.
    """
    model_config = ConfigDict(frozen=True)

    batch_id: str = Field(
        ...,
        min_length=1,
        description="Batch number (numeric string)",
        examples=["12"]
    )
    stage_code: str = Field(
        ...,
        min_length=1,
        description="Process code, e.g. motoKoji, soeKake",
        examples=["motoKoji", "tomeKake"]
    )
    brewing_year: Optional[int] = Field(None, description="Brewing year the batch belongs to")
    rice_weight_kg: Optional[float] = Field(
        None,
        description="Raw rice weight in kg; empty or zero means not applicable"
    )
    completion_date: Optional[date] = Field(None, description="Date the koji finished drying")
    addition_date: Optional[date] = Field(None, description="Scheduled addition date")

    # Saved by an earlier out-feed of the same day
    predicted_yield_rate: Optional[float] = Field(None, description="Saved predicted yield rate (%)")
    last_sheet_weight_kg: Optional[float] = Field(None, description="Saved last sheet measurement")
    actual_yield_rate: Optional[float] = Field(None, description="Saved corrected yield rate (%)")

    @field_validator(
        "rice_weight_kg",
        "predicted_yield_rate",
        "last_sheet_weight_kg",
        "actual_yield_rate",
        mode="before",
    )
    @classmethod
    def malformed_number_is_none(cls, v):
        """Blank, non-numeric or non-finite values contribute nothing."""
        if v is None:
            return None
        try:
            number = float(v)
        except (TypeError, ValueError, OverflowError):
            return None
        return number if isfinite(number) else None

    @property
    def role(self) -> ProductionRole:
        return role_for_stage_code(self.stage_code)

    @property
    def is_koji(self) -> bool:
        return KOJI_MARKER in self.stage_code

    @property
    def is_addition(self) -> bool:
        return self.stage_code in ADDITION_CODES

    @property
    def weight(self) -> float:
        """Raw weight, zero when absent."""
        return self.rice_weight_kg or 0.0


class Lot(BaseSchema):
    """One batch+role's koji output for the day."""

    batch_id: str = Field(..., description="Batch number")
    role: ProductionRole = Field(..., description="Brewing stage")
    rice_weight_kg: float = Field(..., ge=0, description="Sum of raw rice weight")
    predicted_weight_kg: float = Field(..., ge=0, description="rice_weight_kg x yield rate")
    sheet_count: int = Field(..., ge=0, description="ceil(rice_weight_kg / 10)")
    weight_per_sheet_kg: float = Field(..., ge=0, description="Predicted koji weight per sheet")
    storage_type: StorageType = Field(
        default=StorageType.NONE,
        description="Cold-storage handling"
    )
    columns: List[str] = Field(
        default_factory=list,
        description="Shelf column labels assigned to this lot, in slot order"
    )
    records: List[ProductionRecord] = Field(
        default_factory=list,
        description="Koji records the lot was built from"
    )


class ShelfCell(BaseSchema):
    """One physical sheet on the shelf, or an empty slot."""

    batch_id: Optional[str] = None
    role: Optional[ProductionRole] = None
    weight_per_sheet_kg: Optional[float] = None
    storage_type: Optional[StorageType] = None

    @property
    def is_empty(self) -> bool:
        return self.batch_id is None


class ShelfAllocation(BaseSchema):
    """Successful shelf allocation."""

    status: Literal["allocated"] = "allocated"
    column_labels: List[str] = Field(
        default_factory=lambda: ["A", "B", "C", "D"],
        description="Column order of matrix rows and column_counts"
    )
    matrix: List[List[ShelfCell]] = Field(
        default_factory=list,
        description="Rows of 4 cells, top row first"
    )
    column_counts: List[int] = Field(
        default_factory=lambda: [0, 0, 0, 0],
        description="Sheets occupying each column"
    )
    lots: List[Lot] = Field(
        default_factory=list,
        description="Lots with their final column labels"
    )


class ShelfCapacityExceeded(BaseSchema):
    """Lots need more columns than the shelf has."""

    status: Literal["capacity_exceeded"] = "capacity_exceeded"
    error: str = Field(..., description="Human-readable message")
    required_columns: int = Field(..., ge=0)
    max_columns: int = Field(..., ge=1)


ShelfAllocationResult = Annotated[
    Union[ShelfAllocation, ShelfCapacityExceeded],
    Field(discriminator="status"),
]
