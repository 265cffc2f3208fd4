"""
Dekoji Service: Plans one koji out-feed day.

Pipeline:
1. SELECT the day's koji records and the addition records of their batches
2. AGGREGATE records into lots (LotService)
3. ALLOCATE lots to the shelf (ShelfAllocationService)
4. SUMMARIZE day totals

The caller re-runs plan_day on every yield rate change, so every call is
recomputed from scratch and returns identical output for identical input.
"""

from datetime import date
from typing import List, Optional, Tuple

import structlog

from config.settings import settings
from exceptions import InvalidYieldRateError
from models.dekoji import DekojiPlan, DekojiResultUpdate, DekojiSummary
from models.koji import (
    Lot,
    ProductionRecord,
    ShelfAllocation,
    StorageType,
)
from services.lot_service import LotService, get_lot_service
from services.shelf_allocation_service import (
    ShelfAllocationService,
    get_shelf_allocation_service,
)
from services.yield_service import calculate_true_yield_rate

logger = structlog.get_logger(__name__)


def _positive_or_none(value: Optional[float]) -> Optional[float]:
    return value if value and value > 0 else None


class DekojiService:
    """Runs the full out-feed pipeline for a day."""

    def __init__(
        self,
        lot_service: Optional[LotService] = None,
        shelf_service: Optional[ShelfAllocationService] = None,
    ):
        self.lot_service = lot_service or get_lot_service()
        self.shelf_service = shelf_service or get_shelf_allocation_service()

    def select_day_records(
        self,
        records: List[ProductionRecord],
        completion_date: date,
    ) -> List[ProductionRecord]:
        """
        Koji records finishing on completion_date, plus the addition
        records of the same batches.
        """
        koji_records = [
            r for r in records
            if r.is_koji and r.completion_date == completion_date
        ]
        batch_ids = {r.batch_id for r in koji_records}
        addition_records = [
            r for r in records
            if r.batch_id in batch_ids and r.is_addition
        ]
        return koji_records + addition_records

    def plan_day(
        self,
        records: List[ProductionRecord],
        completion_date: Optional[date] = None,
        yield_rate: Optional[float] = None,
    ) -> DekojiPlan:
        """
        Build the out-feed plan for one day.

        Args:
            records: Production records (may span several days when
                completion_date is given)
            completion_date: Day to plan; None takes records as one day's set
            yield_rate: Predicted yield rate (%). When None, the rate saved on
                the first koji record of the day, then the settings default

        Returns:
            DekojiPlan. A shelf overflow is reported in plan.allocation,
            not raised.

        Raises:
            InvalidYieldRateError: If yield_rate is not positive
        """
        if completion_date is not None:
            records = self.select_day_records(records, completion_date)

        saved_rate, saved_weight, saved_actual_rate = self.saved_values(records)
        if yield_rate is None:
            yield_rate = saved_rate or settings.default_yield_rate
        if yield_rate <= 0:
            raise InvalidYieldRateError(yield_rate)

        lots = self.lot_service.aggregate_lots(records, yield_rate)
        allocation = self.shelf_service.allocate(lots)

        if isinstance(allocation, ShelfAllocation):
            lots = allocation.lots
            column_storage_types = self.column_storage_types(allocation)
        else:
            column_storage_types = []

        summary = self.summarize(lots, yield_rate)

        logger.info(
            "dekoji_day_planned",
            completion_date=completion_date.isoformat() if completion_date else None,
            yield_rate=yield_rate,
            lot_count=summary.lot_count,
            total_sheet_count=summary.total_sheet_count,
            allocation_status=allocation.status,
        )

        return DekojiPlan(
            completion_date=completion_date,
            yield_rate=yield_rate,
            lots=lots,
            allocation=allocation,
            summary=summary,
            column_storage_types=column_storage_types,
            last_sheet_weight_kg=saved_weight,
            actual_yield_rate=saved_actual_rate,
        )

    def saved_values(
        self,
        records: List[ProductionRecord],
    ) -> Tuple[Optional[float], Optional[float], Optional[float]]:
        """
        Predicted rate, last sheet weight and actual rate saved by an earlier
        out-feed, read from the first koji record. Non-positive values count
        as not saved.
        """
        first = next((r for r in records if r.is_koji), None)
        if first is None:
            return None, None, None
        return (
            _positive_or_none(first.predicted_yield_rate),
            _positive_or_none(first.last_sheet_weight_kg),
            _positive_or_none(first.actual_yield_rate),
        )

    def summarize(self, lots: List[Lot], yield_rate: float) -> DekojiSummary:
        """Day totals."""
        total_rice = sum(lot.rice_weight_kg for lot in lots)
        return DekojiSummary(
            lot_count=len(lots),
            total_rice_weight_kg=total_rice,
            total_sheet_count=sum(lot.sheet_count for lot in lots),
            predicted_koji_weight_kg=total_rice * (yield_rate / 100),
        )

    def column_storage_types(self, allocation: ShelfAllocation) -> List[StorageType]:
        """Storage handling per column, from the column's first occupied cell."""
        storage_types = []
        for col_index in range(len(allocation.column_labels)):
            occupied = [
                row[col_index] for row in allocation.matrix
                if not row[col_index].is_empty
            ]
            storage_types.append(
                occupied[0].storage_type if occupied else StorageType.NONE
            )
        return storage_types

    def true_yield_for_plan(
        self,
        plan: DekojiPlan,
        measured_last_sheet_weight_kg: float,
    ) -> float:
        """Corrected yield rate using the plan's rice total and rate."""
        return calculate_true_yield_rate(
            plan.summary.total_rice_weight_kg,
            plan.yield_rate,
            measured_last_sheet_weight_kg,
        )

    def build_result_updates(
        self,
        lots: List[Lot],
        yield_rate: float,
        last_sheet_weight_kg: Optional[float] = None,
        actual_yield_rate: Optional[float] = None,
    ) -> List[DekojiResultUpdate]:
        """
        One write-back per koji record of every lot.

        Zero measurements are treated as not measured.
        """
        updates = [
            DekojiResultUpdate(
                batch_id=record.batch_id,
                stage_code=record.stage_code,
                brewing_year=record.brewing_year,
                predicted_yield_rate=yield_rate,
                last_sheet_weight_kg=last_sheet_weight_kg or None,
                actual_yield_rate=actual_yield_rate or None,
                storage_type=lot.storage_type,
            )
            for lot in lots
            for record in lot.records
        ]

        logger.info(
            "dekoji_result_updates_built",
            lot_count=len(lots),
            update_count=len(updates),
        )
        return updates


# Singleton
_dekoji_service: Optional[DekojiService] = None


def get_dekoji_service() -> DekojiService:
    """Get the singleton dekoji service instance."""
    global _dekoji_service
    if _dekoji_service is None:
        _dekoji_service = DekojiService()
    return _dekoji_service
