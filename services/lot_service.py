"""
Lot Service: Groups a day's koji records into production lots.

Algorithm:
1. FILTER to koji records with a positive rice weight
2. GROUP by (batch, role), keeping first-seen order
3. CALCULATE rice weight, predicted weight, sheet count, weight per sheet
4. CLASSIFY storage from the paired addition record (same batch, year, role)
5. SORT by role precedence, then batch number

The sort order is the out-feed order. The shelf allocator reuses it for
label assignment and tie-breaks.
"""

from math import ceil
from typing import Dict, List, Optional, Tuple

import structlog

from config.koji import ADDITION_STAGE_CODES, SHEET_CAPACITY_KG
from exceptions import InvalidYieldRateError
from models.koji import (
    ROLE_PRECEDENCE,
    Lot,
    ProductionRecord,
    ProductionRole,
    StorageType,
)
from services.storage_service import classify_storage

logger = structlog.get_logger(__name__)


def lot_sort_key(lot: Lot) -> Tuple[int, int, int, str]:
    """Role precedence, then batch id as an integer (non-numeric ids last)."""
    try:
        return (ROLE_PRECEDENCE[lot.role], 0, int(lot.batch_id), "")
    except ValueError:
        return (ROLE_PRECEDENCE[lot.role], 1, 0, lot.batch_id)


class LotService:
    """Builds ordered koji lots from production records."""

    def aggregate_lots(
        self,
        records: List[ProductionRecord],
        yield_rate: float,
    ) -> List[Lot]:
        """
        Group koji records into lots in out-feed order.

        Args:
            records: All of the day's records (koji and addition records)
            yield_rate: Predicted yield rate in percent

        Returns:
            Lots sorted by role precedence, then batch number

        Raises:
            InvalidYieldRateError: If yield_rate is not positive
        """
        if yield_rate <= 0:
            raise InvalidYieldRateError(yield_rate)

        koji_records = [
            r for r in records
            if r.is_koji and r.weight > 0
        ]

        grouped: Dict[Tuple[str, ProductionRole], List[ProductionRecord]] = {}
        for record in koji_records:
            grouped.setdefault((record.batch_id, record.role), []).append(record)

        lots = [
            self._build_lot(batch_id, role, group, records, yield_rate)
            for (batch_id, role), group in grouped.items()
        ]
        lots.sort(key=lot_sort_key)

        logger.info(
            "lots_aggregated",
            record_count=len(records),
            koji_record_count=len(koji_records),
            lot_count=len(lots),
            yield_rate=yield_rate,
        )
        return lots

    def _build_lot(
        self,
        batch_id: str,
        role: ProductionRole,
        group: List[ProductionRecord],
        all_records: List[ProductionRecord],
        yield_rate: float,
    ) -> Lot:
        rice_weight = sum(r.weight for r in group)
        predicted_weight = rice_weight * (yield_rate / 100)
        sheet_count = ceil(rice_weight / SHEET_CAPACITY_KG)
        weight_per_sheet = predicted_weight / sheet_count if sheet_count else 0.0

        return Lot(
            batch_id=batch_id,
            role=role,
            rice_weight_kg=rice_weight,
            predicted_weight_kg=predicted_weight,
            sheet_count=sheet_count,
            weight_per_sheet_kg=weight_per_sheet,
            storage_type=self._storage_type_for(group[0], all_records),
            records=list(group),
        )

    def _storage_type_for(
        self,
        koji_record: ProductionRecord,
        all_records: List[ProductionRecord],
    ) -> StorageType:
        """Classify storage from the first koji record and its addition record."""
        if koji_record.completion_date is None:
            return StorageType.NONE

        addition = self.find_addition_record(koji_record, all_records)
        if addition is None or addition.addition_date is None:
            return StorageType.NONE

        return classify_storage(koji_record.completion_date, addition.addition_date)

    def find_addition_record(
        self,
        koji_record: ProductionRecord,
        all_records: List[ProductionRecord],
    ) -> Optional[ProductionRecord]:
        """Paired addition record: same batch, same brewing year, same role."""
        addition_code = ADDITION_STAGE_CODES.get(koji_record.role.value)
        if addition_code is None:
            return None

        for record in all_records:
            if (
                record.batch_id == koji_record.batch_id
                and record.brewing_year == koji_record.brewing_year
                and record.stage_code == addition_code
            ):
                return record
        return None


# Singleton
_lot_service: Optional[LotService] = None


def get_lot_service() -> LotService:
    """Get the singleton lot service instance."""
    global _lot_service
    if _lot_service is None:
        _lot_service = LotService()
    return _lot_service
