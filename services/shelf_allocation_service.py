"""
Shelf Allocation Service: Packs koji lots onto the 4-column drying shelf.

Each column holds 5 sheets. Lots arrive in out-feed order (role, then batch).

Algorithm:
1. NEED: each lot needs ceil(sheets / 5) column slots
2. CHECK: more than 4 slots in total is a capacity overflow (returned, not raised)
3. FILL: while fewer than 4 slots are used, give one more slot to the lot with
   the heaviest per-column load; ties go to the lot earliest in out-feed order
4. LABEL: hand out D, C, B, A across all slots in lot order
5. REBALANCE: a multi-column lot holding A swaps A with one of its own full
   columns (single swap, no cascade)
6. PLACE: split each lot's sheets over its slots, remainder to the first slots
7. BUILD: matrix rows in column order A, B, C, D

Input lots are never mutated; the result carries labelled copies.
"""

from math import ceil
from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog

from config.koji import (
    CAPACITY_EXCEEDED_MESSAGE,
    DISPLAY_COLUMN_ORDER,
    LABEL_ASSIGNMENT_ORDER,
    MAX_COLUMNS,
    MAX_ROWS_PER_COLUMN,
)
from models.koji import (
    Lot,
    ShelfAllocation,
    ShelfCapacityExceeded,
    ShelfCell,
)

logger = structlog.get_logger(__name__)

A_COLUMN = "A"


def split_sheets(sheet_count: int, slot_count: int) -> List[int]:
    """Even split with the remainder going to the first slots."""
    if slot_count <= 0:
        return []
    base, remainder = divmod(sheet_count, slot_count)
    return [base + 1 if i < remainder else base for i in range(slot_count)]


def per_column_load(sheet_count: int, slot_count: int) -> int:
    """Sheets in the fullest column if spread over slot_count columns."""
    base, remainder = divmod(sheet_count, slot_count)
    return base + 1 if remainder > 0 else base


class ShelfAllocationService:
    """Allocates lots to shelf columns."""

    def allocate(
        self,
        lots: Sequence[Lot],
    ) -> Union[ShelfAllocation, ShelfCapacityExceeded]:
        """
        Place lots on the shelf.

        Args:
            lots: Lots in out-feed order

        Returns:
            ShelfAllocation, or ShelfCapacityExceeded when the lots need
            more than 4 columns
        """
        lots = list(lots)
        slot_counts = [
            ceil(lot.sheet_count / MAX_ROWS_PER_COLUMN) for lot in lots
        ]
        required_columns = sum(slot_counts)

        if required_columns > MAX_COLUMNS:
            logger.warning(
                "shelf_capacity_exceeded",
                lot_count=len(lots),
                required_columns=required_columns,
                max_columns=MAX_COLUMNS,
            )
            return ShelfCapacityExceeded(
                error=CAPACITY_EXCEEDED_MESSAGE,
                required_columns=required_columns,
                max_columns=MAX_COLUMNS,
            )

        slot_counts = self._fill_spare_columns(lots, slot_counts)
        labels = self._assign_labels(slot_counts)
        labels = [
            self._rebalance_a_column(lot.sheet_count, lot_labels)
            for lot, lot_labels in zip(lots, labels)
        ]

        column_data = self._place_sheets(lots, labels)
        column_counts = [len(column_data[letter]) for letter in DISPLAY_COLUMN_ORDER]
        max_rows = max(column_counts) if column_counts else 0

        matrix = [
            [
                column_data[letter][row] if row < len(column_data[letter]) else ShelfCell()
                for letter in DISPLAY_COLUMN_ORDER
            ]
            for row in range(max_rows)
        ]

        logger.info(
            "shelf_allocated",
            lot_count=len(lots),
            required_columns=required_columns,
            column_counts=column_counts,
        )

        return ShelfAllocation(
            column_labels=list(DISPLAY_COLUMN_ORDER),
            matrix=matrix,
            column_counts=column_counts,
            lots=[
                lot.model_copy(update={"columns": list(lot_labels)})
                for lot, lot_labels in zip(lots, labels)
            ],
        )

    def _fill_spare_columns(
        self,
        lots: List[Lot],
        slot_counts: List[int],
    ) -> List[int]:
        """Hand out unused columns one at a time."""
        slot_counts = list(slot_counts)
        total_columns = sum(slot_counts)

        while total_columns < MAX_COLUMNS:
            selected = self._select_lot_for_spare_column(lots, slot_counts)
            if selected is None:
                break
            slot_counts[selected] += 1
            total_columns += 1

            logger.debug(
                "spare_column_assigned",
                batch_id=lots[selected].batch_id,
                role=lots[selected].role.value,
                slots=slot_counts[selected],
            )

        return slot_counts

    def _select_lot_for_spare_column(
        self,
        lots: List[Lot],
        slot_counts: List[int],
    ) -> Optional[int]:
        """
        Index of the lot that gets the next spare column.

        Scans from the last lot backwards keeping the running maximum with >=,
        so the heaviest load wins and ties go to the earliest lot.
        Lots without slots (no sheets) are never chosen.
        """
        selected = None
        running_max = 0

        for i in range(len(lots) - 1, -1, -1):
            if slot_counts[i] == 0:
                continue
            load = per_column_load(lots[i].sheet_count, slot_counts[i])
            if load >= running_max:
                running_max = load
                selected = i

        return selected

    def _assign_labels(self, slot_counts: List[int]) -> List[Tuple[str, ...]]:
        """One running D, C, B, A counter across all lots."""
        labels = []
        cursor = 0
        for count in slot_counts:
            labels.append(tuple(LABEL_ASSIGNMENT_ORDER[cursor:cursor + count]))
            cursor += count
        return labels

    def _rebalance_a_column(
        self,
        sheet_count: int,
        lot_labels: Tuple[str, ...],
    ) -> Tuple[str, ...]:
        """Swap A with the lot's first other full column, if any."""
        if A_COLUMN not in lot_labels or len(lot_labels) <= 1:
            return lot_labels

        sheets = split_sheets(sheet_count, len(lot_labels))
        a_index = lot_labels.index(A_COLUMN)
        full_index = next(
            (
                i for i, count in enumerate(sheets)
                if count >= MAX_ROWS_PER_COLUMN and i != a_index
            ),
            None,
        )
        if full_index is None:
            return lot_labels

        swapped = list(lot_labels)
        swapped[a_index], swapped[full_index] = swapped[full_index], swapped[a_index]
        return tuple(swapped)

    def _place_sheets(
        self,
        lots: List[Lot],
        labels: List[Tuple[str, ...]],
    ) -> Dict[str, List[ShelfCell]]:
        """Sheets per column letter, in lot order."""
        column_data: Dict[str, List[ShelfCell]] = {
            letter: [] for letter in DISPLAY_COLUMN_ORDER
        }

        for lot, lot_labels in zip(lots, labels):
            cell = ShelfCell(
                batch_id=lot.batch_id,
                role=lot.role,
                weight_per_sheet_kg=lot.weight_per_sheet_kg,
                storage_type=lot.storage_type,
            )
            for letter, sheets in zip(lot_labels, split_sheets(lot.sheet_count, len(lot_labels))):
                column_data[letter].extend(cell.model_copy() for _ in range(sheets))

        return column_data


# Singleton
_shelf_allocation_service: Optional[ShelfAllocationService] = None


def get_shelf_allocation_service() -> ShelfAllocationService:
    """Get the singleton shelf allocation service instance."""
    global _shelf_allocation_service
    if _shelf_allocation_service is None:
        _shelf_allocation_service = ShelfAllocationService()
    return _shelf_allocation_service
