"""
Test data factories.

Uses factory pattern to generate consistent test data.
"""

from datetime import date, timedelta
from math import ceil
from typing import Optional

from models.koji import Lot, ProductionRecord, ProductionRole, StorageType


class ProductionRecordFactory:
    """
    Factory for creating ProductionRecord instances.

    Usage:
        # Koji record with defaults
        record = ProductionRecordFactory.create()

        # Koji record plus its paired addition record
        records = ProductionRecordFactory.koji_with_addition(
            batch_id="12", stage="soe", rice_weight_kg=30,
            completion_date=date(2025, 1, 10), gap_days=2,
        )
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        batch_id: Optional[str] = None,
        stage_code: str = "motoKoji",
        rice_weight_kg: Optional[float] = 30.0,
        completion_date: Optional[date] = date(2025, 1, 10),
        addition_date: Optional[date] = None,
        brewing_year: Optional[int] = 2024,
        **saved,
    ) -> ProductionRecord:
        """
        Create a single record.

        Extra keyword arguments set the saved out-feed values
        (predicted_yield_rate, last_sheet_weight_kg, actual_yield_rate).
        """
        counter = cls._next_counter()
        return ProductionRecord(
            batch_id=batch_id or str(counter),
            stage_code=stage_code,
            brewing_year=brewing_year,
            rice_weight_kg=rice_weight_kg,
            completion_date=completion_date,
            addition_date=addition_date,
            **saved,
        )

    @classmethod
    def koji_with_addition(
        cls,
        batch_id: str,
        stage: str,
        rice_weight_kg: float,
        completion_date: date,
        gap_days: int,
        brewing_year: Optional[int] = 2024,
    ) -> list:
        """
        Koji record and the addition record scheduled gap_days later.

        Args:
            stage: Stage prefix, one of moto, soe, naka, tome
        """
        koji = cls.create(
            batch_id=batch_id,
            stage_code=f"{stage}Koji",
            rice_weight_kg=rice_weight_kg,
            completion_date=completion_date,
            brewing_year=brewing_year,
        )
        addition = cls.create(
            batch_id=batch_id,
            stage_code=f"{stage}Kake",
            rice_weight_kg=rice_weight_kg * 4,
            completion_date=None,
            addition_date=completion_date + timedelta(days=gap_days),
            brewing_year=brewing_year,
        )
        return [koji, addition]


class LotFactory:
    """
    Factory for creating Lot instances directly from a sheet count.

    Usage:
        lot = LotFactory.create(sheet_count=7)
        lots = LotFactory.create_batch([10, 5, 3])
    """

    @classmethod
    def create(
        cls,
        sheet_count: int,
        batch_id: str = "1",
        role: ProductionRole = ProductionRole.STARTER,
        storage_type: StorageType = StorageType.NONE,
        yield_rate: float = 120.0,
    ) -> Lot:
        """Lot whose rice weight fills sheet_count sheets exactly."""
        rice_weight = float(sheet_count * 10)
        predicted = rice_weight * yield_rate / 100
        assert ceil(rice_weight / 10) == sheet_count
        return Lot(
            batch_id=batch_id,
            role=role,
            rice_weight_kg=rice_weight,
            predicted_weight_kg=predicted,
            sheet_count=sheet_count,
            weight_per_sheet_kg=predicted / sheet_count if sheet_count else 0.0,
            storage_type=storage_type,
        )

    @classmethod
    def create_batch(cls, sheet_counts: list, **overrides) -> list:
        """One starter lot per sheet count, batch ids 1..n in order."""
        return [
            cls.create(sheet_count=count, batch_id=str(i + 1), **overrides)
            for i, count in enumerate(sheet_counts)
        ]
