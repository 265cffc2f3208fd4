"""
True yield rate calculation.

Once the last sheet of the day has been weighed, the predicted yield rate is
corrected: every sheet but the measured one is assumed to follow the
predicted rate, and the measured sheet contributes its real weight.

    dry_weight      = total_rice - 10
    predicted_koji  = dry_weight x predicted_rate / 100
    total_koji      = predicted_koji + measured_last_sheet
    true_rate       = round1(total_koji / total_rice x 100)
"""

from decimal import Decimal, ROUND_HALF_UP

import structlog

from config.koji import SHEET_CAPACITY_KG
from exceptions import DegenerateYieldInputError

logger = structlog.get_logger(__name__)


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a person would: 0.05 -> 0.1, not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_true_yield_rate(
    total_rice_weight_kg: float,
    predicted_rate: float,
    measured_last_sheet_weight_kg: float,
) -> float:
    """
    Corrected yield rate from one measured sheet.

    Args:
        total_rice_weight_kg: Day's total raw rice weight
        predicted_rate: Predicted yield rate (%)
        measured_last_sheet_weight_kg: Measured koji weight of the last sheet

    Returns:
        Yield rate in percent, one decimal

    Raises:
        DegenerateYieldInputError: If total_rice_weight_kg <= 10
    """
    if total_rice_weight_kg <= SHEET_CAPACITY_KG:
        logger.warning(
            "true_yield_degenerate_input",
            total_rice_weight_kg=total_rice_weight_kg,
        )
        raise DegenerateYieldInputError(total_rice_weight_kg, SHEET_CAPACITY_KG)

    dry_weight = total_rice_weight_kg - SHEET_CAPACITY_KG
    predicted_koji_weight = dry_weight * (predicted_rate / 100)
    total_koji_weight = predicted_koji_weight + measured_last_sheet_weight_kg

    rate = round_half_up(total_koji_weight / total_rice_weight_kg * 100)

    logger.debug(
        "true_yield_calculated",
        total_rice_weight_kg=total_rice_weight_kg,
        predicted_rate=predicted_rate,
        measured_last_sheet_weight_kg=measured_last_sheet_weight_kg,
        true_yield_rate=rate,
    )
    return rate
