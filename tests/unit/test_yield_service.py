"""
Unit tests for the true yield rate calculation.

Run: pytest tests/unit/test_yield_service.py -v
"""

import pytest

from exceptions import DegenerateYieldInputError, ValidationError
from services.yield_service import calculate_true_yield_rate, round_half_up


class TestTrueYieldRate:
    """
    Formula:
        dry_weight = total - 10
        total_koji = dry_weight x rate / 100 + measured
        true_rate  = round1(total_koji / total x 100)
    """

    def test_measured_sheet_matches_prediction(self):
        """
        total = 42 kg, rate = 120%, measured = 12 kg
        dry = 32, predicted = 38.4, total koji = 50.4
        50.4 / 42 = 120.0%
        """
        assert calculate_true_yield_rate(42, 120, 12) == 120.0

    def test_heavier_sheet_raises_rate(self):
        """
        total = 42 kg, rate = 120%, measured = 13 kg
        total koji = 38.4 + 13 = 51.4
        51.4 / 42 = 122.38% -> 122.4
        """
        assert calculate_true_yield_rate(42, 120, 13) == 122.4

    def test_lighter_sheet_lowers_rate(self):
        """
        total = 100 kg, rate = 120%, measured = 10 kg
        total koji = 90 x 1.2 + 10 = 118
        118 / 100 = 118.0%
        """
        assert calculate_true_yield_rate(100, 120, 10) == 118.0

    def test_monotonic_in_measured_weight(self):
        rates = [
            calculate_true_yield_rate(75, 120, measured)
            for measured in (8.0, 10.0, 12.0, 14.0, 16.0)
        ]
        assert rates == sorted(rates)
        assert len(set(rates)) == len(rates)

    @pytest.mark.parametrize("total", [10, 9.99, 5, 0])
    def test_ten_kg_or_less_is_rejected(self, total):
        with pytest.raises(DegenerateYieldInputError) as exc_info:
            calculate_true_yield_rate(total, 120, 12)

        assert exc_info.value.code == "DEGENERATE_YIELD_INPUT"
        assert exc_info.value.status_code == 422

    def test_degenerate_input_is_validation_error(self):
        with pytest.raises(ValidationError):
            calculate_true_yield_rate(10, 120, 12)

    def test_just_above_boundary_is_defined(self):
        rate = calculate_true_yield_rate(10.5, 120, 12)
        assert rate > 0


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [
        (2.25, 2.3),
        (2.35, 2.4),
        (122.38095, 122.4),
        (120.04, 120.0),
        (119.95, 120.0),
    ])
    def test_rounds_half_up(self, value, expected):
        assert round_half_up(value) == expected
