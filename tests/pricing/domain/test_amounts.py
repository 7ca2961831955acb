"""Tests for the numeric guards."""

from decimal import Decimal

import pytest
from pricing.utils.amounts import as_number, as_points, non_negative
from protean.exceptions import ValidationError


class TestAsNumber:
    def test_none_is_zero(self):
        assert as_number(None, "amount") == 0.0

    def test_int_and_decimal(self):
        assert as_number(5, "amount") == 5.0
        assert as_number(Decimal("12.50"), "amount") == 12.5

    @pytest.mark.parametrize("value", ["10", True, [1], {"value": 1}])
    def test_wrong_types_fail_fast(self, value):
        with pytest.raises(ValidationError) as exc:
            as_number(value, "amount")
        assert "amount" in exc.value.messages

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_values_fail_fast(self, value):
        with pytest.raises(ValidationError):
            as_number(value, "amount")


class TestClamping:
    def test_negative_is_clamped(self):
        assert non_negative(-3.5, "amount") == 0.0

    def test_points_are_whole(self):
        assert as_points(150.9, "points") == 150

    def test_negative_points_are_clamped(self):
        assert as_points(-20, "points") == 0
