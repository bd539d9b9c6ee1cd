"""Tests for the dissolved oxygen saturation model."""

import math

import pytest

from models.dissolved_oxygen import (
    DO_TABLE_1ATM,
    compute_do,
    saturated_do_at_1atm,
    saturated_do_at_pressure,
    water_vapour_pressure_kpa,
)
from models.errors import CalculationError


class TestSaturatedDOAt1Atm:
    """Table lookup and interpolation."""

    def test_table_has_41_entries(self):
        assert len(DO_TABLE_1ATM) == 41

    @pytest.mark.parametrize("t, expected", [(0, 14.62), (20, 9.09), (25, 8.26), (40, 6.43)])
    def test_integer_temperatures_hit_table(self, t, expected):
        """Integer temperatures return the tabulated value exactly."""
        assert saturated_do_at_1atm(t) == expected

    def test_fractional_temperature_interpolates(self):
        """20.5 C lies halfway between the 20 and 21 C entries."""
        assert saturated_do_at_1atm(20.5) == pytest.approx((9.09 + 8.91) / 2)

    def test_quarter_degree_interpolation(self):
        assert saturated_do_at_1atm(10.25) == pytest.approx(11.29 + 0.25 * (11.03 - 11.29))

    @pytest.mark.parametrize("t", [-0.1, 40.01, float("nan")])
    def test_outside_table_returns_none(self, t):
        """No extrapolation beyond 0-40 C."""
        assert saturated_do_at_1atm(t) is None

    def test_table_is_decreasing(self):
        """Oxygen solubility falls as water warms."""
        assert all(a > b for a, b in zip(DO_TABLE_1ATM, DO_TABLE_1ATM[1:]))


class TestVapourPressure:
    def test_known_values(self):
        """About 0.611 kPa at 0 C and 2.34 kPa at 20 C."""
        assert water_vapour_pressure_kpa(0) == pytest.approx(0.61121)
        assert water_vapour_pressure_kpa(20) == pytest.approx(2.338, abs=0.002)

    def test_increases_with_temperature(self):
        values = [water_vapour_pressure_kpa(t) for t in range(0, 41, 5)]
        assert all(a < b for a, b in zip(values, values[1:]))


class TestPressureCorrection:
    def test_standard_pressure_is_identity(self):
        """At 101.325 kPa the correction factor is exactly 1."""
        assert saturated_do_at_pressure(20, 101.325) == pytest.approx(9.09)

    def test_lower_pressure_lowers_do(self):
        assert saturated_do_at_pressure(20, 90.0) < saturated_do_at_pressure(20, 101.325)

    def test_matches_formula(self):
        t, p = 15.0, 95.0
        es = water_vapour_pressure_kpa(t)
        expected = 10.08 * (p - es) / (101.325 - es)
        assert saturated_do_at_pressure(t, p) == pytest.approx(expected)


class TestComputeDO:
    """End-to-end DO computation."""

    def test_standard_conditions_at_20c(self):
        """101.325 kPa and 20 C gives the table value 9.09 +/- 0.5."""
        result = compute_do(101.325, 20)
        assert result.standard_value == pytest.approx(9.09)
        assert result.range_min == pytest.approx(8.59)
        assert result.range_max == pytest.approx(9.59)
        assert result.g2_at_1atm == 9.09
        assert result.raw_i2 == pytest.approx(9.09)

    def test_standard_value_is_rounded_raw(self):
        result = compute_do(98.6, 17.3)
        assert result.standard_value == pytest.approx(round(result.raw_i2, 2), abs=0.0051)
        assert result.standard_value * 100 == pytest.approx(round(result.standard_value * 100))

    def test_reports_intermediate_values(self):
        result = compute_do(100.0, 25)
        assert result.es_kpa == pytest.approx(water_vapour_pressure_kpa(25))
        assert result.g2_at_1atm == 8.26

    @pytest.mark.parametrize("t, message", [(40.5, "too high"), (-0.5, "too low")])
    def test_out_of_range_temperature(self, t, message):
        with pytest.raises(CalculationError, match=message):
            compute_do(101.325, t)

    def test_boundary_temperatures_allowed(self):
        assert compute_do(101.325, 0).standard_value == pytest.approx(14.62)
        assert compute_do(101.325, 40).standard_value == pytest.approx(6.43)

    def test_missing_pressure(self):
        with pytest.raises(CalculationError, match="pressure"):
            compute_do(float("nan"), 20)

    def test_missing_temperature(self):
        with pytest.raises(CalculationError, match="temperature"):
            compute_do(101.325, None)

    def test_result_is_immutable(self):
        result = compute_do(101.325, 20)
        with pytest.raises(AttributeError):
            result.standard_value = 1.0

    def test_no_nan_in_output(self):
        result = compute_do(80.0, 35.5)
        assert not any(math.isnan(v) for v in (result.standard_value, result.raw_i2, result.es_kpa))

    def test_infinite_pressure_raises(self):
        with pytest.raises(CalculationError):
            compute_do(float("inf"), 20)
