"""Tests for round-half-to-even."""

import pytest

from models.errors import CalculationError
from models.rounding import round_half_to_even


class TestRoundHalfToEven:
    """Tie handling and ordinary rounding."""

    def test_tie_rounds_down_to_even(self):
        """0.125 sits exactly on a tie and the even neighbour is 0.12."""
        assert round_half_to_even(0.125, 2) == 0.12

    def test_tie_rounds_up_to_even(self):
        """0.135 scales to 13.500000000000002, still treated as a tie."""
        assert round_half_to_even(0.135, 2) == 0.14

    @pytest.mark.parametrize("value, decimals, expected", [
        (2.5, 0, 2.0),
        (3.5, 0, 4.0),
        (0.25, 1, 0.2),
        (0.35, 1, 0.4),
        (9.5, 1, 9.5),
        (40.45, 1, 40.4),
    ])
    def test_ties_at_other_precisions(self, value, decimals, expected):
        """Ties go to the even digit whatever the precision."""
        assert round_half_to_even(value, decimals) == pytest.approx(expected)

    @pytest.mark.parametrize("value, expected", [
        (1.234, 1.23),
        (1.236, 1.24),
        (9.0899999, 9.09),
        (0.0, 0.0),
    ])
    def test_non_ties_round_to_nearest(self, value, expected):
        """Values away from a tie round to the nearest neighbour."""
        assert round_half_to_even(value, 2) == pytest.approx(expected)

    def test_negative_tie(self):
        """-2.5 rounds to -2, the even neighbour."""
        assert round_half_to_even(-2.5, 0) == -2.0

    def test_default_is_two_decimals(self):
        assert round_half_to_even(1.005) == pytest.approx(1.0)

    @pytest.mark.parametrize("value, decimals", [
        (float("inf"), 2),
        (float("-inf"), 1),
        (float("nan"), 2),
        (1e307, 2),
    ])
    def test_non_finite_scaled_value_raises(self, value, decimals):
        """Values that overflow when scaled are rejected as calculation errors."""
        with pytest.raises(CalculationError, match="out of range"):
            round_half_to_even(value, decimals)
