"""Tests for the groundwater well volume calculator."""

import pytest

from models.errors import CalculationError
from models.well_volume import compute_well


class TestComputeWell:
    """Depth and volume outputs."""

    def test_reference_depths(self, reference_well):
        result = compute_well(**reference_well)
        assert result.buried_depth_m == pytest.approx(9.5)
        assert result.water_depth_m == pytest.approx(40.5)

    def test_reference_volume(self, reference_well):
        """(78.5 * 4050 + 235.5 * 4050 * 0.35) / 1000 = 651.73 L."""
        result = compute_well(**reference_well)
        assert result.water_volume_l == pytest.approx(651.7)

    def test_missing_porosity_gives_none(self, reference_well):
        reference_well.pop("porosity")
        result = compute_well(**reference_well)
        assert result.water_volume_l is None
        assert result.water_depth_m == pytest.approx(40.5)

    def test_nan_porosity_gives_none(self, reference_well):
        reference_well["porosity"] = float("nan")
        assert compute_well(**reference_well).water_volume_l is None

    def test_zero_porosity_counts_casing_only(self, reference_well):
        """Porosity 0 is a real value, distinct from missing data."""
        reference_well["porosity"] = 0.0
        result = compute_well(**reference_well)
        assert result.water_volume_l == pytest.approx(317.9)

    def test_bore_narrower_than_casing_has_no_annulus(self, reference_well):
        reference_well["bore_diameter_cm"] = 5.0
        reference_well["porosity"] = 0.9
        result = compute_well(**reference_well)
        assert result.water_volume_l == pytest.approx(317.9)

    def test_uses_spreadsheet_pi(self):
        """pi = 3.14: a 1 m column in a 20 cm casing holds 31.4 L."""
        result = compute_well(1.0, 20.0, 0.0, 0.0, 20.0, 0.3)
        assert result.water_volume_l == pytest.approx(31.4)

    def test_porosity_out_of_range_raises(self, reference_well):
        reference_well["porosity"] = 1.5
        with pytest.raises(CalculationError, match="Porosity"):
            compute_well(**reference_well)

    def test_missing_depth_raises(self, reference_well):
        reference_well["well_depth_m"] = None
        with pytest.raises(CalculationError, match="Well depth"):
            compute_well(**reference_well)

    def test_depths_rounded_half_to_even(self):
        """Buried depth 2.25 m rounds to 2.2, not 2.3."""
        result = compute_well(20.0, 5.0, 2.75, 0.5, 10.0)
        assert result.buried_depth_m == pytest.approx(2.2)
