"""Tests for water quality analysis QC."""

import pytest

from models.errors import CalculationError
from models.water_quality import (
    INSUFFICIENT_DATA,
    OPTIONAL_IONS,
    SATURATED,
    SUPERSATURATED,
    UNDERSATURATED,
    IonSpec,
    analyze_water_quality,
    saturation_status,
)


class TestIonBalance:
    def test_balanced_water(self, balanced_water):
        report = analyze_water_quality(balanced_water)
        balance = report.ion_balance
        assert balance.total_cations_meq == pytest.approx(6.7181, abs=1e-3)
        assert balance.total_anions_meq == pytest.approx(6.5949, abs=1e-3)
        assert balance.error_pct == pytest.approx(0.925, abs=0.01)
        assert balance.passed is True

    def test_missing_anions_fail(self):
        report = analyze_water_quality({"ca": 80.0, "cl": 5.0})
        assert report.ion_balance.error_pct > 10
        assert report.ion_balance.passed is False

    def test_empty_analysis(self):
        report = analyze_water_quality({})
        assert report.ion_balance.error_pct == 0.0
        assert report.ion_balance.passed is True

    def test_optional_anion_counts(self, balanced_water):
        """62 mg/L nitrate adds one meq/L of anions."""
        base = analyze_water_quality(balanced_water).ion_balance
        with_no3 = analyze_water_quality(balanced_water, [("no3", 62.004)]).ion_balance
        assert with_no3.total_anions_meq - base.total_anions_meq == pytest.approx(1.0)
        assert with_no3.total_cations_meq == base.total_cations_meq

    def test_custom_ion_spec(self, balanced_water):
        barium = IonSpec("ba", "Barium (Ba2+)", 137.33, 2)
        base = analyze_water_quality(balanced_water).ion_balance
        report = analyze_water_quality(balanced_water, [(barium, 137.33)]).ion_balance
        assert report.total_cations_meq - base.total_cations_meq == pytest.approx(2.0)

    def test_non_positive_optional_values_ignored(self, balanced_water):
        base = analyze_water_quality(balanced_water)
        report = analyze_water_quality(balanced_water, [("fe3", 0.0), ("no3", -1.0), ("f", None)])
        assert report.ion_balance == base.ion_balance


class TestMeasuredComparisons:
    """Checks against measured TDS, EC and hardness."""

    def test_tds_vs_ions(self, balanced_water):
        report = analyze_water_quality(balanced_water, tds_measured=360.0)
        check = report.tds_vs_ions
        assert check.calculated_tds == pytest.approx(359.0)
        assert check.error_pct == pytest.approx(-0.2778, abs=1e-3)
        assert check.passed is True

    def test_bicarbonate_counts_as_carbonate_residue(self):
        report = analyze_water_quality({"hco3": 122.0})
        assert report.tds_vs_ions.calculated_tds == pytest.approx(60.0)

    def test_tds_ec_ratio(self, balanced_water):
        report = analyze_water_quality(balanced_water, tds_measured=360.0, ec_measured=600.0)
        assert report.tds_vs_ec.ratio == pytest.approx(0.6)
        assert report.tds_vs_ec.passed is True

    def test_tds_ec_ratio_out_of_range(self, balanced_water):
        report = analyze_water_quality(balanced_water, tds_measured=360.0, ec_measured=660.0)
        assert report.tds_vs_ec.passed is False

    def test_ec_vs_ions(self, balanced_water):
        report = analyze_water_quality(balanced_water, ec_measured=660.0)
        check = report.ec_vs_ions
        assert check.cation_error_pct == pytest.approx(1.79, abs=0.01)
        assert check.anion_error_pct == pytest.approx(-0.08, abs=0.01)
        assert check.passed is True

    def test_ec_vs_ions_fails_on_cation_side(self, balanced_water):
        report = analyze_water_quality(balanced_water, ec_measured=600.0)
        assert report.ec_vs_ions.cations_passed is False
        assert report.ec_vs_ions.passed is False

    def test_hardness(self, balanced_water):
        report = analyze_water_quality(balanced_water, hardness_measured=300.0)
        assert report.hardness.calculated == pytest.approx(301.75)
        assert report.hardness.passed is True

    def test_hardness_includes_iron_and_manganese(self, balanced_water):
        base = analyze_water_quality(balanced_water).hardness.calculated
        with_metals = analyze_water_quality(balanced_water, [("fe3", 18.6), ("mn2", 27.5)]).hardness.calculated
        assert with_metals - base == pytest.approx(100.0)

    def test_missing_measurements_report_none(self, balanced_water):
        report = analyze_water_quality(balanced_water)
        assert report.tds_vs_ions.passed is None
        assert report.tds_vs_ions.error_pct is None
        assert report.tds_vs_ec.ratio is None
        assert report.ec_vs_ions.passed is None
        assert report.hardness.passed is None

    def test_nan_measurement_treated_as_missing(self, balanced_water):
        report = analyze_water_quality(balanced_water, tds_measured=float("nan"))
        assert report.tds_vs_ions.measured_tds is None


class TestSolubility:
    def test_saturation_bands(self):
        assert saturation_status(0.0, 1e-9) == INSUFFICIENT_DATA
        assert saturation_status(2.0, 1.0) == SUPERSATURATED
        assert saturation_status(0.5, 1.0) == UNDERSATURATED
        assert saturation_status(1.05, 1.0) == SATURATED

    def test_calcite_and_gypsum(self, balanced_water):
        checks = {c.mineral: c for c in analyze_water_quality(balanced_water).solubility}
        assert checks["CaCO3"].status == SUPERSATURATED
        assert checks["CaSO4"].status == UNDERSATURATED
        assert checks["PbCrO4"].status == INSUFFICIENT_DATA
        assert checks["PbSO4"].status == INSUFFICIENT_DATA

    def test_lead_chromate(self, balanced_water):
        report = analyze_water_quality(balanced_water, [("pb2", 0.1), ("cro4", 0.1)])
        checks = {c.mineral: c for c in report.solubility}
        assert checks["PbCrO4"].iap == pytest.approx((0.1e-3 / 207.2) * (0.1e-3 / 115.99))
        assert checks["PbCrO4"].status == SUPERSATURATED


class TestValidation:
    def test_unknown_base_ion(self):
        with pytest.raises(CalculationError, match="Unknown base ion"):
            analyze_water_quality({"ba": 1.0})

    def test_negative_concentration(self):
        with pytest.raises(CalculationError, match="negative"):
            analyze_water_quality({"ca": -1.0})

    def test_negative_measurement(self, balanced_water):
        with pytest.raises(CalculationError, match="TDS"):
            analyze_water_quality(balanced_water, tds_measured=-5.0)

    def test_unknown_optional_ion(self, balanced_water):
        with pytest.raises(CalculationError, match="Unknown optional ion"):
            analyze_water_quality(balanced_water, [("xx", 1.0)])

    def test_uncharged_ion_spec(self, balanced_water):
        with pytest.raises(CalculationError, match="charge"):
            analyze_water_quality(balanced_water, [(IonSpec("x", "X", 10.0, 0), 1.0)])

    def test_keys_are_case_insensitive(self, balanced_water):
        upper = {k.upper(): v for k, v in balanced_water.items()}
        assert analyze_water_quality(upper) == analyze_water_quality(balanced_water)

    def test_optional_ion_catalogue(self):
        assert OPTIONAL_IONS["fe3"].equivalent_weight == pytest.approx(55.845 / 3)
        assert OPTIONAL_IONS["po4"].is_cation is False
