"""Shared fixtures for the Environmental Monitoring Calculators test suite."""

import sys
import os
import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture
def reference_well():
    """The worked well example: 50 m well, 10 cm casing in a 20 cm bore."""
    return {
        "well_depth_m": 50.0,
        "casing_id_cm": 10.0,
        "water_level_m": 10.0,
        "head_height_m": 0.5,
        "bore_diameter_cm": 20.0,
        "porosity": 0.35,
    }


@pytest.fixture
def balanced_water():
    """A calcium-bicarbonate water whose major ions balance closely."""
    return {
        "k": 2.5,
        "na": 15.0,
        "ca": 80.2,
        "mg": 24.3,
        "cl": 20.0,
        "so4": 96.0,
        "hco3": 244.0,
        "co3": 1.0,
    }


@pytest.fixture
def steady_directions():
    """Ten wind direction readings with little spread around east."""
    return [88.0, 90.0, 92.0, 91.0, 89.0, 90.0, 93.0, 87.0, 90.0, 90.0]
