"""Shared fixtures for the SAPS tests."""

from pathlib import Path
import sys

import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def normal_record():
    """50-year-old with every first-day value inside the normal band (SAPS = 1)."""
    return {
        'age': 50,
        'heartrate_max': 90, 'heartrate_min': 90,
        'sysbp_max': 120, 'sysbp_min': 120,
        'tempc_max': 37.0, 'tempc_min': 37.0,
        'resprate_max': 18, 'resprate_min': 18,
        'urineoutput': 1000,
        'bun_max': 5, 'bun_min': 4,
        'hematocrit_max': 40, 'hematocrit_min': 40,
        'wbc_max': 8, 'wbc_min': 8,
        'glucose_max': 7, 'glucose_min': 7,
        'potassium_max': 4, 'potassium_min': 4,
        'sodium_max': 140, 'sodium_min': 140,
        'bicarbonate_max': 25, 'bicarbonate_min': 25,
        'mingcs': 15,
    }


@pytest.fixture
def icustays():
    return pd.DataFrame({
        'subject_id': [10, 11, 12],
        'hadm_id': [100, 110, 120],
        'icustay_id': [2003, 2001, 2002],
        'intime': pd.to_datetime(['2150-01-01 08:00', '2150-02-01 12:00', '2150-03-01 00:00']),
        'outtime': pd.to_datetime(['2150-01-03 08:00', '2150-02-02 12:00', '2150-03-04 00:00']),
    })
