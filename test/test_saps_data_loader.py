"""Tests for the SAPS cohort assembly: age, CPAP flag, first-day tables."""

import numpy as np
import pandas as pd
import pytest

from src.scoring_models import config
from src.scoring_models.saps import itemid_mappings
from src.scoring_models.saps.data_loader import (
    STAY_COLUMNS,
    assemble_cohort,
    calculate_age,
    coalesce,
    extract_cpap_flags,
    load_cpap_flags,
    load_demographics,
    load_first_day_table,
    load_icustays,
)


def _first_day_frame(name, rows):
    """Build a first-day table with the full column contract from partial rows."""
    columns = ['icustay_id'] + itemid_mappings.FIRST_DAY_TABLES[name]
    return pd.DataFrame(rows).reindex(columns=columns)

# =============================================================================
# Demographics
# =============================================================================

def test_age_uses_calendar_days():
    # raw MIMIC strings, with and without a time part
    intime = pd.Series(['2150-01-01 08:00:00', '2150-01-01 08:00', '2150-01-04 00:00:00'])
    dob = pd.Series(['2100-01-01', '2150-01-01 23:00', '2150-01-01 00:00:00'])

    age = calculate_age(intime, dob)

    assert age.tolist() == [50.0, 0.0, 0.01]


def test_age_handles_shifted_dob_and_missing_values():
    intime = pd.Series(pd.to_datetime(['2150-01-01', '2150-01-01']))
    dob = pd.Series(pd.to_datetime(['1850-01-01', None]))

    age = calculate_age(intime, dob)

    assert age.iloc[0] == pytest.approx(300.0, abs=0.01)
    assert np.isnan(age.iloc[1])


def test_demographics_inner_joins_admissions_and_patients(icustays):
    patients = pd.DataFrame({
        'subject_id': [10, 11],
        'dob': pd.to_datetime(['2100-01-01', '2050-02-01']),
    })
    admissions = pd.DataFrame({'hadm_id': [100, 120]})

    demo = load_demographics(icustays, patients=patients, admissions=admissions)

    # stay 2001 has no admission row, stay 2002 has no patient row
    assert demo['icustay_id'].tolist() == [2003]
    assert demo['age'].iloc[0] == 50.0

# =============================================================================
# CPAP flag
# =============================================================================

def test_cpap_flag_window_and_exact_labels(icustays):
    chartevents = pd.DataFrame([
        # exactly intime + 24h is still inside the window
        (2001, 467, '2150-02-02 12:00', 'CPAP Mask'),
        (2002, 226732, '2150-03-02 00:00:01', 'Bipap Mask'),   # after the window
        (2002, 469, '2150-03-01 05:00', 'cpap mask'),          # label is case-sensitive
        (2002, 211, '2150-03-01 05:00', 'CPAP Mask'),          # not an O2 device item
        (2003, 226732, '2150-01-01 07:59', 'Bipap Mask'),      # before intime
        (2003, 469, '2150-01-01 09:00', 'Bipap Mask'),
        (2003, 469, '2150-01-01 10:00', 'Bipap Mask'),
        (9999, 467, '2150-01-01 10:00', 'CPAP Mask'),          # unknown stay
    ], columns=['icustay_id', 'itemid', 'charttime', 'value'])

    flags = extract_cpap_flags(chartevents, icustays, time_window_hours=24)

    assert flags['icustay_id'].tolist() == [2001, 2003]
    assert flags['cpap'].tolist() == [1, 1]


def test_cpap_flag_with_mixed_charttime_precision(icustays):
    chartevents = pd.DataFrame([
        (2001, 467, '2150-02-01 13:00', 'CPAP Mask'),
        (2003, 469, '2150-01-01 09:00:30', 'Bipap Mask'),
    ], columns=['icustay_id', 'itemid', 'charttime', 'value'])

    flags = extract_cpap_flags(chartevents, icustays)

    assert flags['icustay_id'].tolist() == [2001, 2003]


def test_cpap_flag_has_no_explicit_false(icustays):
    chartevents = pd.DataFrame([
        (2001, 467, '2150-02-01 13:00', 'Nasal cannula'),
    ], columns=['icustay_id', 'itemid', 'charttime', 'value'])

    flags = extract_cpap_flags(chartevents, icustays)

    assert len(flags) == 0
    assert list(flags.columns) == ['icustay_id', 'cpap']


def test_load_cpap_flags_reads_chunks(tmp_path, icustays, monkeypatch):
    path = tmp_path / "CHARTEVENTS.csv"
    pd.DataFrame({
        'ROW_ID': [1, 2, 3, 4, 5],
        'SUBJECT_ID': [11, 11, 10, 10, 12],
        'ICUSTAY_ID': [2001, np.nan, 2003, 2003, 2002],
        'ITEMID': [467, 467, 211, 226732, 469],
        'CHARTTIME': ['2150-02-01 13:00', '2150-02-01 13:00', '2150-01-01 09:00',
                      '2150-01-01 09:00', '2150-03-05 00:00'],
        'VALUE': ['CPAP Mask', 'CPAP Mask', '80', 'Bipap Mask', 'CPAP Mask'],
        'VALUENUM': [np.nan, np.nan, 80.0, np.nan, np.nan],
    }).to_csv(path, index=False)
    monkeypatch.setattr(config, 'CHUNK_SIZE', 2)

    flags = load_cpap_flags(icustays, chartevents_path=str(path))

    assert flags['icustay_id'].tolist() == [2001, 2003]


def test_load_cpap_flags_missing_file(icustays, tmp_path):
    with pytest.raises(FileNotFoundError):
        load_cpap_flags(icustays, chartevents_path=str(tmp_path / "missing.csv.gz"))

# =============================================================================
# Table loaders
# =============================================================================

def test_load_icustays_normalizes_columns_and_filters(tmp_path):
    path = tmp_path / "ICUSTAYS.csv"
    pd.DataFrame({
        'ROW_ID': [1, 2, 3],
        'SUBJECT_ID': [1, 2, 3],
        'HADM_ID': [10, 20, 30],
        'ICUSTAY_ID': [300, 100, 200],
        'INTIME': ['2150-01-01 00:00', '2150-01-01 00:00:15', '2150-01-01'],
        'OUTTIME': ['2150-01-02 00:00'] * 3,
        'LOS': [1.0, 1.0, 1.0],
    }).to_csv(path, index=False)

    all_stays = load_icustays(str(path))
    subset = load_icustays(str(path), icustay_ids=[200, 300])

    assert list(all_stays.columns) == STAY_COLUMNS
    assert all_stays['icustay_id'].tolist() == [100, 200, 300]
    assert pd.api.types.is_datetime64_any_dtype(all_stays['intime'])
    assert subset['icustay_id'].tolist() == [200, 300]


def test_load_icustays_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_icustays(str(tmp_path / "nope.csv"))

    path = tmp_path / "ICUSTAYS.csv"
    pd.DataFrame({'SUBJECT_ID': [1], 'ICUSTAY_ID': [1]}).to_csv(path, index=False)
    with pytest.raises(ValueError):
        load_icustays(str(path))

    pd.DataFrame({
        'subject_id': [1, 1], 'hadm_id': [1, 1], 'icustay_id': [5, 5],
        'intime': ['2150-01-01'] * 2, 'outtime': ['2150-01-02'] * 2,
    }).to_csv(path, index=False)
    with pytest.raises(ValueError):
        load_icustays(str(path))


def test_first_day_table_missing_file_is_empty(tmp_path):
    table = load_first_day_table('gcsfirstday', path=str(tmp_path / "gcsfirstday.csv"))

    assert len(table) == 0
    assert list(table.columns) == ['icustay_id', 'mingcs']


def test_first_day_table_fills_missing_contract_columns(tmp_path):
    path = tmp_path / "labsfirstday.csv"
    pd.DataFrame({
        'SUBJECT_ID': [1, 2],
        'ICUSTAY_ID': [100, 200],
        'BUN_MAX': [30.0, 10.0],
        'BUN_MIN': [20.0, 5.0],
    }).to_csv(path, index=False)

    table = load_first_day_table('labsfirstday', path=str(path))

    assert list(table.columns) == ['icustay_id'] + itemid_mappings.LABS_COLUMNS
    assert table['bun_max'].tolist() == [30.0, 10.0]
    assert table['sodium_max'].isna().all()


def test_first_day_table_rejects_duplicate_stays(tmp_path):
    path = tmp_path / "uofirstday.csv"
    pd.DataFrame({'icustay_id': [1, 1], 'urineoutput': [100, 200]}).to_csv(path, index=False)

    with pytest.raises(ValueError):
        load_first_day_table('uofirstday', path=str(path))

# =============================================================================
# Cohort assembly
# =============================================================================

def test_coalesce_prefers_first_non_missing():
    primary = pd.Series([1.0, np.nan, np.nan])
    fallback = pd.Series([9.0, 2.0, np.nan])

    result = coalesce(primary, fallback)

    assert result.iloc[0] == 1.0
    assert result.iloc[1] == 2.0
    assert np.isnan(result.iloc[2])


def test_assemble_cohort_keeps_every_stay(icustays):
    demographics = pd.DataFrame({'icustay_id': [2001, 2003], 'age': [64.5, 30.0]})
    first_day_tables = {
        'vitalsfirstday': _first_day_frame('vitalsfirstday', [
            {'icustay_id': 2001, 'heartrate_max': 120, 'heartrate_min': 80, 'glucose_max': 8.0},
        ]),
        'labsfirstday': _first_day_frame('labsfirstday', [
            {'icustay_id': 2001, 'glucose_max': 20.0, 'glucose_min': 3.0},
            {'icustay_id': 2002, 'glucose_max': 15.0, 'glucose_min': 4.0, 'sodium_max': 150},
        ]),
        'ventfirstday': _first_day_frame('ventfirstday', [
            {'icustay_id': 2002, 'mechvent': 0},
        ]),
        'uofirstday': _first_day_frame('uofirstday', []),
        # gcsfirstday not supplied at all
    }
    cpap_flags = pd.DataFrame({'icustay_id': [2003], 'cpap': [1]})

    cohort = assemble_cohort(icustays, demographics, first_day_tables, cpap_flags)

    assert list(cohort.columns) == STAY_COLUMNS + itemid_mappings.COHORT_COLUMNS
    assert cohort['icustay_id'].tolist() == [2001, 2002, 2003]

    by_stay = cohort.set_index('icustay_id')
    # vitals glucose wins, labs fills in where vitals are missing (max and min separately)
    assert by_stay.loc[2001, 'glucose_max'] == 8.0
    assert by_stay.loc[2001, 'glucose_min'] == 3.0
    assert by_stay.loc[2002, 'glucose_max'] == 15.0
    assert np.isnan(by_stay.loc[2003, 'glucose_max'])

    assert np.isnan(by_stay.loc[2002, 'age'])
    assert by_stay.loc[2002, 'mechvent'] == 0
    # CPAP stays unset instead of false
    assert by_stay.loc[2003, 'cpap'] == 1
    assert by_stay.loc[[2001, 2002], 'cpap'].isna().all()
    assert cohort['mingcs'].isna().all()
    assert cohort['urineoutput'].isna().all()


def test_assemble_cohort_rejects_duplicate_population(icustays):
    doubled = pd.concat([icustays, icustays.iloc[[0]]], ignore_index=True)
    empty_cpap = pd.DataFrame({'icustay_id': pd.Series(dtype='int64'), 'cpap': pd.Series(dtype='int64')})

    with pytest.raises(ValueError):
        assemble_cohort(doubled, pd.DataFrame({'icustay_id': [], 'age': []}), {}, empty_cpap)


def test_assemble_cohort_with_no_upstream_data(icustays):
    empty_cpap = pd.DataFrame({'icustay_id': pd.Series(dtype='int64'), 'cpap': pd.Series(dtype='int64')})
    demographics = pd.DataFrame({'icustay_id': pd.Series(dtype='int64'), 'age': pd.Series(dtype=float)})

    cohort = assemble_cohort(icustays, demographics, {}, empty_cpap)

    assert len(cohort) == len(icustays)
    assert cohort[itemid_mappings.COHORT_COLUMNS].isna().all().all()


def test_itemid_lists_are_unique():
    assert itemid_mappings.validate_itemids()
    assert itemid_mappings.OXYGEN_DEVICE_ITEMIDS == [467, 469, 226732]
