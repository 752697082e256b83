"""End-to-end run of scripts/baseline_models/calculate_saps.py on a tiny MIMIC-III extract."""

import importlib.util
import logging
from pathlib import Path

import pandas as pd
import pytest
import yaml

from src.scoring_models import config
from src.scoring_models.saps import calculator

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "baseline_models" / "calculate_saps.py"

NORMAL_VITALS = {
    'heartrate_max': 90, 'heartrate_min': 90,
    'sysbp_max': 120, 'sysbp_min': 120,
    'resprate_max': 18, 'resprate_min': 18,
    'tempc_max': 37.0, 'tempc_min': 37.0,
}
NORMAL_LABS = {
    'bun_max': 5, 'bun_min': 4,
    'hematocrit_max': 40, 'hematocrit_min': 40,
    'wbc_max': 8, 'wbc_min': 8,
    'sodium_max': 140, 'sodium_min': 140,
    'potassium_max': 4, 'potassium_min': 4,
    'bicarbonate_max': 25, 'bicarbonate_min': 25,
}


def _load_script():
    spec = importlib.util.spec_from_file_location("calculate_saps", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_upper(df, path):
    """MIMIC-III exports use upper-case headers."""
    df.rename(columns=str.upper).to_csv(path, index=False)


@pytest.fixture
def isolated_config(monkeypatch):
    """The script mutates the module-level config; restore it after each test."""
    for name in ['MIMIC_III_BASE_PATH', 'MIMIC_III_DERIVED_PATH',
                 'TIME_WINDOW_HOURS', 'CHUNK_SIZE', 'LOG_LEVEL']:
        monkeypatch.setattr(config, name, getattr(config, name))
    for name in ['MIMIC_III_PATHS', 'DERIVED_PATHS', 'OUTPUT_PATHS']:
        monkeypatch.setattr(config, name, dict(getattr(config, name)))
    yield config
    src_logger = logging.getLogger("src")
    for handler in list(src_logger.handlers):
        handler.close()
        src_logger.removeHandler(handler)


@pytest.fixture
def mimic_extract(tmp_path):
    """
    Three stays:
    - 3000: patient unknown, no first-day data at all -> SAPS 0
    - 3001: 50 years, normal values, labs glucose overridden by vitals -> SAPS 1
    - 3002: 75 years, tachycardic, hyperglycaemic, polyuric, BiPAP, GCS 2 -> SAPS 14
    """
    raw_dir = tmp_path / "mimic"
    derived_dir = tmp_path / "derived"
    raw_dir.mkdir()
    derived_dir.mkdir()

    _write_upper(pd.DataFrame({
        'row_id': [1, 2, 3],
        'subject_id': [3, 1, 2],
        'hadm_id': [30, 10, 20],
        'icustay_id': [3000, 3001, 3002],
        'intime': ['2150-03-01 10:00:00', '2150-01-01 08:00:00', '2150-06-01 00:00:00'],
        'outtime': ['2150-03-02 10:00:00', '2150-01-03 08:00:00', '2150-06-05 00:00:00'],
    }), raw_dir / "ICUSTAYS.csv.gz")
    _write_upper(pd.DataFrame({
        'row_id': [1, 2],
        'subject_id': [1, 2],
        'gender': ['F', 'M'],
        'dob': ['2100-01-01 00:00:00', '2075-01-01 00:00:00'],
    }), raw_dir / "PATIENTS.csv.gz")
    _write_upper(pd.DataFrame({
        'row_id': [1, 2, 3],
        'subject_id': [3, 1, 2],
        'hadm_id': [30, 10, 20],
    }), raw_dir / "ADMISSIONS.csv.gz")
    _write_upper(pd.DataFrame({
        'row_id': [1, 2, 3, 4],
        'subject_id': [2, 2, 1, 1],
        'hadm_id': [20, 20, 10, 10],
        'icustay_id': [3002, 3002, 3001, None],
        'itemid': [226732, 211, 467, 467],
        'charttime': ['2150-06-01 06:00:00', '2150-06-01 06:00:00',
                      '2150-01-03 08:00:00', '2150-01-01 09:00:00'],
        'value': ['Bipap Mask', '110', 'CPAP Mask', 'CPAP Mask'],
        'valuenum': [None, 110.0, None, None],
    }), raw_dir / "CHARTEVENTS.csv.gz")

    pd.DataFrame([
        {'icustay_id': 3001, **NORMAL_VITALS, 'glucose_max': 7, 'glucose_min': 7},
        {'icustay_id': 3002, **NORMAL_VITALS, 'heartrate_max': 150, 'heartrate_min': 60},
    ]).to_csv(derived_dir / "vitalsfirstday.csv", index=False)
    pd.DataFrame([
        {'icustay_id': 3001, **NORMAL_LABS, 'glucose_max': 20, 'glucose_min': 20},
        {'icustay_id': 3002, **NORMAL_LABS, 'glucose_max': 30, 'glucose_min': 5},
    ]).to_csv(derived_dir / "labsfirstday.csv", index=False)
    pd.DataFrame({'icustay_id': [3001, 3002], 'urineoutput': [1000, 4000]}).to_csv(
        derived_dir / "uofirstday.csv", index=False)
    pd.DataFrame({'icustay_id': [3001, 3002], 'mechvent': [0, 0]}).to_csv(
        derived_dir / "ventfirstday.csv", index=False)
    pd.DataFrame({'icustay_id': [3001, 3002], 'mingcs': [15, 2]}).to_csv(
        derived_dir / "gcsfirstday.csv", index=False)

    output_dir = tmp_path / "out"
    config_path = tmp_path / "saps.yaml"
    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump({
            'data': {'mimic_dir': str(raw_dir), 'derived_dir': str(derived_dir)},
            'processing': {'time_window_hours': 24, 'chunk_size': 2},
            'output': {'output_dir': str(output_dir)},
            'logging': {'level': 'DEBUG'},
        }, f)

    return config_path, output_dir


def test_pipeline_scores_every_stay(isolated_config, mimic_extract):
    config_path, output_dir = mimic_extract
    script = _load_script()

    assert script.main(["--config", str(config_path)]) == 0

    scores = pd.read_csv(output_dir / "saps_scores.csv")
    assert list(scores.columns) == calculator.SAPS_RECORD_COLUMNS
    assert scores['icustay_id'].tolist() == [3000, 3001, 3002]
    assert scores['saps'].tolist() == [0, 1, 14]

    by_stay = scores.set_index('icustay_id')
    assert by_stay.loc[[3000], calculator.SAPS_COMPONENT_COLUMNS].isna().all().all()
    assert by_stay.loc[3001, 'glucose_score'] == 0
    assert by_stay.loc[3002, 'age_score'] == 4
    assert by_stay.loc[3002, 'vent_score'] == 3
    assert by_stay.loc[3002, 'glucose_score'] == 3
    assert pd.isna(by_stay.loc[3002, 'gcs_score'])

    complete = pd.read_csv(output_dir / "saps_complete_data.csv")
    assert complete.set_index('icustay_id').loc[3001, 'glucose_max'] == 7
    assert (output_dir / "saps_statistics.txt").exists()
    assert (output_dir / "run_config.yaml").exists()
    assert any((output_dir / "logs").iterdir())


def test_pipeline_rerun_overwrites_outputs(isolated_config, mimic_extract):
    config_path, output_dir = mimic_extract
    script = _load_script()

    assert script.main(["--config", str(config_path)]) == 0
    first = (output_dir / "saps_scores.csv").read_text()
    assert script.main(["--config", str(config_path)]) == 0
    second = (output_dir / "saps_scores.csv").read_text()

    assert first == second


def test_pipeline_restricted_to_icustay_ids(isolated_config, mimic_extract):
    config_path, output_dir = mimic_extract
    script = _load_script()

    assert script.main(["--config", str(config_path), "--icustay-ids", "3002"]) == 0

    scores = pd.read_csv(output_dir / "saps_scores.csv")
    assert scores['icustay_id'].tolist() == [3002]
    assert scores['saps'].tolist() == [14]


def test_pipeline_fails_without_raw_tables(isolated_config, mimic_extract):
    config_path, _ = mimic_extract
    (config_path.parent / "mimic" / "PATIENTS.csv.gz").unlink()
    script = _load_script()

    assert script.main(["--config", str(config_path)]) == 1


def test_pipeline_logs_every_step(isolated_config, mimic_extract):
    config_path, output_dir = mimic_extract
    script = _load_script()

    assert script.main(["--config", str(config_path)]) == 0

    log_text = "".join(p.read_text(encoding='utf-8') for p in (output_dir / "logs").glob("*.log"))
    for step in range(1, 8):
        assert f"Schritt {step}:" in log_text
