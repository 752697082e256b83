"""
SAPS Score Berechnung - Kern-Logik

Implementiert den Simplified Acute Physiology Score (SAPS) für den ersten
ICU-Tag nach den klinischen Standards.

Referenz:
- Le Gall et al. (1984): "A simplified acute physiology score for ICU patients."
  Critical Care Medicine 12(11): 975-977.

15 Komponenten werden mit je 0-4 Punkten bewertet (Beatmung: 0 oder 3).
Gesamt-SAPS: 0-59 Punkte (höher = schlechter)

Wichtig - NULL vs. 0:
- None  = keine Information (alle benötigten Werte fehlen)
- 0     = normal / keine Auffälligkeit
Die Unterscheidung bleibt in den Komponenten erhalten; erst bei der Summe
wird None als 0 gezählt.

Innerhalb einer Komponente werden die Schwellen von schwer nach leicht geprüft,
die erste zutreffende Regel gewinnt. Trifft keine Regel zu (Lücke zwischen den
Bändern, z.B. Herzfrequenz 109.5), ist die Komponente None.
"""

import logging
import numpy as np
import pandas as pd
from typing import Optional, Dict, List

logger = logging.getLogger(__name__)

# =============================================================================
# HILFSFUNKTIONEN
# =============================================================================

def _as_float(value) -> float:
    """None/NaN/pd.NA -> NaN. Vergleiche mit NaN sind immer False (wie NULL in SQL)."""
    if value is None or pd.isna(value):
        return np.nan
    return float(value)


def _is_missing(value) -> bool:
    return value is None or pd.isna(value)

# =============================================================================
# 1. ALTER
# =============================================================================

def calculate_age_score(age: Optional[float]) -> Optional[int]:
    """
    Berechnet SAPS Alters-Score.

    Punktevergabe (Jahre):
    - ≤45: 0 Punkte
    - 46-55: 1 Punkt
    - 56-65: 2 Punkte
    - 66-75: 3 Punkte
    - >75: 4 Punkte

    Args:
        age: Alter bei ICU-Aufnahme in Jahren

    Returns:
        Score (0-4) oder None falls Alter fehlt
    """
    if _is_missing(age):
        return None

    if age <= 45:
        return 0
    elif age <= 55:
        return 1
    elif age <= 65:
        return 2
    elif age <= 75:
        return 3
    else:  # >75
        return 4

# =============================================================================
# 2. VITALPARAMETER
# =============================================================================

def calculate_heart_rate_score(
    heartrate_max: Optional[float],
    heartrate_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Herzfrequenz-Score (Schläge/min).

    Punktevergabe:
    - max ≥180 ODER min <40: 4 Punkte
    - max ≥140 ODER min ≤54: 3 Punkte
    - max ≥110 ODER min ≤69: 2 Punkte
    - max und min in [70, 109]: 0 Punkte

    Returns:
        Score oder None falls heartrate_max fehlt
    """
    if _is_missing(heartrate_max):
        return None
    hr_max, hr_min = _as_float(heartrate_max), _as_float(heartrate_min)

    if hr_max >= 180 or hr_min < 40:
        return 4
    if hr_max >= 140 or hr_min <= 54:
        return 3
    if hr_max >= 110 or hr_min <= 69:
        return 2
    if 70 <= hr_max <= 109 and 70 <= hr_min <= 109:
        return 0
    return None


def calculate_sysbp_score(
    sysbp_max: Optional[float],
    sysbp_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Score für den systolischen Blutdruck (mmHg).

    Punktevergabe:
    - max ≥190 ODER min <55: 4 Punkte
    - max ≥150 ODER min ≤79: 2 Punkte
    - max und min in [80, 149]: 0 Punkte

    Hinweis: NULL-Bedingung ist hier das Minimum, nicht das Maximum.
    """
    if _is_missing(sysbp_min):
        return None
    bp_max, bp_min = _as_float(sysbp_max), _as_float(sysbp_min)

    if bp_max >= 190 or bp_min < 55:
        return 4
    if bp_max >= 150 or bp_min <= 79:
        return 2
    if 80 <= bp_max <= 149 and 80 <= bp_min <= 149:
        return 0
    return None


def calculate_temperature_score(
    tempc_max: Optional[float],
    tempc_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Temperatur-Score (°C).

    Punktevergabe:
    - max ≥41.0 ODER min <30.0: 4 Punkte
    - max ≥39.0 ODER min ≤31.9: 3 Punkte
    - min ≤33.9: 2 Punkte
    - max >38.4 ODER min <36.0: 1 Punkt
    - max und min in [36.0, 38.4]: 0 Punkte
    """
    if _is_missing(tempc_max):
        return None
    t_max, t_min = _as_float(tempc_max), _as_float(tempc_min)

    if t_max >= 41.0 or t_min < 30.0:
        return 4
    if t_max >= 39.0 or t_min <= 31.9:
        return 3
    if t_min <= 33.9:
        return 2
    if t_max > 38.4 or t_min < 36.0:
        return 1
    if 36.0 <= t_max <= 38.4 and 36.0 <= t_min <= 38.4:
        return 0
    return None


def calculate_respiration_rate_score(
    resprate_max: Optional[float],
    resprate_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Atemfrequenz-Score (Atemzüge/min).

    Punktevergabe:
    - max ≥50 ODER min <6: 4 Punkte
    - max ≥35: 3 Punkte
    - min ≤9: 2 Punkte
    - max ≥25 ODER min ≤11: 1 Punkt
    - max und min in [12, 24]: 0 Punkte
    """
    if _is_missing(resprate_min):
        return None
    rr_max, rr_min = _as_float(resprate_max), _as_float(resprate_min)

    if rr_max >= 50 or rr_min < 6:
        return 4
    if rr_max >= 35:
        return 3
    if rr_min <= 9:
        return 2
    if rr_max >= 25 or rr_min <= 11:
        return 1
    if 12 <= rr_max <= 24 and 12 <= rr_min <= 24:
        return 0
    return None

# =============================================================================
# 3. BEATMUNG / CPAP
# =============================================================================

def calculate_ventilation_score(
    mechvent: Optional[float],
    cpap: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Beatmungs-Score.

    Punktevergabe:
    - CPAP/BiPAP am ersten Tag: 3 Punkte
    - mechanische Beatmung am ersten Tag: 3 Punkte
    - sonst: 0 Punkte

    Nur wenn beide Flags fehlen, ist der Score None. Ein fehlendes CPAP-Flag
    bedeutet "nicht dokumentiert", nicht "nein".
    """
    if _is_missing(mechvent) and _is_missing(cpap):
        return None

    if _as_float(cpap) == 1:
        return 3
    if _as_float(mechvent) == 1:
        return 3
    return 0

# =============================================================================
# 4. URINAUSSCHEIDUNG
# =============================================================================

def calculate_urine_output_score(urineoutput: Optional[float]) -> Optional[int]:
    """
    Berechnet SAPS Urin-Score (ml/24h).

    Punktevergabe (nicht monoton, exakt in dieser Reihenfolge geprüft):
    - >5000: 2 Punkte
    - 3500-5000: 1 Punkt
    - 700-3499: 0 Punkte
    - 500-699: 2 Punkte
    - 200-499: 3 Punkte
    - <200: 4 Punkte
    """
    if _is_missing(urineoutput):
        return None

    if urineoutput > 5000.0:
        return 2
    elif urineoutput >= 3500.0:
        return 1
    elif urineoutput >= 700.0:
        return 0
    elif urineoutput >= 500.0:
        return 2
    elif urineoutput >= 200.0:
        return 3
    else:  # <200
        return 4

# =============================================================================
# 5. LABORWERTE
# =============================================================================

def calculate_bun_score(
    bun_max: Optional[float],
    bun_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Harnstoff-Stickstoff (BUN) Score.

    Punktevergabe:
    - max ≥55.0: 4 Punkte
    - max ≥36.0: 3 Punkte
    - max ≥29.0: 2 Punkte
    - max ≥7.5 ODER min <3.5: 1 Punkt
    - max und min in [3.5, 7.5): 0 Punkte
    """
    if _is_missing(bun_max):
        return None
    b_max, b_min = _as_float(bun_max), _as_float(bun_min)

    if b_max >= 55.0:
        return 4
    if b_max >= 36.0:
        return 3
    if b_max >= 29.0:
        return 2
    if b_max >= 7.5 or b_min < 3.5:
        return 1
    if 3.5 <= b_max < 7.5 and 3.5 <= b_min < 7.5:
        return 0
    return None


def calculate_hematocrit_score(
    hematocrit_max: Optional[float],
    hematocrit_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Hämatokrit-Score (%).

    Punktevergabe:
    - max ≥60.0 ODER min <20.0: 4 Punkte
    - max ≥50.0 ODER min <30.0: 2 Punkte
    - max ≥46.0: 1 Punkt
    - max und min in [30.0, 46.0): 0 Punkte
    """
    if _is_missing(hematocrit_max):
        return None
    h_max, h_min = _as_float(hematocrit_max), _as_float(hematocrit_min)

    if h_max >= 60.0 or h_min < 20.0:
        return 4
    if h_max >= 50.0 or h_min < 30.0:
        return 2
    if h_max >= 46.0:
        return 1
    if 30.0 <= h_max < 46.0 and 30.0 <= h_min < 46.0:
        return 0
    return None


def calculate_wbc_score(
    wbc_max: Optional[float],
    wbc_min: Optional[float]
) -> Optional[int]:
    """Berechnet SAPS Leukozyten-Score (×10³/μl)."""
    if _is_missing(wbc_max):
        return None
    w_max, w_min = _as_float(wbc_max), _as_float(wbc_min)

    if w_max >= 40.0 or w_min < 1.0:
        return 4
    if w_max >= 20.0 or w_min < 3.0:
        return 2
    if w_max >= 15.0:
        return 1
    if 3.0 <= w_max < 15.0 and 3.0 <= w_min < 15.0:
        return 0
    return None


def calculate_glucose_score(
    glucose_max: Optional[float],
    glucose_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Glukose-Score (mmol/l).

    Punktevergabe:
    - max ≥44.5 ODER min <1.6: 4 Punkte
    - max ≥27.8 ODER min <2.8: 3 Punkte
    - min <3.9: 2 Punkte
    - max ≥14.0: 1 Punkt
    - max und min in [3.9, 14.0): 0 Punkte
    """
    if _is_missing(glucose_max):
        return None
    g_max, g_min = _as_float(glucose_max), _as_float(glucose_min)

    if g_max >= 44.5 or g_min < 1.6:
        return 4
    if g_max >= 27.8 or g_min < 2.8:
        return 3
    if g_min < 3.9:
        return 2
    if g_max >= 14.0:
        return 1
    if 3.9 <= g_max < 14.0 and 3.9 <= g_min < 14.0:
        return 0
    return None


def calculate_potassium_score(
    potassium_max: Optional[float],
    potassium_min: Optional[float]
) -> Optional[int]:
    """Berechnet SAPS Kalium-Score (mmol/l)."""
    if _is_missing(potassium_max):
        return None
    k_max, k_min = _as_float(potassium_max), _as_float(potassium_min)

    if k_max >= 7.0 or k_min < 2.5:
        return 4
    if k_max >= 6.0:
        return 3
    if k_min < 3.0:
        return 2
    if k_max >= 5.5 or k_min < 3.5:
        return 1
    if 3.5 <= k_max < 5.5 and 3.5 <= k_min < 5.5:
        return 0
    return None


def calculate_sodium_score(
    sodium_max: Optional[float],
    sodium_min: Optional[float]
) -> Optional[int]:
    """Berechnet SAPS Natrium-Score (mmol/l)."""
    if _is_missing(sodium_max):
        return None
    na_max, na_min = _as_float(sodium_max), _as_float(sodium_min)

    if na_max >= 180 or na_min < 110:
        return 4
    if na_max >= 161 or na_min < 120:
        return 3
    if na_max >= 156 or na_min < 130:
        return 2
    if na_max >= 151:
        return 1
    if 130 <= na_max < 151 and 130 <= na_min < 151:
        return 0
    return None


def calculate_bicarbonate_score(
    bicarbonate_max: Optional[float],
    bicarbonate_min: Optional[float]
) -> Optional[int]:
    """
    Berechnet SAPS Bikarbonat-Score (mmol/l).

    Punktevergabe:
    - min <5.0: 4 Punkte
    - max ≥40.0 ODER min <10.0: 3 Punkte
    - max ≥30.0 ODER min <20.0: 1 Punkt
    - max und min in [20.0, 30.0): 0 Punkte
    """
    if _is_missing(bicarbonate_max):
        return None
    hco3_max, hco3_min = _as_float(bicarbonate_max), _as_float(bicarbonate_min)

    if hco3_min < 5.0:
        return 4
    if hco3_max >= 40.0 or hco3_min < 10.0:
        return 3
    if hco3_max >= 30.0 or hco3_min < 20.0:
        return 1
    if 20.0 <= hco3_max < 30.0 and 20.0 <= hco3_min < 30.0:
        return 0
    return None

# =============================================================================
# 6. ZENTRALES NERVENSYSTEM - Glasgow Coma Scale (GCS)
# =============================================================================

def calculate_gcs_score(mingcs: Optional[float]) -> Optional[int]:
    """
    Berechnet SAPS GCS Score aus dem minimalen GCS des ersten Tages.

    Punktevergabe:
    - GCS <3: None (nicht bewertbar, z.B. sediert/tracheotomiert)
    - GCS 3: 4 Punkte
    - GCS 4-6: 3 Punkte
    - GCS 7-9: 2 Punkte
    - GCS 10-12: 1 Punkt
    - GCS 13-15: 0 Punkte

    Args:
        mingcs: Minimaler Glasgow Coma Scale Wert (3-15)

    Returns:
        Score (0-4) oder None
    """
    if _is_missing(mingcs):
        return None

    # Keine Begrenzung auf 3-15: Werte <3 gelten als fehlerhaft
    if mingcs < 3:
        return None
    if mingcs == 3:
        return 4
    if mingcs < 7:
        return 3
    if mingcs < 10:
        return 2
    if mingcs < 13:
        return 1
    if 13 <= mingcs <= 15:
        return 0
    return None

# =============================================================================
# KOMPONENTEN-REGISTER
# =============================================================================

# (Score-Spalte, Funktion, Eingangsspalten) - Reihenfolge = Ausgabe-Reihenfolge
SAPS_COMPONENTS = [
    ('age_score', calculate_age_score, ['age']),
    ('hr_score', calculate_heart_rate_score, ['heartrate_max', 'heartrate_min']),
    ('sysbp_score', calculate_sysbp_score, ['sysbp_max', 'sysbp_min']),
    ('resp_score', calculate_respiration_rate_score, ['resprate_max', 'resprate_min']),
    ('temp_score', calculate_temperature_score, ['tempc_max', 'tempc_min']),
    ('uo_score', calculate_urine_output_score, ['urineoutput']),
    ('vent_score', calculate_ventilation_score, ['mechvent', 'cpap']),
    ('bun_score', calculate_bun_score, ['bun_max', 'bun_min']),
    ('hematocrit_score', calculate_hematocrit_score, ['hematocrit_max', 'hematocrit_min']),
    ('wbc_score', calculate_wbc_score, ['wbc_max', 'wbc_min']),
    ('glucose_score', calculate_glucose_score, ['glucose_max', 'glucose_min']),
    ('potassium_score', calculate_potassium_score, ['potassium_max', 'potassium_min']),
    ('sodium_score', calculate_sodium_score, ['sodium_max', 'sodium_min']),
    ('bicarbonate_score', calculate_bicarbonate_score, ['bicarbonate_max', 'bicarbonate_min']),
    ('gcs_score', calculate_gcs_score, ['mingcs']),
]

SAPS_COMPONENT_COLUMNS = [name for name, _, _ in SAPS_COMPONENTS]

SAPS_RECORD_COLUMNS = ['subject_id', 'hadm_id', 'icustay_id', 'saps'] + SAPS_COMPONENT_COLUMNS

# Maximal erreichbarer Score: 14 Komponenten à 4 + Beatmung 3
SAPS_MAX_SCORE = 59

# =============================================================================
# GESAMT-SAPS SCORE
# =============================================================================

def calculate_total_saps_score(component_scores: List[Optional[int]]) -> int:
    """
    Berechnet den Gesamt-SAPS als Summe aller Komponenten.

    Fehlende Komponenten (None) zählen als 0 (Imputation "normal").
    Das Ergebnis ist nie None.
    """
    return int(sum(score for score in component_scores if not _is_missing(score)))

# =============================================================================
# CONVENIENCE FUNKTION
# =============================================================================

def calculate_saps_from_dict(patient_data: Dict) -> Dict:
    """
    Berechnet SAPS Score aus einem Dictionary mit Patient-Daten.

    Args:
        patient_data: Dictionary mit den Spalten des Kohorten-Records
            Keys: age, heartrate_max/min, sysbp_max/min, resprate_max/min,
                  tempc_max/min, urineoutput, mechvent, cpap, bun_max/min,
                  hematocrit_max/min, wbc_max/min, glucose_max/min,
                  potassium_max/min, sodium_max/min, bicarbonate_max/min, mingcs
            Fehlende Keys werden als NULL behandelt.

    Returns:
        Dictionary mit allen Komponenten-Scores und 'saps'
    """
    scores = {
        name: func(*(patient_data.get(col) for col in columns))
        for name, func, columns in SAPS_COMPONENTS
    }
    scores['saps'] = calculate_total_saps_score(list(scores.values()))
    return scores

# =============================================================================
# BATCH-BERECHNUNG FÜR DATAFRAME
# =============================================================================

def calculate_saps_batch(df: pd.DataFrame) -> pd.DataFrame:
    """
    Berechnet SAPS Scores für einen kompletten DataFrame (ein Record pro ICU-Stay).

    Komponenten werden als nullable Integer (Int64) gespeichert, damit NULL
    und 0 unterscheidbar bleiben.

    Args:
        df: Assemblierte Kohorte (siehe data_loader.assemble_cohort)

    Returns:
        DataFrame mit zusätzlichen Komponenten-Spalten und 'saps'
    """
    result_df = df.copy()
    n_rows = len(result_df)

    for name, func, columns in SAPS_COMPONENTS:
        missing_cols = [col for col in columns if col not in result_df.columns]
        if missing_cols:
            logger.warning("Spalten fehlen für %s: %s - fehlende Werte = NULL", name, missing_cols)

        inputs = [
            result_df[col].tolist() if col in result_df.columns else [None] * n_rows
            for col in columns
        ]
        values = [func(*args) for args in zip(*inputs)]
        result_df[name] = pd.array(values, dtype='Int64')

    # NULL -> 0 nur für die Summe
    result_df['saps'] = (
        result_df[SAPS_COMPONENT_COLUMNS].fillna(0).sum(axis=1).astype('int64')
    )

    return result_df


def build_saps_records(
    scored_df: pd.DataFrame,
    icustays: Optional[pd.DataFrame] = None
) -> pd.DataFrame:
    """
    Erstellt die finale SAPS-Tabelle (ein Record pro ICU-Stay, sortiert nach icustay_id).

    Falls icustays übergeben wird, werden die Scores auf die vollständige
    Stay-Population gejoint: Stays ohne Score erhalten saps = 0 und NULL-Komponenten.

    Args:
        scored_df: Ergebnis von calculate_saps_batch
        icustays: Optional - vollständige Stay-Population

    Returns:
        DataFrame mit subject_id, hadm_id, icustay_id, saps und allen Komponenten
    """
    if icustays is None:
        records = scored_df[SAPS_RECORD_COLUMNS].copy()
    else:
        population = icustays[['subject_id', 'hadm_id', 'icustay_id']]
        records = population.merge(
            scored_df[['icustay_id', 'saps'] + SAPS_COMPONENT_COLUMNS],
            on='icustay_id',
            how='left'
        )
        records['saps'] = records['saps'].fillna(0).astype('int64')
        for col in SAPS_COMPONENT_COLUMNS:
            records[col] = records[col].astype('Int64')

    return records.sort_values('icustay_id').reset_index(drop=True)

# =============================================================================
# VALIDIERUNG & TESTS
# =============================================================================

def validate_saps_calculation():
    """
    Führt Plausibilitäts-Tests für die SAPS Berechnung durch.
    Testet gegen bekannte Referenzfälle.
    """
    print("🧪 Validiere SAPS Score Berechnung...")

    tests_passed = 0
    tests_total = 0

    # Test 1: 50-jähriger Patient mit Normalwerten -> nur Alter = 1 Punkt
    tests_total += 1
    normal = {
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
    result = calculate_saps_from_dict(normal)
    if result['saps'] == 1 and result['age_score'] == 1 and result['vent_score'] is None:
        print("  ✓ Test 1: Normalwerte (Score = 1)")
        tests_passed += 1
    else:
        print(f"  ✗ Test 1 FAILED: Erwartet 1, bekommen {result['saps']}")

    # Test 2: Keine Daten -> alle Komponenten None, Score 0
    tests_total += 1
    result = calculate_saps_from_dict({})
    if result['saps'] == 0 and all(result[c] is None for c in SAPS_COMPONENT_COLUMNS):
        print("  ✓ Test 2: Keine Daten (Score = 0, Komponenten NULL)")
        tests_passed += 1
    else:
        print(f"  ✗ Test 2 FAILED: {result}")

    # Test 3: GCS Randfälle
    tests_total += 1
    if calculate_gcs_score(3) == 4 and calculate_gcs_score(2) is None:
        print("  ✓ Test 3: GCS 3 -> 4, GCS 2 -> NULL")
        tests_passed += 1
    else:
        print("  ✗ Test 3 FAILED: GCS Score")

    # Test 4: Urin nicht monoton
    tests_total += 1
    if (calculate_urine_output_score(4000) == 1 and
            calculate_urine_output_score(6000) == 2 and
            calculate_urine_output_score(600) == 2):
        print("  ✓ Test 4: Urin-Score korrekt")
        tests_passed += 1
    else:
        print("  ✗ Test 4 FAILED: Urin-Score")

    # Test 5: Schwerkranker Patient
    tests_total += 1
    critical = {
        'age': 80,
        'heartrate_max': 190, 'heartrate_min': 35,
        'sysbp_max': 200, 'sysbp_min': 50,
        'tempc_max': 41.5, 'tempc_min': 29.0,
        'resprate_max': 55, 'resprate_min': 5,
        'urineoutput': 100,
        'mechvent': 1, 'cpap': None,
        'bun_max': 60, 'bun_min': 40,
        'hematocrit_max': 65, 'hematocrit_min': 15,
        'wbc_max': 45, 'wbc_min': 0.5,
        'glucose_max': 50, 'glucose_min': 1.0,
        'potassium_max': 7.5, 'potassium_min': 2.0,
        'sodium_max': 185, 'sodium_min': 105,
        'bicarbonate_max': 45, 'bicarbonate_min': 4,
        'mingcs': 3,
    }
    result = calculate_saps_from_dict(critical)
    if result['saps'] == SAPS_MAX_SCORE:
        print(f"  ✓ Test 5: Schwerkranker Patient (Score = {result['saps']})")
        tests_passed += 1
    else:
        print(f"  ✗ Test 5 FAILED: Erwartet {SAPS_MAX_SCORE}, bekommen {result['saps']}")

    print(f"\n✅ {tests_passed}/{tests_total} Tests bestanden")

    return tests_passed == tests_total

# =============================================================================
# EXPORT
# =============================================================================

__all__ = [
    'calculate_age_score',
    'calculate_heart_rate_score',
    'calculate_sysbp_score',
    'calculate_temperature_score',
    'calculate_respiration_rate_score',
    'calculate_ventilation_score',
    'calculate_urine_output_score',
    'calculate_bun_score',
    'calculate_hematocrit_score',
    'calculate_wbc_score',
    'calculate_glucose_score',
    'calculate_potassium_score',
    'calculate_sodium_score',
    'calculate_bicarbonate_score',
    'calculate_gcs_score',
    'SAPS_COMPONENTS',
    'SAPS_COMPONENT_COLUMNS',
    'SAPS_RECORD_COLUMNS',
    'SAPS_MAX_SCORE',
    'calculate_total_saps_score',
    'calculate_saps_from_dict',
    'calculate_saps_batch',
    'build_saps_records',
    'validate_saps_calculation',
]
