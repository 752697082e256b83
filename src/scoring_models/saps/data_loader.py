"""
MIMIC-III Data Loader für SAPS Score Berechnung

Lädt die ICU-Stay Population, Demographie, die Upstream First-Day Tabellen
(vitalsfirstday, labsfirstday, uofirstday, ventfirstday, gcsfirstday) und
extrahiert das CPAP-Flag aus chartevents. Ergebnis ist ein Kohorten-Record
pro ICU-Stay mit nullable Feldern.

Die First-Day Aggregation selbst (Min/Max der Vitals/Labore, Urin-Summe,
Beatmung, minimaler GCS) passiert upstream und wird hier nur gelesen.
"""

import os
import logging
import numpy as np
import pandas as pd
from datetime import timedelta
from typing import Dict, List, Optional

from tqdm import tqdm

from .. import config
from . import itemid_mappings as itemids

logger = logging.getLogger(__name__)

STAY_COLUMNS = ['subject_id', 'hadm_id', 'icustay_id', 'intime', 'outtime']


def parse_datetime(values: pd.Series) -> pd.Series:
    """Parst MIMIC-Zeitstempel; Sekunden können je Zeile fehlen ('2150-01-01 08:00' vs. '08:00:30')."""
    return pd.to_datetime(values, format='ISO8601')

# =============================================================================
# HAUPTFUNKTION: SAPS-DATEN LADEN
# =============================================================================

def load_saps_data(
    icustay_ids: Optional[List[int]] = None,
    time_window_hours: Optional[int] = None
) -> pd.DataFrame:
    """
    Lädt alle benötigten Daten für die SAPS Berechnung aus MIMIC-III.

    Args:
        icustay_ids: Optional - Liste von icustay_ids (falls nur Teilmenge).
            Die Auswahl der Kohorte ist Sache des Aufrufers.
        time_window_hours: Zeitfenster nach ICU-Aufnahme für das CPAP-Flag
            (Default: config.TIME_WINDOW_HOURS)

    Returns:
        Assemblierte Kohorte, ein Record pro ICU-Stay (sortiert nach icustay_id)
    """
    if time_window_hours is None:
        time_window_hours = config.TIME_WINDOW_HOURS

    logger.info("MIMIC-III Daten laden für SAPS Score Berechnung")

    # 1. ICU Stays (Population)
    icustays = load_icustays(icustay_ids=icustay_ids)
    logger.info("✓ %d ICU Aufenthalte geladen", len(icustays))

    # 2. Demographie (Alter)
    demographics = load_demographics(icustays)
    logger.info("✓ Alter für %d Aufenthalte berechnet", demographics['age'].notna().sum())

    # 3. Upstream First-Day Tabellen
    first_day_tables = {}
    for name in itemids.FIRST_DAY_TABLES:
        first_day_tables[name] = load_first_day_table(name)
        logger.info("✓ %s: %d Records", name, len(first_day_tables[name]))

    # 4. CPAP-Flag aus chartevents
    cpap_flags = load_cpap_flags(icustays, time_window_hours=time_window_hours)
    logger.info("✓ CPAP/BiPAP bei %d Aufenthalten dokumentiert", len(cpap_flags))

    # 5. Kohorte zusammenbauen
    cohort = assemble_cohort(icustays, demographics, first_day_tables, cpap_flags)
    logger.info("✓ %d Kohorten-Records assembliert", len(cohort))

    return cohort

# =============================================================================
# 1. TABELLEN LESEN
# =============================================================================

def _read_table(path: str, required_cols: List[str], **read_kwargs) -> pd.DataFrame:
    """Liest eine CSV-Tabelle, normalisiert Spaltennamen auf lowercase und prüft Pflichtspalten."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Tabelle nicht gefunden: {path}")

    df = pd.read_csv(path, **read_kwargs)
    df.columns = [col.lower() for col in df.columns]

    missing = set(required_cols) - set(df.columns)
    if missing:
        raise ValueError(f"Pflichtspalten fehlen in {path}: {sorted(missing)}")
    return df


def load_icustays(
    icustays_path: Optional[str] = None,
    icustay_ids: Optional[List[int]] = None
) -> pd.DataFrame:
    """
    Lädt ICU Stays als Population für die Score-Berechnung.

    Returns:
        DataFrame mit subject_id, hadm_id, icustay_id, intime, outtime

    Raises:
        FileNotFoundError: Datei existiert nicht
        ValueError: Pflichtspalten fehlen oder icustay_id ist nicht eindeutig
    """
    path = icustays_path or config.MIMIC_III_PATHS['icustays']
    icustays = _read_table(path, STAY_COLUMNS)[STAY_COLUMNS].copy()

    if icustay_ids is not None:
        icustays = icustays[icustays['icustay_id'].isin(icustay_ids)]

    if icustays['icustay_id'].duplicated().any():
        raise ValueError("icustay_id ist in ICUSTAYS nicht eindeutig")

    icustays['intime'] = parse_datetime(icustays['intime'])
    icustays['outtime'] = parse_datetime(icustays['outtime'])

    return icustays.sort_values('icustay_id').reset_index(drop=True)


def load_patients(patients_path: Optional[str] = None) -> pd.DataFrame:
    """Lädt PATIENTS (subject_id, dob)."""
    path = patients_path or config.MIMIC_III_PATHS['patients']
    patients = _read_table(path, ['subject_id', 'dob'])[['subject_id', 'dob']].copy()
    patients['dob'] = parse_datetime(patients['dob'])
    return patients


def load_admissions(admissions_path: Optional[str] = None) -> pd.DataFrame:
    """Lädt ADMISSIONS (hadm_id)."""
    path = admissions_path or config.MIMIC_III_PATHS['admissions']
    return _read_table(path, ['hadm_id'])[['hadm_id']].drop_duplicates()


def load_first_day_table(name: str, path: Optional[str] = None) -> pd.DataFrame:
    """
    Lädt eine Upstream First-Day Tabelle (vitalsfirstday, labsfirstday, ...).

    Fehlt die Datei, wird eine leere Tabelle zurückgegeben: die betroffenen
    Felder bleiben für alle Stays NULL. Fehlende Kontrakt-Spalten werden
    ebenfalls als NULL ergänzt.

    Raises:
        ValueError: icustay_id fehlt oder ist nicht eindeutig
    """
    columns = itemids.FIRST_DAY_TABLES[name]
    path = path or config.DERIVED_PATHS[name]

    if not os.path.exists(path):
        logger.warning("⚠️  %s nicht gefunden (%s) - Felder bleiben NULL", name, path)
        return pd.DataFrame(columns=['icustay_id'] + columns)

    table = _read_table(path, ['icustay_id'])

    missing_cols = [col for col in columns if col not in table.columns]
    if missing_cols:
        logger.warning("⚠️  %s: Spalten fehlen %s - werden NULL", name, missing_cols)
        for col in missing_cols:
            table[col] = np.nan

    table = table[table['icustay_id'].notna()]
    if table['icustay_id'].duplicated().any():
        raise ValueError(f"{name}: icustay_id ist nicht eindeutig")

    return table[['icustay_id'] + columns].reset_index(drop=True)

# =============================================================================
# 2. DEMOGRAPHIE
# =============================================================================

def _to_epoch_days(values: pd.Series) -> pd.Series:
    # Rechnung in Tagen: MIMIC-III verschiebt das Geburtsdatum von >89-Jährigen
    # um ~300 Jahre, Differenzen in Nanosekunden würden überlaufen
    timestamps = parse_datetime(values)
    days = timestamps.values.astype('datetime64[D]').astype('int64').astype(float)
    days[timestamps.isna().values] = np.nan
    return pd.Series(days, index=values.index)


def calculate_age(intime: pd.Series, dob: pd.Series) -> pd.Series:
    """
    Alter in Jahren: (Datum ICU-Aufnahme - Geburtsdatum) / 365.242, auf 2 Stellen gerundet.

    Keine Plausibilitätsprüfung (Neugeborene ergeben Werte nahe 0).
    """
    days = _to_epoch_days(intime) - _to_epoch_days(dob)
    return (days / config.AGE_DAYS_PER_YEAR).round(2)


def load_demographics(
    icustays: pd.DataFrame,
    patients: Optional[pd.DataFrame] = None,
    admissions: Optional[pd.DataFrame] = None
) -> pd.DataFrame:
    """
    Verknüpft ICU Stays mit ADMISSIONS und PATIENTS und berechnet das Alter.

    Returns:
        DataFrame mit icustay_id, age (nur Stays mit Admission und Patient)
    """
    if patients is None:
        patients = load_patients()
    if admissions is None:
        admissions = load_admissions()

    demo = icustays[['subject_id', 'hadm_id', 'icustay_id', 'intime']].merge(
        admissions[['hadm_id']].drop_duplicates(), on='hadm_id', how='inner'
    ).merge(
        patients[['subject_id', 'dob']], on='subject_id', how='inner'
    )
    demo['age'] = calculate_age(demo['intime'], demo['dob'])

    return demo[['icustay_id', 'age']]

# =============================================================================
# 3. CPAP-FLAG (chartevents)
# =============================================================================

def extract_cpap_flags(
    chartevents: pd.DataFrame,
    icustays: pd.DataFrame,
    time_window_hours: Optional[int] = None
) -> pd.DataFrame:
    """
    Leitet das CPAP-Flag aus Oxygen-Delivery-Device Beobachtungen ab.

    Ein Stay erhält cpap = 1, wenn im Fenster [intime, intime + Fenster] ein
    Wert exakt 'CPAP Mask' oder 'Bipap Mask' dokumentiert ist. Stays ohne
    Treffer fehlen im Ergebnis (kein explizites 0 - downstream NULL).

    Args:
        chartevents: DataFrame mit icustay_id, itemid, charttime, value
        icustays: DataFrame mit icustay_id, intime

    Returns:
        DataFrame mit icustay_id, cpap
    """
    if time_window_hours is None:
        time_window_hours = config.TIME_WINDOW_HOURS

    events = chartevents[
        chartevents['icustay_id'].notna() &
        chartevents['itemid'].isin(itemids.OXYGEN_DEVICE_ITEMIDS) &
        chartevents['value'].isin(itemids.CPAP_DEVICE_VALUES)
    ]
    if len(events) == 0:
        return pd.DataFrame({'icustay_id': pd.Series(dtype='int64'), 'cpap': pd.Series(dtype='int64')})

    # chartevents.icustay_id ist wegen NULLs oft float
    events = events.astype({'icustay_id': icustays['icustay_id'].dtype})
    events = events.merge(icustays[['icustay_id', 'intime']], on='icustay_id', how='inner')
    charttime = parse_datetime(events['charttime'])
    in_window = (
        (charttime >= events['intime']) &
        (charttime <= events['intime'] + timedelta(hours=time_window_hours))
    )

    flagged = events.loc[in_window, 'icustay_id'].drop_duplicates().sort_values()
    return pd.DataFrame({'icustay_id': flagged.values, 'cpap': 1})


def load_cpap_flags(
    icustays: pd.DataFrame,
    time_window_hours: Optional[int] = None,
    chartevents_path: Optional[str] = None
) -> pd.DataFrame:
    """
    Lädt chartevents in Chunks (große Datei), filtert auf O2-Device itemids
    und CPAP/BiPAP Werte und extrahiert das CPAP-Flag.
    """
    path = chartevents_path or config.MIMIC_III_PATHS['chartevents']
    if not os.path.exists(path):
        raise FileNotFoundError(f"Tabelle nicht gefunden: {path}")

    wanted = {'icustay_id', 'itemid', 'charttime', 'value'}
    stay_ids = icustays['icustay_id'].unique()

    chunk_list = []
    chunk_iter = pd.read_csv(
        path,
        usecols=lambda col: col.lower() in wanted,
        chunksize=config.CHUNK_SIZE,
    )

    for chunk in tqdm(chunk_iter, desc="  chartevents chunks"):
        chunk.columns = [col.lower() for col in chunk.columns]
        chunk = chunk[
            chunk['icustay_id'].isin(stay_ids) &
            chunk['itemid'].isin(itemids.OXYGEN_DEVICE_ITEMIDS) &
            chunk['value'].isin(itemids.CPAP_DEVICE_VALUES)
        ]
        if len(chunk) > 0:
            chunk_list.append(chunk)

    if len(chunk_list) == 0:
        logger.warning("⚠️  Keine CPAP/BiPAP Beobachtungen gefunden!")
        chartevents = pd.DataFrame(columns=sorted(wanted))
    else:
        chartevents = pd.concat(chunk_list, ignore_index=True)

    return extract_cpap_flags(chartevents, icustays, time_window_hours)

# =============================================================================
# 4. KOHORTE ZUSAMMENBAUEN
# =============================================================================

def coalesce(*columns: pd.Series) -> pd.Series:
    """Erster nicht-fehlender Wert in der angegebenen Prioritätsreihenfolge (wie SQL COALESCE)."""
    result = columns[0]
    for fallback in columns[1:]:
        result = result.where(result.notna(), fallback)
    return result


def assemble_cohort(
    icustays: pd.DataFrame,
    demographics: pd.DataFrame,
    first_day_tables: Dict[str, pd.DataFrame],
    cpap_flags: pd.DataFrame
) -> pd.DataFrame:
    """
    Merged Population, Demographie, First-Day Tabellen und CPAP-Flag (alles LEFT JOIN).

    Jeder Stay aus icustays ergibt genau einen Record, auch wenn alle
    optionalen Felder NULL sind. Glukose: Vitals haben Vorrang, Labor ist
    Fallback (getrennt für max und min).

    Returns:
        DataFrame mit STAY_COLUMNS + itemids.COHORT_COLUMNS, sortiert nach icustay_id
    """
    if icustays['icustay_id'].duplicated().any():
        raise ValueError("icustay_id ist in der Population nicht eindeutig")

    cohort = icustays[STAY_COLUMNS].copy()
    cohort = cohort.merge(demographics[['icustay_id', 'age']], on='icustay_id', how='left')

    glucose_sources = {}
    for name, columns in itemids.FIRST_DAY_TABLES.items():
        table = first_day_tables.get(name)
        if table is None:
            table = pd.DataFrame(columns=['icustay_id'] + columns)
        table = table.reindex(columns=['icustay_id'] + columns)

        # Glukose-Spalten je Quelle umbenennen, danach coalesce
        renames = {col: f"{col}_{name}" for col in itemids.GLUCOSE_COLUMNS if col in columns}
        if renames:
            table = table.rename(columns=renames)
            glucose_sources[name] = renames

        # Leere Tabellen haben object-dtype Keys
        table = table.astype({'icustay_id': cohort['icustay_id'].dtype})
        cohort = cohort.merge(table, on='icustay_id', how='left')

    for col in itemids.GLUCOSE_COLUMNS:
        vitals_col = glucose_sources['vitalsfirstday'][col]
        labs_col = glucose_sources['labsfirstday'][col]
        cohort[col] = coalesce(
            pd.to_numeric(cohort[vitals_col]), pd.to_numeric(cohort[labs_col])
        )
        cohort = cohort.drop(columns=[vitals_col, labs_col])

    cpap = cpap_flags[['icustay_id', 'cpap']].astype({'icustay_id': cohort['icustay_id'].dtype})
    cohort = cohort.merge(cpap, on='icustay_id', how='left')

    # Einheitliche numerische Spalten (leere Upstream-Tabellen liefern object-dtype)
    for col in itemids.COHORT_COLUMNS:
        cohort[col] = pd.to_numeric(cohort[col])

    if len(cohort) != len(icustays):
        raise ValueError(
            f"Kohorte hat {len(cohort)} Records, erwartet {len(icustays)} (doppelte Keys upstream?)"
        )

    return cohort[STAY_COLUMNS + itemids.COHORT_COLUMNS].sort_values('icustay_id').reset_index(drop=True)

# =============================================================================
# EXPORT
# =============================================================================

__all__ = [
    'load_saps_data',
    'load_icustays',
    'load_patients',
    'load_admissions',
    'load_first_day_table',
    'calculate_age',
    'load_demographics',
    'extract_cpap_flags',
    'load_cpap_flags',
    'coalesce',
    'parse_datetime',
    'assemble_cohort',
]
