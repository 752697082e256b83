"""
Gemeinsame Konfiguration für alle Clinical Baseline Models

Hier werden Pfade und Parameter für die Scores (aktuell SAPS) konfiguriert.
Die Modul-Defaults können über configs/saps.yaml (siehe apply_overrides) oder
die Umgebungsvariablen MIMIC_III_BASE_PATH / MIMIC_III_DERIVED_PATH überschrieben werden.
"""

import os
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

# =============================================================================
# DATEN-PFADE MIMIC-III
# =============================================================================

# Basis-Pfad zu den MIMIC-III Rohtabellen (v1.4, .csv.gz)
MIMIC_III_BASE_PATH = os.getenv("MIMIC_III_BASE_PATH", os.path.join("data", "mimic-iii", "1.4"))

# Abgeleitete First-Day Tabellen (Export der Upstream-Views vitalsfirstday, labsfirstday, ...)
MIMIC_III_DERIVED_PATH = os.getenv(
    "MIMIC_III_DERIVED_PATH", os.path.join("data", "mimic-iii", "derived")
)


def _raw_table_paths(base_path: str) -> Dict[str, str]:
    return {
        "icustays": os.path.join(base_path, "ICUSTAYS.csv.gz"),
        "patients": os.path.join(base_path, "PATIENTS.csv.gz"),
        "admissions": os.path.join(base_path, "ADMISSIONS.csv.gz"),
        "chartevents": os.path.join(base_path, "CHARTEVENTS.csv.gz"),   # ~4 GB!
    }


def _derived_table_paths(derived_path: str) -> Dict[str, str]:
    return {
        "vitalsfirstday": os.path.join(derived_path, "vitalsfirstday.csv"),
        "labsfirstday": os.path.join(derived_path, "labsfirstday.csv"),
        "uofirstday": os.path.join(derived_path, "uofirstday.csv"),
        "ventfirstday": os.path.join(derived_path, "ventfirstday.csv"),
        "gcsfirstday": os.path.join(derived_path, "gcsfirstday.csv"),
    }


# Spezifische Tabellen-Pfade
MIMIC_III_PATHS = _raw_table_paths(MIMIC_III_BASE_PATH)
DERIVED_PATHS = _derived_table_paths(MIMIC_III_DERIVED_PATH)

# =============================================================================
# OUTPUT PFADE
# =============================================================================

# Ein Unterordner pro Score (create_output_dirs)
OUTPUT_BASE_PATH = os.path.join("outputs", "baseline_models")

OUTPUT_PATHS = {
    "saps": os.path.join(OUTPUT_BASE_PATH, "saps"),
}

# =============================================================================
# GEMEINSAME PARAMETER
# =============================================================================

# Zeitfenster für Score-Berechnung (erste X Stunden nach ICU-Admission)
TIME_WINDOW_HOURS = 24

# Chunk Size für große Dateien (chartevents)
CHUNK_SIZE = 100000

# Alter = Tage zwischen Geburtsdatum und ICU-Aufnahme / Tage pro Jahr
AGE_DAYS_PER_YEAR = 365.242

LOG_LEVEL = "INFO"

# =============================================================================
# HILFSFUNKTIONEN
# =============================================================================

def apply_overrides(run_config: Dict[str, Any]) -> None:
    """
    Überschreibt die Modul-Defaults mit Werten aus einer YAML-Konfiguration.

    Erwartete Struktur (alle Schlüssel optional):
        data:       {mimic_dir, derived_dir}
        processing: {time_window_hours, chunk_size}
        output:     {output_dir}
        logging:    {level}
    """
    global MIMIC_III_BASE_PATH, MIMIC_III_DERIVED_PATH, MIMIC_III_PATHS, DERIVED_PATHS
    global TIME_WINDOW_HOURS, CHUNK_SIZE, LOG_LEVEL

    data_cfg = run_config.get("data", {}) or {}
    if data_cfg.get("mimic_dir"):
        MIMIC_III_BASE_PATH = str(data_cfg["mimic_dir"])
        MIMIC_III_PATHS = _raw_table_paths(MIMIC_III_BASE_PATH)
    if data_cfg.get("derived_dir"):
        MIMIC_III_DERIVED_PATH = str(data_cfg["derived_dir"])
        DERIVED_PATHS = _derived_table_paths(MIMIC_III_DERIVED_PATH)
    # Einzelne Tabellen können explizit umgebogen werden
    for name, path in (data_cfg.get("tables", {}) or {}).items():
        if name in MIMIC_III_PATHS:
            MIMIC_III_PATHS[name] = str(path)
        elif name in DERIVED_PATHS:
            DERIVED_PATHS[name] = str(path)
        else:
            logger.warning("Unbekannte Tabelle in Konfiguration ignoriert: %s", name)

    processing_cfg = run_config.get("processing", {}) or {}
    TIME_WINDOW_HOURS = int(processing_cfg.get("time_window_hours", TIME_WINDOW_HOURS))
    CHUNK_SIZE = int(processing_cfg.get("chunk_size", CHUNK_SIZE))

    output_cfg = run_config.get("output", {}) or {}
    if output_cfg.get("output_dir"):
        OUTPUT_PATHS["saps"] = str(output_cfg["output_dir"])

    LOG_LEVEL = str((run_config.get("logging", {}) or {}).get("level", LOG_LEVEL)).upper()


def create_output_dirs(score_name="saps"):
    """
    Erstellt Output-Verzeichnisse für einen spezifischen Score.

    Args:
        score_name: Name des Scores (z.B. saps)
    """
    output_path = OUTPUT_PATHS.get(score_name, os.path.join(OUTPUT_BASE_PATH, score_name))

    os.makedirs(output_path, exist_ok=True)
    os.makedirs(os.path.join(output_path, "logs"), exist_ok=True)

    logger.info("Output-Verzeichnisse erstellt: %s", output_path)
    return output_path


def validate_paths(require_derived: bool = False):
    """
    Validiert, ob alle benötigten MIMIC-III Pfade existieren.

    Fehlende First-Day Tabellen sind nur dann ein Fehler, wenn require_derived gesetzt ist;
    ansonsten bleiben die betroffenen Felder leer (NULL).
    """
    missing = [
        f"  - {name}: {path}" for name, path in MIMIC_III_PATHS.items()
        if not os.path.exists(path)
    ]
    missing_derived = [
        f"  - {name}: {path}" for name, path in DERIVED_PATHS.items()
        if not os.path.exists(path)
    ]

    if missing_derived:
        level = logging.ERROR if require_derived else logging.WARNING
        logger.log(level, "First-Day Tabellen nicht gefunden:\n%s", "\n".join(missing_derived))

    if missing or (require_derived and missing_derived):
        if missing:
            logger.error("Folgende MIMIC-III Dateien wurden nicht gefunden:\n%s", "\n".join(missing))
        return False

    logger.info("Alle MIMIC-III Dateien gefunden!")
    return True

# =============================================================================
# EXPORT
# =============================================================================

__all__ = [
    'MIMIC_III_BASE_PATH',
    'MIMIC_III_DERIVED_PATH',
    'MIMIC_III_PATHS',
    'DERIVED_PATHS',
    'OUTPUT_BASE_PATH',
    'OUTPUT_PATHS',
    'TIME_WINDOW_HOURS',
    'CHUNK_SIZE',
    'AGE_DAYS_PER_YEAR',
    'apply_overrides',
    'create_output_dirs',
    'validate_paths',
]
