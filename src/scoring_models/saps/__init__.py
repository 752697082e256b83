"""
SAPS Score (Simplified Acute Physiology Score)

Implementierung des SAPS (erster ICU-Tag) nach Le Gall et al. (1984).

Usage:
    from src.scoring_models.saps import calculate_saps_from_dict

    patient_data = {
        'age': 50,
        'heartrate_max': 90,
        'heartrate_min': 90,
        'mingcs': 15,
        # ... weitere Parameter
    }

    scores = calculate_saps_from_dict(patient_data)
    print(scores['saps'])

Modules:
    - calculator: Komponenten-Scores und Aggregation
    - data_loader: Lädt Population, Demographie, First-Day Tabellen und CPAP-Flag
    - itemid_mappings: MIMIC-III itemids und Spalten-Kontrakte

References:
    - Le Gall et al. (1984): Original SAPS Paper
"""

from .calculator import (
    calculate_saps_from_dict,
    calculate_saps_batch,
    build_saps_records,
    calculate_total_saps_score,
    validate_saps_calculation,
    SAPS_COMPONENTS,
    SAPS_COMPONENT_COLUMNS,
    SAPS_RECORD_COLUMNS,
    SAPS_MAX_SCORE,
)

from .data_loader import (
    load_saps_data,
    load_icustays,
    assemble_cohort,
    extract_cpap_flags,
)

__all__ = [
    'calculate_saps_from_dict',
    'calculate_saps_batch',
    'build_saps_records',
    'calculate_total_saps_score',
    'validate_saps_calculation',
    'SAPS_COMPONENTS',
    'SAPS_COMPONENT_COLUMNS',
    'SAPS_RECORD_COLUMNS',
    'SAPS_MAX_SCORE',
    'load_saps_data',
    'load_icustays',
    'assemble_cohort',
    'extract_cpap_flags',
]
