"""
Clinical Baseline Scores

Dieses Modul enthält Implementierungen etablierter klinischer Scores
für die Schweregrad-Einschätzung von ICU-Patienten:

- SAPS (Simplified Acute Physiology Score, erster ICU-Tag)

Usage:
    from src.scoring_models.saps import calculate_saps_from_dict
    from src.scoring_models import config, utils
"""

__version__ = "1.0.0"

# Gemeinsame Imports für alle Scores
from .config import MIMIC_III_BASE_PATH, OUTPUT_BASE_PATH, OUTPUT_PATHS
from .utils import validate_data, save_results

__all__ = [
    'MIMIC_III_BASE_PATH',
    'OUTPUT_BASE_PATH',
    'OUTPUT_PATHS',
    'validate_data',
    'save_results',
]
