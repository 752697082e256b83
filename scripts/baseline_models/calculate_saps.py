"""
SAPS Score Berechnung - Main Script

Berechnet den SAPS (erster ICU-Tag) für ALLE ICU-Aufenthalte aus MIMIC-III.
Die Auswahl geeigneter Stays (z.B. Ausschluss von Neugeborenen) erfolgt
anschließend durch den Nutzer über die icustay_id.

Usage:
    python scripts/baseline_models/calculate_saps.py
    python scripts/baseline_models/calculate_saps.py --config configs/saps.yaml --override my.yaml
    python scripts/baseline_models/calculate_saps.py --icustay-ids 200001 200003

Output (wird bei jedem Lauf komplett überschrieben):
    outputs/baseline_models/saps/
    ├── saps_scores.csv
    ├── saps_complete_data.csv
    ├── saps_statistics.txt
    ├── run_config.yaml
    └── logs/
"""

import sys
import argparse
import logging
from datetime import datetime
from pathlib import Path

# Füge Projekt-Root zu Python Path hinzu
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from src.scoring_models import config, utils
from src.scoring_models.saps import calculator, itemid_mappings
from src.scoring_models.saps import data_loader
from src.utils.config_loader import load_config, save_config
from src.utils.logger import setup_logger

logger = logging.getLogger("src.scripts.calculate_saps")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="SAPS Score Berechnung (erster ICU-Tag)")
    parser.add_argument("--config", type=Path, default=None,
                        help="Laufkonfiguration (Default: configs/saps.yaml)")
    parser.add_argument("--override", type=Path, default=None,
                        help="Optionale YAML-Datei mit Overrides")
    parser.add_argument("--icustay-ids", type=int, nargs="+", default=None,
                        help="Nur diese icustay_ids berechnen")
    return parser.parse_args(argv)

# =============================================================================
# MAIN FUNKTION
# =============================================================================

def main(argv=None):
    """Hauptfunktion: Führt SAPS Score Berechnung komplett durch."""
    args = parse_args(argv)

    print("\n" + "█"*70)
    print("█" + "  SAPS SCORE BERECHNUNG".center(68) + "█")
    print("█"*70)
    print(f"\nStart: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    # =========================================================================
    # 1. SETUP & VALIDIERUNG
    # =========================================================================

    run_config = load_config(config_path=args.config, override_path=args.override)
    config.apply_overrides(run_config)

    output_path = config.create_output_dirs("saps")
    setup_logger("src", log_dir=Path(output_path) / "logs", level=config.LOG_LEVEL)

    logger.info("Schritt 1: Setup & Validierung")

    if not config.validate_paths():
        logger.error("MIMIC-III Pfade nicht konfiguriert! -> configs/saps.yaml anpassen")
        return 1

    itemid_mappings.validate_itemids()

    if not calculator.validate_saps_calculation():
        logger.error("Validierungs-Tests der SAPS Berechnung fehlgeschlagen!")
        return 1

    # =========================================================================
    # 2. DATEN LADEN
    # =========================================================================

    logger.info("Schritt 2: MIMIC-III Daten laden")

    try:
        cohort = data_loader.load_saps_data(icustay_ids=args.icustay_ids)
    except (FileNotFoundError, ValueError) as e:
        logger.exception("FEHLER beim Laden: %s", e)
        return 1

    if len(cohort) == 0:
        logger.error("Keine ICU-Aufenthalte geladen!")
        return 1

    # =========================================================================
    # 3. DATENQUALITÄT PRÜFEN
    # =========================================================================

    logger.info("Schritt 3: Datenqualität prüfen")
    validation_stats = utils.validate_data(cohort, itemid_mappings.COHORT_COLUMNS, "SAPS")

    # =========================================================================
    # 4. SAPS SCORES BERECHNEN
    # =========================================================================

    logger.info("Schritt 4: SAPS Scores berechnen")
    saps_data = calculator.calculate_saps_batch(cohort)
    saps_records = calculator.build_saps_records(saps_data)
    logger.info("✓ SAPS für %d ICU-Aufenthalte berechnet", len(saps_records))

    # =========================================================================
    # 5. PLAUSIBILITÄTS-CHECKS
    # =========================================================================

    logger.info("Schritt 5: Plausibilitäts-Checks")
    is_valid = utils.sanity_check_scores(
        saps_records,
        score_column='saps',
        valid_range=(0, calculator.SAPS_MAX_SCORE),
        component_columns=calculator.SAPS_COMPONENT_COLUMNS,
        score_name="SAPS"
    )
    if not is_valid:
        logger.warning("Plausibilitäts-Checks haben Probleme gefunden!")

    # =========================================================================
    # 6. STATISTIKEN
    # =========================================================================

    logger.info("Schritt 6: Statistiken")
    stats = utils.calculate_score_statistics(
        saps_records,
        score_column='saps',
        component_columns=calculator.SAPS_COMPONENT_COLUMNS
    )
    utils.print_statistics(stats, "SAPS")

    # =========================================================================
    # 7. ERGEBNISSE SPEICHERN
    # =========================================================================

    logger.info("Schritt 7: Ergebnisse speichern")
    try:
        utils.save_results(
            saps_records,
            output_path,
            score_name="saps",
            score_columns=['saps'] + calculator.SAPS_COMPONENT_COLUMNS,
            complete_data=saps_data
        )
        utils.save_statistics(stats, output_path, score_name="SAPS", validation_stats=validation_stats)
        save_config(run_config, Path(output_path) / "run_config.yaml")
    except OSError as e:
        logger.exception("FEHLER beim Speichern: %s", e)
        return 1

    # =========================================================================
    # 8. ZUSAMMENFASSUNG
    # =========================================================================

    print("\n" + "█"*70)
    print("█" + "  SAPS SCORE - FERTIG!".center(68) + "█")
    print("█"*70)

    print(f"\n📊 ZUSAMMENFASSUNG:")
    print("-" * 70)
    print(f"  Methodik:               Erste 24h nach ICU-Admission, Extremwerte")
    print(f"  ICU-Aufenthalte:        {len(saps_records)}")
    print(f"  SAPS (Mittel):          {stats['mean']:.2f} ± {stats['std']:.2f}")
    print(f"  SAPS (Median):          {stats['median']:.1f}")
    print(f"  SAPS (Range):           {stats['min']:.0f} - {stats['max']:.0f}")
    print("-" * 70)
    print(f"\n📁 OUTPUT: {output_path}")
    print(f"\n⏱️  Ende: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    return 0

# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n⚠️  Abbruch durch Benutzer (Ctrl+C)")
        sys.exit(0)
