"""
Gemeinsame Hilfsfunktionen für alle Clinical Baseline Scores

Enthält wiederverwendbare Funktionen für:
- Datenvalidierung (Verfügbarkeit der Eingangswerte)
- Statistiken
- Export/Save
- Plausibilitäts-Checks
"""

import os
import logging
import pandas as pd
from typing import Dict, List, Optional
from datetime import datetime

logger = logging.getLogger(__name__)

ID_COLUMNS = ['subject_id', 'hadm_id', 'icustay_id']

# =============================================================================
# DATENVALIDIERUNG
# =============================================================================

def validate_data(
    df: pd.DataFrame,
    required_columns: List[str],
    score_name: str = "Score"
) -> Dict:
    """
    Validiert Datenqualität für Score-Berechnung.

    Fehlende Werte sind kein Fehler (Komponente wird NULL), der Report zeigt
    nur, wie vollständig die Eingangsdaten sind.

    Args:
        df: DataFrame mit Daten
        required_columns: Liste benötigter Spalten
        score_name: Name des Scores (für Output)

    Returns:
        Dictionary mit Validierungs-Statistiken
    """
    print("\n" + "="*70)
    print(f"{score_name.upper()} - DATENQUALITÄT VALIDIERUNG")
    print("="*70)

    n_total = len(df)
    stats = {
        'total_stays': n_total,
        'missing_columns': [],
        'missing_values': {},
        'available_data': {},
    }

    for col in required_columns:
        if col not in df.columns:
            stats['missing_columns'].append(col)
            stats['missing_values'][col] = n_total
            stats['available_data'][col] = 0
            print(f"  ❌ {col:30s}: NICHT VORHANDEN!")
            continue

        missing_count = int(df[col].isna().sum())
        available = n_total - missing_count
        available_pct = (available / n_total) * 100 if n_total else 0.0

        stats['missing_values'][col] = missing_count
        stats['available_data'][col] = available

        status = "✓" if available_pct >= 80 else "⚠️"
        print(f"  {status} {col:30s}: {available:6d} / {n_total:6d} ({available_pct:5.1f}%)")

    print("="*70 + "\n")

    return stats

# =============================================================================
# STATISTIKEN
# =============================================================================

def calculate_score_statistics(
    df: pd.DataFrame,
    score_column: str = 'saps',
    component_columns: Optional[List[str]] = None
) -> Dict:
    """
    Berechnet deskriptive Statistiken für Scores.

    Komponenten-Statistiken basieren nur auf nicht-fehlenden Werten;
    'available' zählt, wie oft eine Komponente bewertet werden konnte.

    Returns:
        Dictionary mit Statistiken (leer, falls score_column fehlt)
    """
    if score_column not in df.columns:
        logger.warning("Score-Spalte '%s' nicht gefunden!", score_column)
        return {}

    scores = df[score_column].astype(float)
    stats = {
        'n': len(df),
        'mean': scores.mean(),
        'std': scores.std(),
        'median': scores.median(),
        'min': scores.min(),
        'max': scores.max(),
        'q25': scores.quantile(0.25),
        'q75': scores.quantile(0.75),
        'distribution': df[score_column].value_counts().sort_index().to_dict(),
    }

    if component_columns:
        stats['components'] = {}
        for col in component_columns:
            if col in df.columns:
                values = df[col].astype(float)
                stats['components'][col] = {
                    'available': int(values.notna().sum()),
                    'mean': values.mean(),
                    'median': values.median(),
                    'std': values.std(),
                }

    return stats


def format_statistics_report(
    stats: Dict,
    score_name: str = "Score",
    validation_stats: Optional[Dict] = None
) -> List[str]:
    """
    Baut den Statistik-Report zeilenweise auf (Konsole und Textdatei nutzen denselben Report).

    Komponenten werden mit 'bewertet/n' angegeben: NULL-Komponenten zählen
    nicht in Mittelwert und SD.
    """
    rule = "-" * 70
    n = stats['n']
    lines = []

    if validation_stats:
        lines += ["", "Eingangsdaten (vorhanden/n):", rule]
        for col, available in validation_stats['available_data'].items():
            lines.append(f"  {col:30s}: {available:6d} / {validation_stats['total_stays']}")

    lines += [
        "",
        f"{score_name} gesamt (n={n}):",
        rule,
        f"  Mittelwert ± SD:  {stats['mean']:.2f} ± {stats['std']:.2f}",
        f"  Median [IQR]:     {stats['median']:.1f} [{stats['q25']:.1f} - {stats['q75']:.1f}]",
        f"  Min / Max:        {stats['min']:.0f} / {stats['max']:.0f}",
    ]

    if stats.get('components'):
        lines += ["", "Komponenten (Mittelwert ± SD, bewertet/n):", rule]
    for comp_name, comp in stats.get('components', {}).items():
        lines.append(
            f"  {comp_name:20s}: {comp['mean']:5.2f} ± {comp['std']:4.2f}  ({comp['available']}/{n})"
        )

    return lines


def print_statistics(stats: Dict, score_name: str = "Score"):
    """Gibt den Statistik-Report auf der Konsole aus."""
    print("\n" + "=" * 70)
    print(f"{score_name.upper()} - STATISTIKEN")
    print("=" * 70)
    for line in format_statistics_report(stats, score_name):
        print(line)
    print("=" * 70 + "\n")

# =============================================================================
# EXPORT / SAVE
# =============================================================================

def save_results(
    df: pd.DataFrame,
    output_path: str,
    score_name: str = "saps",
    score_columns: List[str] = ['saps'],
    complete_data: Optional[pd.DataFrame] = None
) -> List[str]:
    """
    Speichert Score-Ergebnisse als CSV.

    Vorhandene Dateien werden überschrieben (vollständige Neuberechnung pro Lauf).
    NULL-Komponenten werden als leere Felder geschrieben.

    Args:
        df: DataFrame mit Scores (ein Record pro Stay)
        output_path: Ausgabe-Pfad
        score_name: Name des Scores (für Dateinamen)
        score_columns: Liste der Score-Spalten
        complete_data: Optional - assemblierte Eingangsdaten inkl. Scores

    Returns:
        Liste der geschriebenen Dateien
    """
    os.makedirs(output_path, exist_ok=True)
    written = []

    # 1. Haupt-Output: IDs + Scores
    main_cols = ID_COLUMNS + score_columns
    available_cols = [col for col in main_cols if col in df.columns]

    output_file = os.path.join(output_path, f'{score_name}_scores.csv')
    df[available_cols].to_csv(output_file, index=False)
    written.append(output_file)
    logger.info("✓ Gespeichert: %s", output_file)

    # 2. Vollständiger Datensatz
    if complete_data is not None:
        full_file = os.path.join(output_path, f'{score_name}_complete_data.csv')
        complete_data.to_csv(full_file, index=False)
        written.append(full_file)
        logger.info("✓ Gespeichert: %s", full_file)

    return written


def save_statistics(
    stats: Dict,
    output_path: str,
    score_name: str = "Score",
    validation_stats: Optional[Dict] = None
) -> str:
    """Schreibt den Statistik-Report (inkl. Datenqualität) nach <score>_statistics.txt."""
    output_file = os.path.join(output_path, f'{score_name.lower()}_statistics.txt')

    header = [
        "=" * 70,
        f"{score_name.upper()} - STATISTIKEN",
        f"Lauf vom {datetime.now():%Y-%m-%d %H:%M:%S}",
        "=" * 70,
    ]
    report = header + format_statistics_report(stats, score_name, validation_stats)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write("\n".join(report) + "\n")

    logger.info("✓ Statistiken gespeichert: %s", output_file)
    return output_file

# =============================================================================
# PLAUSIBILITÄTS-CHECKS
# =============================================================================

def sanity_check_scores(
    df: pd.DataFrame,
    score_column: str = 'saps',
    valid_range: tuple = (0, 59),
    component_columns: Optional[List[str]] = None,
    score_name: str = "Score"
) -> bool:
    """
    Führt Plausibilitäts-Checks für berechnete Scores durch.

    Checks:
    - Gesamt-Score nie NULL und im gültigen Bereich
    - Gesamt-Score = Summe der Komponenten (NULL = 0), falls component_columns gesetzt
    - Jeder Stay genau einmal (icustay_id eindeutig)

    Returns:
        True wenn alle Checks bestanden, False sonst
    """
    print(f"\n🔍 Plausibilitäts-Checks für {score_name}...")
    print("-" * 70)

    issues = []

    if score_column not in df.columns:
        issues.append(f"⚠️  Score-Spalte '{score_column}' fehlt")
    else:
        n_null = int(df[score_column].isna().sum())
        if n_null > 0:
            issues.append(f"⚠️  {n_null} Stays ohne {score_name}")

        min_val, max_val = valid_range
        invalid = df[(df[score_column] < min_val) | (df[score_column] > max_val)]
        if len(invalid) > 0:
            issues.append(f"⚠️  {len(invalid)} Stays mit ungültigem {score_name} (außerhalb {min_val}-{max_val})")

        if component_columns:
            component_sum = df[component_columns].fillna(0).sum(axis=1)
            mismatched = int((component_sum != df[score_column]).sum())
            if mismatched > 0:
                issues.append(f"⚠️  {mismatched} Stays: {score_name} ≠ Summe der Komponenten")

    if 'icustay_id' in df.columns and df['icustay_id'].duplicated().any():
        issues.append("⚠️  icustay_id nicht eindeutig")

    if len(issues) == 0:
        print("  ✓ Alle Plausibilitäts-Checks bestanden!")
    else:
        print("  Gefundene Probleme:")
        for issue in issues:
            print(f"    {issue}")

    print("-" * 70 + "\n")

    return len(issues) == 0

# =============================================================================
# EXPORT
# =============================================================================

__all__ = [
    'validate_data',
    'calculate_score_statistics',
    'format_statistics_report',
    'print_statistics',
    'save_results',
    'save_statistics',
    'sanity_check_scores',
]
