"""
MIMIC-III itemid Mappings und Spalten-Kontrakte für SAPS Score Berechnung

Enthält:
- itemids des "Oxygen Delivery Device" Charts (für das CPAP-Flag)
- die Spalten, die aus den Upstream First-Day Tabellen übernommen werden

WICHTIG: Diese itemids sind für MIMIC-III (CareVue + Metavision) validiert.
Für MIMIC-IV müssen andere itemids verwendet werden!
"""

# =============================================================================
# BEATMUNG - CPAP / BiPAP
# =============================================================================

# Oxygen Delivery Device (chartevents)
OXYGEN_DEVICE_ITEMIDS = [
    467,     # O2 Delivery Device - CareVue
    469,     # O2 Delivery Mode - CareVue
    226732,  # O2 Delivery Device(s) - Metavision
]

# Exakter (case-sensitiver) Vergleich auf chartevents.value
CPAP_DEVICE_VALUES = [
    'CPAP Mask',
    'Bipap Mask',
]

# =============================================================================
# UPSTREAM FIRST-DAY TABELLEN (Output-Kontrakt der Kollaborateure)
# =============================================================================

# vitalsfirstday
VITALS_COLUMNS = [
    'heartrate_max', 'heartrate_min',
    'sysbp_max', 'sysbp_min',
    'resprate_max', 'resprate_min',
    'tempc_max', 'tempc_min',
    'glucose_max', 'glucose_min',
]

# labsfirstday
LABS_COLUMNS = [
    'bun_max', 'bun_min',
    'hematocrit_max', 'hematocrit_min',
    'wbc_max', 'wbc_min',
    'glucose_max', 'glucose_min',
    'sodium_max', 'sodium_min',
    'potassium_max', 'potassium_min',
    'bicarbonate_max', 'bicarbonate_min',
]

# uofirstday / ventfirstday / gcsfirstday
URINE_OUTPUT_COLUMNS = ['urineoutput']
VENTILATION_COLUMNS = ['mechvent']
GCS_COLUMNS = ['mingcs']

# Tabelle -> Spalten (Schlüssel ist immer icustay_id)
FIRST_DAY_TABLES = {
    'vitalsfirstday': VITALS_COLUMNS,
    'labsfirstday': LABS_COLUMNS,
    'uofirstday': URINE_OUTPUT_COLUMNS,
    'ventfirstday': VENTILATION_COLUMNS,
    'gcsfirstday': GCS_COLUMNS,
}

# Glukose kommt aus zwei Quellen: Vitals haben Vorrang, Labor ist Fallback
GLUCOSE_COLUMNS = ['glucose_max', 'glucose_min']

# Alle Eingangsfelder des assemblierten Kohorten-Records (ohne IDs)
COHORT_COLUMNS = (
    ['age', 'mingcs'] +
    [c for c in VITALS_COLUMNS if c not in GLUCOSE_COLUMNS] +
    GLUCOSE_COLUMNS +
    [c for c in LABS_COLUMNS if c not in GLUCOSE_COLUMNS] +
    VENTILATION_COLUMNS +
    URINE_OUTPUT_COLUMNS +
    ['cpap']
)

# =============================================================================
# VALIDIERUNG
# =============================================================================

def validate_itemids():
    """
    Überprüft, ob die itemid- und Spalten-Listen eindeutige Werte enthalten.

    Returns:
        True falls keine Duplikate gefunden wurden
    """
    ok = True
    for name, values in [
        ("oxygen device itemids", OXYGEN_DEVICE_ITEMIDS),
        ("cpap values", CPAP_DEVICE_VALUES),
        ("cohort columns", COHORT_COLUMNS),
    ]:
        if len(values) != len(set(values)):
            duplicates = {x for x in values if values.count(x) > 1}
            print(f"⚠️  Warnung: Duplikate in {name}: {duplicates}")
            ok = False

    print(f"✓ itemid Validation abgeschlossen")
    print(f"  - chartevents (O2 device): {len(set(OXYGEN_DEVICE_ITEMIDS))} unique itemids")
    print(f"  - first-day Tabellen: {len(FIRST_DAY_TABLES)}")
    return ok

# =============================================================================
# EXPORT
# =============================================================================

__all__ = [
    'OXYGEN_DEVICE_ITEMIDS',
    'CPAP_DEVICE_VALUES',
    'VITALS_COLUMNS',
    'LABS_COLUMNS',
    'URINE_OUTPUT_COLUMNS',
    'VENTILATION_COLUMNS',
    'GCS_COLUMNS',
    'FIRST_DAY_TABLES',
    'GLUCOSE_COLUMNS',
    'COHORT_COLUMNS',
    'validate_itemids',
]
