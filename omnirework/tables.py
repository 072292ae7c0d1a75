"""Location tables for the unit categories: short location IDs and display names."""

# Sentinel for equipment that is carried but not mounted in any location
# (e.g. spare ammo, unallocated items). Never subject to omni rework.
LOC_NONE = "NONE"

# =============================================================================
# Location Tables
# Keys are the short location IDs used in unit files, values are display names.
# Dict order is the canonical location order for the category.
# =============================================================================

MECH_LOCATIONS: dict[str, str] = {
    "HD": "Head",
    "CT": "Center Torso",
    "LT": "Left Torso",
    "RT": "Right Torso",
    "LA": "Left Arm",
    "RA": "Right Arm",
    "LL": "Left Leg",
    "RL": "Right Leg",
}

AERO_LOCATIONS: dict[str, str] = {
    "NOS":  "Nose",
    "LWG":  "Left Wing",
    "RWG":  "Right Wing",
    "AFT":  "Aft",
    "FSLG": "Fuselage",
}

TANK_LOCATIONS: dict[str, str] = {
    "BD":  "Body",
    "FR":  "Front",
    "RS":  "Right",
    "LS":  "Left",
    "RR":  "Rear",
    "TU":  "Turret",
    "TU2": "Front Turret",
}

# Keyed by UnitKind.value so this module stays free of model imports
LOCATION_TABLES: dict[str, dict[str, str]] = {
    "mech": MECH_LOCATIONS,
    "aero": AERO_LOCATIONS,
    "tank": TANK_LOCATIONS,
}


def is_valid_location(kind: str, loc: str) -> bool:
    """Check a location ID against the table for a unit kind. LOC_NONE is always valid."""
    if loc == LOC_NONE:
        return True
    return loc in LOCATION_TABLES[kind]


def location_name(kind: str, loc: str) -> str:
    """Display name for a location ID, e.g. ("mech", "CT") -> "Center Torso"."""
    if loc == LOC_NONE:
        return "None"
    return LOCATION_TABLES[kind].get(loc, loc)
