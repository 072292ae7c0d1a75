"""Reading and writing unit files in the canonical JSON format.

A unit file holds either a single unit (bare dict) or a collection
(``{"units": [...]}``) whose entries are addressed by unit name::

    {
      "chassis": "Mad Cat", "model": "Prime", "kind": "mech",
      "tonnage": 75, "tech_base": "Clan", "omni": true,
      "heat_sinks": 16,
      "equipment": [
        {"type": "CLERLargeLaser", "location": "LA", "pod_mounted": true},
        ...
      ]
    }

Mechs and aerospace fighters carry a heat sink section, vehicles carry
their transporters and turret baselines. Unlocated equipment has location
"NONE" (or no location at all).
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from typing import Optional

from .equipment import get_equipment
from .tables import LOC_NONE, is_valid_location
from .unit import INNER_SPHERE, Mounted, TroopSpace, Unit, UnitKind

logger = logging.getLogger(__name__)


class UnitLoadingError(Exception):
    """A unit file could not be read or does not describe a valid unit."""


class UnitSaveError(Exception):
    """A unit could not be written back to its file."""


@dataclass(frozen=True)
class SourceRef:
    """Where a unit lives: a file, plus the entry name for collection files."""
    path: Path
    entry: Optional[str] = None

    def __str__(self) -> str:
        if self.entry:
            return f"{self.path}:{self.entry}"
        return str(self.path)


def load_json(filepath: Path) -> dict:
    """Load a JSON file, tolerating trailing commas and a BOM.

    Hand-edited unit files sometimes have trailing commas before ] or },
    we strip those before parsing.
    """
    with open(filepath, encoding="utf-8-sig") as f:
        text = f.read()
    text = re.sub(r",\s*([}\]])", r"\1", text)
    return json.loads(text)


def unit_name(data: dict) -> str:
    return f"{data['chassis']} {data['model']}"


# =============================================================================
# Decoding
# =============================================================================

_MISSING = object()


def _number(data: dict, key: str, default=_MISSING):
    """Read a numeric field. None is only accepted when it is the default."""
    value = data[key] if default is _MISSING else data.get(key, default)
    if value is None and default is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnitLoadingError(f"field '{key}' must be a number, got {value!r}")
    return value


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise UnitLoadingError(f"field '{key}' must be true or false, got {value!r}")
    return value


def _decode_mounted(item: dict, kind: UnitKind) -> Mounted:
    try:
        equipment = get_equipment(item["type"])
    except KeyError:
        raise UnitLoadingError(f"unknown equipment '{item.get('type')}'") from None
    location = item.get("location") or LOC_NONE
    if not is_valid_location(kind.value, location):
        raise UnitLoadingError(
            f"invalid location '{location}' for {equipment.name} on a {kind.value}"
        )
    return Mounted(
        equipment=equipment,
        location=location,
        pod_mounted=_flag(item, "pod_mounted"),
    )


def _decode_heat_sinks(unit: Unit, data: dict) -> None:
    unit.heat_sinks = _number(data, "heat_sinks", 10)
    unit.base_chassis_heat_sinks = _number(data, "base_chassis_heat_sinks", None)


def _decode_vehicle(unit: Unit, data: dict) -> None:
    unit.transporters = [
        TroopSpace(capacity=_number(t, "capacity"), pod_mounted=_flag(t, "pod_mounted"))
        for t in data.get("transporters", [])
    ]
    unit.base_chassis_turret_weight = _number(data, "base_chassis_turret_weight", None)
    unit.base_chassis_turret2_weight = _number(data, "base_chassis_turret2_weight", None)


_DECODERS = {
    UnitKind.MECH: _decode_heat_sinks,
    UnitKind.AERO: _decode_heat_sinks,
    UnitKind.TANK: _decode_vehicle,
}


def unit_from_dict(data: dict, source: object = None) -> Unit:
    """Build a Unit from a JSON-compatible dictionary.

    Raises UnitLoadingError if the data is missing fields or references
    unknown equipment or locations, or has fields of the wrong type.
    """
    try:
        kind = UnitKind(data.get("kind", "mech"))
    except ValueError:
        raise UnitLoadingError(f"unknown unit kind '{data.get('kind')}'") from None

    try:
        unit = Unit(
            chassis=data["chassis"],
            model=data["model"],
            kind=kind,
            tonnage=_number(data, "tonnage"),
            tech_base=data.get("tech_base", INNER_SPHERE),
            omni=_flag(data, "omni"),
            source=source,
        )
        unit.equipment = [_decode_mounted(item, kind) for item in data.get("equipment", [])]
        _DECODERS[kind](unit, data)
    except (KeyError, TypeError) as e:
        raise UnitLoadingError(f"malformed unit data: missing or bad field {e}") from e
    return unit


# =============================================================================
# Encoding
# =============================================================================

def _encode_heat_sinks(unit: Unit, data: dict) -> None:
    data["heat_sinks"] = unit.heat_sinks
    if unit.base_chassis_heat_sinks is not None:
        data["base_chassis_heat_sinks"] = unit.base_chassis_heat_sinks


def _encode_vehicle(unit: Unit, data: dict) -> None:
    data["transporters"] = [
        {"capacity": t.capacity, "pod_mounted": t.pod_mounted}
        for t in unit.transporters
    ]
    if unit.base_chassis_turret_weight is not None:
        data["base_chassis_turret_weight"] = unit.base_chassis_turret_weight
    if unit.base_chassis_turret2_weight is not None:
        data["base_chassis_turret2_weight"] = unit.base_chassis_turret2_weight


_ENCODERS = {
    UnitKind.MECH: _encode_heat_sinks,
    UnitKind.AERO: _encode_heat_sinks,
    UnitKind.TANK: _encode_vehicle,
}


def unit_to_dict(unit: Unit) -> dict:
    """Convert a Unit back into the canonical JSON-compatible dictionary."""
    data = {
        "chassis": unit.chassis,
        "model": unit.model,
        "kind": unit.kind.value,
        "tonnage": unit.tonnage,
        "tech_base": unit.tech_base,
        "omni": unit.omni,
    }
    _ENCODERS[unit.kind](unit, data)
    data["equipment"] = []
    for m in unit.equipment:
        item = {"type": m.equipment.internal_name, "location": m.location}
        if m.pod_mounted:
            item["pod_mounted"] = True
        data["equipment"].append(item)
    return data


# =============================================================================
# File access
# =============================================================================

def _find_entry(data: dict, entry: str) -> dict:
    for item in data.get("units", []):
        if unit_name(item) == entry:
            return item
    raise KeyError(entry)


def load_unit(source: SourceRef) -> Unit:
    """Load the unit a SourceRef points to."""
    try:
        data = load_json(source.path)
    except (OSError, ValueError) as e:
        raise UnitLoadingError(f"cannot read {source.path}: {e}") from e

    if source.entry is not None:
        try:
            data = _find_entry(data, source.entry)
        except (KeyError, TypeError):
            raise UnitLoadingError(f"no entry '{source.entry}' in {source.path}") from None
    elif not isinstance(data, dict) or "units" in data:
        raise UnitLoadingError(f"{source.path} does not hold a single unit")

    return unit_from_dict(data, source)


def save_unit(unit: Unit, source: Optional[SourceRef] = None) -> None:
    """Write a unit back to its file (or to ``source`` if given).

    For collection files only the matching entry is replaced.
    """
    source = source or unit.source
    if not isinstance(source, SourceRef):
        raise UnitSaveError(f"{unit.name} has no file to save to")

    data = unit_to_dict(unit)
    try:
        if source.entry is not None:
            collection = load_json(source.path)
            units = collection.get("units", [])
            for i, item in enumerate(units):
                if unit_name(item) == source.entry:
                    units[i] = data
                    break
            else:
                raise UnitSaveError(f"no entry '{source.entry}' in {source.path}")
            data = collection
        with open(source.path, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
    except (OSError, ValueError) as e:
        raise UnitSaveError(f"cannot write {source}: {e}") from e
    logger.debug("Saved %s to %s", unit.name, source)
