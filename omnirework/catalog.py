"""Unit catalog: summaries of every known unit, looked up by name.

Building the catalog only reads the header fields of each unit (chassis,
model, tonnage, tech base, kind). Full equipment lists are parsed later
by load_unit, so a unit with bad equipment data still appears here and
fails at load time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from typing import Iterable, Optional

from .unit import CLAN, INNER_SPHERE
from .unitfile import SourceRef, load_json, unit_name

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """The unit catalog as a whole cannot be built."""


@dataclass(frozen=True)
class UnitSummary:
    chassis: str
    model: str
    tonnage: float
    tech_base: str
    kind: str
    source: SourceRef

    @property
    def name(self) -> str:
        return f"{self.chassis} {self.model}"

    @property
    def is_clan(self) -> bool:
        return self.tech_base == CLAN


def summarize(data: dict, source: SourceRef) -> UnitSummary:
    """Extract the summary header from a unit dict. Raises KeyError on missing fields."""
    return UnitSummary(
        chassis=data["chassis"],
        model=data["model"],
        tonnage=data["tonnage"],
        tech_base=data.get("tech_base", INNER_SPHERE),
        kind=data.get("kind", "mech"),
        source=source,
    )


class UnitCatalog:
    """Name-indexed collection of unit summaries."""

    def __init__(self, summaries: Iterable[UnitSummary] = ()):
        self._by_name: dict[str, UnitSummary] = {}
        for ms in summaries:
            if ms.name in self._by_name:
                logger.warning("Duplicate unit name %s in %s, keeping %s",
                               ms.name, ms.source, self._by_name[ms.name].source)
                continue
            self._by_name[ms.name] = ms

    def __len__(self) -> int:
        return len(self._by_name)

    def all_units(self) -> list[UnitSummary]:
        return [self._by_name[name] for name in sorted(self._by_name)]

    def find_by_name(self, name: str) -> Optional[UnitSummary]:
        return self._by_name.get(name)

    @classmethod
    def from_directory(cls, dirpath: str | Path) -> UnitCatalog:
        """Scan a directory tree for unit files.

        Each *.json file holds either one unit or a {"units": [...]}
        collection. Files that cannot be parsed are logged and left out.
        """
        dirpath = Path(dirpath)
        if not dirpath.is_dir():
            raise CatalogError(f"unit data directory not found: {dirpath}")

        summaries: list[UnitSummary] = []
        for filepath in sorted(dirpath.rglob("*.json")):
            try:
                data = load_json(filepath)
            except (OSError, ValueError) as e:
                logger.warning("Skipping unreadable unit file %s: %s", filepath, e)
                continue

            try:
                if isinstance(data, dict) and "units" in data:
                    for item in data["units"]:
                        summaries.append(summarize(item, SourceRef(filepath, unit_name(item))))
                else:
                    summaries.append(summarize(data, SourceRef(filepath)))
            except (KeyError, TypeError) as e:
                logger.warning("Skipping %s: missing summary field %s", filepath, e)

        logger.info("Catalog: %d units from %s", len(summaries), dirpath)
        return cls(summaries)
