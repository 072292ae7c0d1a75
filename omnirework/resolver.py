"""Base chassis lookup for omni variants.

The base chassis of an omni unit is stored as a regular unit whose model
is "<base>", e.g. "Mad Cat <base>". Where both Clan and Inner Sphere
versions of a chassis exist, the tech base is appended: "<base>Clan",
"<base>IS".
"""

from __future__ import annotations

import logging

from typing import Callable, Optional

from .catalog import UnitCatalog, UnitSummary
from .unit import Unit
from .unitfile import SourceRef, load_unit

logger = logging.getLogger(__name__)

BASE_MARKER = "<base"
BASE_MODEL = "<base>"
BASE_SUFFIXES = {True: "Clan", False: "IS"}   # keyed by is_clan


def is_base_model(model: str) -> bool:
    return model.startswith(BASE_MARKER)


def base_chassis_names(variant: Unit) -> list[str]:
    """Catalog names to try, in order, for a variant's base chassis."""
    plain = f"{variant.chassis} {BASE_MODEL}"
    return [plain, plain + BASE_SUFFIXES[variant.is_clan]]


def find_base_chassis(variant: Unit, catalog: UnitCatalog) -> Optional[UnitSummary]:
    """Find the catalog entry for a variant's base chassis.

    Returns None (and logs why) if there is no base chassis, or if the
    candidate's tonnage or tech base differs from the variant's.
    """
    ms = None
    for name in base_chassis_names(variant):
        ms = catalog.find_by_name(name)
        if ms is not None:
            break

    if ms is None:
        logger.warning("Could not find base chassis for %s", variant.name)
        return None
    if ms.tonnage != variant.tonnage:
        logger.warning("%s and %s have different tonnage (%s vs %s)",
                       variant.name, ms.name, variant.tonnage, ms.tonnage)
        return None
    if ms.is_clan != variant.is_clan:
        logger.warning("%s and %s have different tech base (%s vs %s)",
                       variant.name, ms.name, variant.tech_base, ms.tech_base)
        return None
    return ms


def resolve_base(variant: Unit, catalog: UnitCatalog,
                 loader: Callable[[SourceRef], Unit] = load_unit) -> Optional[Unit]:
    """Find and load the base chassis unit for a variant.

    Load failures of the base unit propagate as UnitLoadingError.
    """
    ms = find_base_chassis(variant, catalog)
    if ms is None:
        return None
    return loader(ms.source)
