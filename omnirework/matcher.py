"""Fixed vs pod-mounted equipment matching between a base chassis and a variant.

Every piece of equipment that is fixed on the base chassis must be fixed
on each variant too. The variant's copy of it is found by location and
equipment type among the variant's pod-mounted equipment and switched to
fixed.

Matching is greedy: each base item claims the first eligible variant item
in stored order. When a location holds several identical items the
assignment follows file order, which may not be what the unit designer
intended.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .equipment import same_type
from .unit import Mounted, Unit

logger = logging.getLogger(__name__)

# Equipment whose absence on a variant is not worth reporting. Clan CASE is
# built into every Clan omni and is routinely left out of variant files.
MISS_EXEMPT_TYPES: frozenset[str] = frozenset({"CLCASE"})


@dataclass(frozen=True)
class Miss:
    """Base chassis fixed equipment with no counterpart on the variant."""
    equipment_name: str
    location_name: str
    variant_name: str

    def __str__(self) -> str:
        return (f"Could not locate {self.equipment_name} in {self.location_name} "
                f"of {self.variant_name}")


@dataclass
class ReconcileResult:
    fixed: list[Mounted] = field(default_factory=list)
    misses: list[Miss] = field(default_factory=list)

    @property
    def miss_count(self) -> int:
        return len(self.misses)


def is_pod_eligible(mounted: Mounted) -> bool:
    """Equipment that can be pod-mounted at all: located and not fixed-only."""
    return mounted.is_located and not mounted.equipment.omni_fixed_only


def is_base_fixed(mounted: Mounted) -> bool:
    """Base chassis equipment that every variant must carry as fixed."""
    return is_pod_eligible(mounted) and not mounted.pod_mounted


def _find_pod_counterpart(variant: Unit, base_mounted: Mounted) -> Mounted | None:
    for m in variant.equipment:
        if (m.location == base_mounted.location
                and same_type(m.equipment, base_mounted.equipment)
                and m.pod_mounted):
            return m
    return None


def reconcile(base: Unit, variant: Unit,
              exempt: frozenset[str] = MISS_EXEMPT_TYPES) -> ReconcileResult:
    """Mark the variant's copies of the base chassis' fixed equipment as fixed.

    Only ``pod_mounted`` flags on the variant change. Base equipment with no
    pod-mounted counterpart on the variant is returned as a Miss (unless
    its type is in ``exempt``).
    """
    result = ReconcileResult()

    for base_mounted in base.equipment:
        if not is_base_fixed(base_mounted):
            continue

        match = _find_pod_counterpart(variant, base_mounted)
        if match is not None:
            match.pod_mounted = False
            result.fixed.append(match)
            continue

        if base_mounted.equipment.internal_name in exempt:
            continue

        miss = Miss(
            equipment_name=base_mounted.equipment.name,
            location_name=base.location_name(base_mounted.location),
            variant_name=variant.name,
        )
        logger.warning("%s", miss)
        result.misses.append(miss)

    logger.debug("%s: %d fixed, %d missing", variant.name,
                 len(result.fixed), result.miss_count)
    return result


def set_all_pod(unit: Unit) -> int:
    """Mark all eligible equipment on a unit as pod-mounted.

    Returns the number of mounts that changed.
    """
    changed = 0
    for m in unit.equipment:
        if is_pod_eligible(m) and not m.pod_mounted:
            m.pod_mounted = True
            changed += 1
    return changed
