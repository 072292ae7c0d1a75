"""Copy base chassis attributes (heat sinks, troop space, turrets) to a variant.

One rule per unit kind. The rule is chosen by the variant's kind and only
applies when the base chassis is of the same kind.
"""

from __future__ import annotations

import logging

from typing import Callable

from .unit import Unit, UnitKind

logger = logging.getLogger(__name__)


def _propagate_mech(base: Unit, variant: Unit) -> None:
    variant.base_chassis_heat_sinks = base.heat_sinks


def _propagate_aero(base: Unit, variant: Unit) -> None:
    variant.base_chassis_heat_sinks = base.heat_sinks


def _propagate_tank(base: Unit, variant: Unit) -> None:
    excess = variant.troop_carrying_space - base.troop_carrying_space
    if excess > 0:
        variant.add_transporter(excess, pod_mounted=False)
        logger.debug("%s: added %s tons fixed troop space", variant.name, excess)
    variant.base_chassis_turret_weight = base.base_chassis_turret_weight
    variant.base_chassis_turret2_weight = base.base_chassis_turret2_weight


PROPAGATION_RULES: dict[UnitKind, Callable[[Unit, Unit], None]] = {
    UnitKind.MECH: _propagate_mech,
    UnitKind.AERO: _propagate_aero,
    UnitKind.TANK: _propagate_tank,
}

_missing_rules = set(UnitKind) - set(PROPAGATION_RULES)
if _missing_rules:
    raise RuntimeError(f"no propagation rule for {sorted(k.value for k in _missing_rules)}")


def propagate(base: Unit, variant: Unit) -> bool:
    """Apply the rule for the variant's kind. Returns False if none applies."""
    if base.kind != variant.kind:
        logger.warning("%s is a %s but its base chassis is a %s, nothing copied",
                       variant.name, variant.kind.value, base.kind.value)
        return False
    PROPAGATION_RULES[variant.kind](base, variant)
    return True
