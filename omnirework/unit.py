"""Unit data model: omni-capable units and their mounted equipment."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum

from typing import Optional

from .equipment import EquipmentType
from .tables import LOC_NONE, location_name


CLAN = "Clan"
INNER_SPHERE = "Inner Sphere"


class UnitKind(Enum):
    MECH = "mech"    # mobile ground unit (BattleMech)
    AERO = "aero"    # aerospace fighter
    TANK = "tank"    # combat vehicle, can carry troops


@dataclass
class Mounted:
    equipment: EquipmentType
    location: str = LOC_NONE
    pod_mounted: bool = False

    @property
    def is_located(self) -> bool:
        return self.location != LOC_NONE


@dataclass
class TroopSpace:
    capacity: float          # tons of infantry
    pod_mounted: bool = False


@dataclass
class Unit:
    chassis: str
    model: str
    kind: UnitKind
    tonnage: float
    tech_base: str           # "Inner Sphere" or "Clan"
    omni: bool = False
    equipment: list[Mounted] = field(default_factory=list)

    # Mechs and aerospace fighters
    heat_sinks: int = 0
    base_chassis_heat_sinks: Optional[int] = None

    # Vehicles
    transporters: list[TroopSpace] = field(default_factory=list)
    base_chassis_turret_weight: Optional[float] = None
    base_chassis_turret2_weight: Optional[float] = None

    source: object = None    # locator the unit was loaded from

    @property
    def name(self) -> str:
        return f"{self.chassis} {self.model}"

    @property
    def is_clan(self) -> bool:
        return self.tech_base == CLAN

    @property
    def troop_carrying_space(self) -> float:
        return sum(t.capacity for t in self.transporters)

    def add_transporter(self, capacity: float, pod_mounted: bool = False) -> TroopSpace:
        space = TroopSpace(capacity=capacity, pod_mounted=pod_mounted)
        self.transporters.append(space)
        return space

    def location_name(self, loc: str) -> str:
        return location_name(self.kind.value, loc)

    def copy(self) -> Unit:
        """Deep copy of the unit and its mounts."""
        return copy.deepcopy(self)
