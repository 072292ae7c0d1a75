"""Equipment catalog: the equipment types that can be mounted on a unit.

Each type is identified by its internal name; two mounts carry the same
equipment exactly when their internal names are equal. Display names are
not unique (Inner Sphere and Clan versions of a weapon share one).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EquipmentType:
    internal_name: str
    name: str
    tonnage: float = 0
    crit_slots: int = 1
    omni_fixed_only: bool = False   # can never be pod-mounted (structure, armor, ...)


# === Energy Weapons ===

IS_MEDIUM_LASER = EquipmentType(
    internal_name="ISMediumLaser", name="Medium Laser", tonnage=1,
)

IS_LARGE_LASER = EquipmentType(
    internal_name="ISLargeLaser", name="Large Laser", tonnage=5, crit_slots=2,
)

IS_PPC = EquipmentType(
    internal_name="ISPPC", name="PPC", tonnage=7, crit_slots=3,
)

CL_ER_SMALL_LASER = EquipmentType(
    internal_name="CLERSmallLaser", name="ER Small Laser", tonnage=0.5,
)

CL_ER_MEDIUM_LASER = EquipmentType(
    internal_name="CLERMediumLaser", name="ER Medium Laser", tonnage=1,
)

CL_ER_LARGE_LASER = EquipmentType(
    internal_name="CLERLargeLaser", name="ER Large Laser", tonnage=4,
)

CL_MEDIUM_PULSE_LASER = EquipmentType(
    internal_name="CLMediumPulseLaser", name="Medium Pulse Laser", tonnage=2,
)

CL_LARGE_PULSE_LASER = EquipmentType(
    internal_name="CLLargePulseLaser", name="Large Pulse Laser", tonnage=6, crit_slots=2,
)

CL_ER_PPC = EquipmentType(
    internal_name="CLERPPC", name="ER PPC", tonnage=6, crit_slots=2,
)

CL_FLAMER = EquipmentType(
    internal_name="CLFlamer", name="Flamer", tonnage=0.5,
)

# === Ballistic Weapons ===

IS_AC10 = EquipmentType(
    internal_name="ISAC10", name="AC/10", tonnage=12, crit_slots=7,
)

CL_ULTRA_AC5 = EquipmentType(
    internal_name="CLUltraAC5", name="Ultra AC/5", tonnage=7, crit_slots=3,
)

CL_LB_10X_AC = EquipmentType(
    internal_name="CLLBXAC10", name="LB 10-X AC", tonnage=10, crit_slots=5,
)

CL_GAUSS_RIFLE = EquipmentType(
    internal_name="CLGaussRifle", name="Gauss Rifle", tonnage=12, crit_slots=6,
)

CL_MACHINE_GUN = EquipmentType(
    internal_name="CLMG", name="Machine Gun", tonnage=0.25,
)

# === Missile Weapons ===

IS_SRM6 = EquipmentType(
    internal_name="ISSRM6", name="SRM 6", tonnage=3, crit_slots=2,
)

CL_LRM20 = EquipmentType(
    internal_name="CLLRM20", name="LRM 20", tonnage=5, crit_slots=4,
)

CL_SRM6 = EquipmentType(
    internal_name="CLSRM6", name="SRM 6", tonnage=1.5,
)

CL_STREAK_SRM6 = EquipmentType(
    internal_name="CLStreakSRM6", name="Streak SRM 6", tonnage=3, crit_slots=2,
)

# === Ammunition ===

CL_LRM20_AMMO = EquipmentType(
    internal_name="CLLRM20 Ammo", name="LRM 20 Ammo", tonnage=1,
)

CL_SRM6_AMMO = EquipmentType(
    internal_name="CLSRM6 Ammo", name="SRM 6 Ammo", tonnage=1,
)

CL_STREAK_SRM6_AMMO = EquipmentType(
    internal_name="CLStreakSRM6 Ammo", name="Streak SRM 6 Ammo", tonnage=1,
)

CL_ULTRA_AC5_AMMO = EquipmentType(
    internal_name="CLUltraAC5 Ammo", name="Ultra AC/5 Ammo", tonnage=1,
)

CL_LB_10X_AMMO = EquipmentType(
    internal_name="CLLBXAC10 Ammo", name="LB 10-X Cluster Ammo", tonnage=1,
)

CL_GAUSS_AMMO = EquipmentType(
    internal_name="CLGauss Ammo", name="Gauss Ammo", tonnage=1,
)

CL_MG_AMMO = EquipmentType(
    internal_name="CLMG Ammo", name="Machine Gun Ammo", tonnage=1,
)

IS_AC10_AMMO = EquipmentType(
    internal_name="ISAC10 Ammo", name="AC/10 Ammo", tonnage=1,
)

IS_SRM6_AMMO = EquipmentType(
    internal_name="ISSRM6 Ammo", name="SRM 6 Ammo", tonnage=1,
)

# === Miscellaneous ===

HEAT_SINK = EquipmentType(
    internal_name="Heat Sink", name="Heat Sink", tonnage=1,
)

CL_DOUBLE_HEAT_SINK = EquipmentType(
    internal_name="CLDoubleHeatSink", name="Double Heat Sink", tonnage=1, crit_slots=2,
)

IS_DOUBLE_HEAT_SINK = EquipmentType(
    internal_name="ISDoubleHeatSink", name="Double Heat Sink", tonnage=1, crit_slots=3,
)

JUMP_JET = EquipmentType(
    internal_name="JumpJet", name="Jump Jet", tonnage=0.5,
)

CL_CASE = EquipmentType(
    internal_name="CLCASE", name="CASE", tonnage=0,
)

IS_CASE = EquipmentType(
    internal_name="ISCASE", name="CASE", tonnage=0.5,
)

CL_TARGETING_COMPUTER = EquipmentType(
    internal_name="CLTargeting Computer", name="Targeting Computer", tonnage=1,
)

CL_ACTIVE_PROBE = EquipmentType(
    internal_name="CLActiveProbe", name="Active Probe", tonnage=1,
)

CL_ECM_SUITE = EquipmentType(
    internal_name="CLECMSuite", name="ECM Suite", tonnage=1,
)

# Structure and armor are spread through the chassis and can never be pod-mounted
CL_ENDO_STEEL = EquipmentType(
    internal_name="CLEndoSteel", name="Endo Steel", crit_slots=1, omni_fixed_only=True,
)

IS_ENDO_STEEL = EquipmentType(
    internal_name="ISEndoSteel", name="Endo Steel", crit_slots=1, omni_fixed_only=True,
)

CL_FERRO_FIBROUS = EquipmentType(
    internal_name="CLFerroFibrous", name="Ferro-Fibrous", crit_slots=1, omni_fixed_only=True,
)

IS_FERRO_FIBROUS = EquipmentType(
    internal_name="ISFerroFibrous", name="Ferro-Fibrous", crit_slots=1, omni_fixed_only=True,
)


# === Equipment Database ===

EQUIPMENT_DB: dict[str, EquipmentType] = {
    eq.internal_name: eq for eq in [
        # Energy
        IS_MEDIUM_LASER, IS_LARGE_LASER, IS_PPC,
        CL_ER_SMALL_LASER, CL_ER_MEDIUM_LASER, CL_ER_LARGE_LASER,
        CL_MEDIUM_PULSE_LASER, CL_LARGE_PULSE_LASER, CL_ER_PPC, CL_FLAMER,
        # Ballistic
        IS_AC10, CL_ULTRA_AC5, CL_LB_10X_AC, CL_GAUSS_RIFLE, CL_MACHINE_GUN,
        # Missile
        IS_SRM6, CL_LRM20, CL_SRM6, CL_STREAK_SRM6,
        # Ammo
        CL_LRM20_AMMO, CL_SRM6_AMMO, CL_STREAK_SRM6_AMMO, CL_ULTRA_AC5_AMMO,
        CL_LB_10X_AMMO, CL_GAUSS_AMMO, CL_MG_AMMO, IS_AC10_AMMO, IS_SRM6_AMMO,
        # Misc
        HEAT_SINK, CL_DOUBLE_HEAT_SINK, IS_DOUBLE_HEAT_SINK, JUMP_JET,
        CL_CASE, IS_CASE, CL_TARGETING_COMPUTER, CL_ACTIVE_PROBE, CL_ECM_SUITE,
        CL_ENDO_STEEL, IS_ENDO_STEEL, CL_FERRO_FIBROUS, IS_FERRO_FIBROUS,
    ]
}


def get_equipment(internal_name: str) -> EquipmentType:
    """Look up an equipment type by internal name. Raises KeyError if unknown."""
    return EQUIPMENT_DB[internal_name]


def same_type(a: EquipmentType, b: EquipmentType) -> bool:
    """True if both refer to the same catalog entry."""
    return a.internal_name == b.internal_name
