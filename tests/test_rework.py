"""Tests for base chassis resolution, equipment matching, propagation and the batch driver."""

import logging
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from omnirework.catalog import UnitCatalog, UnitSummary
from omnirework.equipment import (
    CL_CASE, CL_DOUBLE_HEAT_SINK, CL_ENDO_STEEL, CL_ER_LARGE_LASER,
    CL_ER_MEDIUM_LASER, CL_LRM20, IS_MEDIUM_LASER, JUMP_JET,
)
from omnirework.matcher import MISS_EXEMPT_TYPES, reconcile, set_all_pod
from omnirework.propagate import PROPAGATION_RULES, propagate
from omnirework.resolver import base_chassis_names, find_base_chassis, resolve_base
from omnirework.rework import (
    collect_omni_chassis, format_summary, reset_all_pod, run_reconciliation,
    write_chassis_list,
)
from omnirework.tables import LOC_NONE
from omnirework.unit import CLAN, INNER_SPHERE, Mounted, Unit, UnitKind
from omnirework.unitfile import SourceRef, UnitLoadingError, UnitSaveError


DATA_DIR = Path(__file__).parent.parent / "data" / "units"


# === Helpers ===

def make_unit(chassis="Mad Cat", model="Prime", kind=UnitKind.MECH, tonnage=75,
              tech_base=CLAN, omni=True, equipment=None, **kwargs) -> Unit:
    return Unit(chassis=chassis, model=model, kind=kind, tonnage=tonnage,
                tech_base=tech_base, omni=omni, equipment=equipment or [], **kwargs)


def make_base(**kwargs) -> Unit:
    kwargs.setdefault("model", "<base>")
    return make_unit(**kwargs)


def summary_for(unit: Unit) -> UnitSummary:
    return UnitSummary(chassis=unit.chassis, model=unit.model, tonnage=unit.tonnage,
                       tech_base=unit.tech_base, kind=unit.kind.value,
                       source=SourceRef(Path(f"{unit.name}.json")))


class MemoryStore:
    """Catalog + loader + writer over units held in memory."""

    def __init__(self, units, broken=()):
        self.units = {u.name: u for u in units}
        self.broken = set(broken)
        self.saved: list[Unit] = []
        summaries = [summary_for(u) for u in units]
        summaries += [
            UnitSummary(chassis=name.rsplit(" ", 1)[0], model=name.rsplit(" ", 1)[1],
                        tonnage=75, tech_base=CLAN, kind="mech",
                        source=SourceRef(Path(f"{name}.json")))
            for name in broken
        ]
        self.catalog = UnitCatalog(summaries)

    def load(self, source: SourceRef) -> Unit:
        name = source.path.stem
        if name in self.broken:
            raise UnitLoadingError(f"cannot read {source.path}")
        # fresh copy per load, like reading the file again
        return self.units[name].copy()

    def save(self, unit: Unit) -> None:
        self.saved.append(unit)


# === Equipment Matcher Tests ===

def test_first_pod_mounted_match_is_fixed():
    """Two identical pod items in one location: only the first in stored order becomes fixed."""
    base = make_base(equipment=[Mounted(IS_MEDIUM_LASER, "LA", pod_mounted=False)])
    a = Mounted(IS_MEDIUM_LASER, "LA", pod_mounted=True)
    b = Mounted(IS_MEDIUM_LASER, "LA", pod_mounted=True)
    variant = make_unit(equipment=[a, b])

    result = reconcile(base, variant)

    assert result.miss_count == 0
    assert a.pod_mounted is False
    assert b.pod_mounted is True
    assert result.fixed == [a]
    assert result.fixed[0] is a


def test_missing_equipment_is_counted(caplog):
    """Base fixed item with no variant counterpart is a miss with a diagnostic."""
    base = make_base(equipment=[Mounted(JUMP_JET, "CT")])
    variant = make_unit(equipment=[Mounted(JUMP_JET, "LT", pod_mounted=True)])

    with caplog.at_level(logging.WARNING):
        result = reconcile(base, variant)

    assert result.miss_count == 1
    miss = result.misses[0]
    assert miss.equipment_name == "Jump Jet"
    assert miss.location_name == "Center Torso"
    assert miss.variant_name == "Mad Cat Prime"
    assert "Jump Jet" in caplog.text
    assert "Center Torso" in caplog.text
    assert "Mad Cat Prime" in caplog.text
    # the item in the wrong location is left alone
    assert variant.equipment[0].pod_mounted is True


def test_match_requires_same_type():
    base = make_base(equipment=[Mounted(CL_ER_LARGE_LASER, "RA")])
    variant = make_unit(equipment=[Mounted(CL_ER_MEDIUM_LASER, "RA", pod_mounted=True)])
    result = reconcile(base, variant)
    assert result.miss_count == 1
    assert variant.equipment[0].pod_mounted is True


def test_match_requires_pod_mounted_variant_item():
    """An already fixed variant item does not satisfy the base item."""
    base = make_base(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT")])
    variant = make_unit(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT", pod_mounted=False)])
    result = reconcile(base, variant)
    assert result.miss_count == 1


def test_ineligible_base_items_are_ignored():
    """Unlocated, fixed-only and pod-mounted base items never touch the variant."""
    base = make_base(equipment=[
        Mounted(CL_LRM20, LOC_NONE),
        Mounted(CL_ENDO_STEEL, "LT"),
        Mounted(CL_ER_LARGE_LASER, "LA", pod_mounted=True),
    ])
    variant = make_unit(equipment=[
        Mounted(CL_LRM20, LOC_NONE, pod_mounted=True),
        Mounted(CL_ENDO_STEEL, "LT", pod_mounted=True),
        Mounted(CL_ER_LARGE_LASER, "LA", pod_mounted=True),
    ])

    result = reconcile(base, variant)

    assert result.miss_count == 0
    assert result.fixed == []
    assert all(m.pod_mounted for m in variant.equipment)


def test_exempt_equipment_not_counted():
    assert "CLCASE" in MISS_EXEMPT_TYPES
    base = make_base(equipment=[Mounted(CL_CASE, "LT"), Mounted(JUMP_JET, "CT")])
    variant = make_unit(equipment=[Mounted(JUMP_JET, "CT", pod_mounted=True)])
    result = reconcile(base, variant)
    assert result.miss_count == 0


def test_custom_exemptions():
    base = make_base(equipment=[Mounted(JUMP_JET, "CT")])
    variant = make_unit()
    result = reconcile(base, variant, exempt=MISS_EXEMPT_TYPES | {"JumpJet"})
    assert result.miss_count == 0


def test_all_fixed_items_matched():
    """Every base fixed item has one counterpart: no misses, all counterparts fixed."""
    base = make_base(equipment=[
        Mounted(CL_DOUBLE_HEAT_SINK, "CT"),
        Mounted(CL_DOUBLE_HEAT_SINK, "LT"),
        Mounted(JUMP_JET, "RL"),
    ])
    counterparts = [
        Mounted(JUMP_JET, "RL", pod_mounted=True),
        Mounted(CL_DOUBLE_HEAT_SINK, "LT", pod_mounted=True),
        Mounted(CL_DOUBLE_HEAT_SINK, "CT", pod_mounted=True),
    ]
    extra = Mounted(CL_ER_LARGE_LASER, "LA", pod_mounted=True)
    variant = make_unit(equipment=counterparts + [extra])

    result = reconcile(base, variant)

    assert result.miss_count == 0
    assert all(not m.pod_mounted for m in counterparts)
    assert extra.pod_mounted is True


def test_second_reconcile_changes_nothing():
    base = make_base(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT"), Mounted(CL_CASE, "RT")])
    variant = make_unit(equipment=[
        Mounted(CL_DOUBLE_HEAT_SINK, "CT", pod_mounted=True),
        Mounted(CL_ER_LARGE_LASER, "CT", pod_mounted=True),
    ])

    first = reconcile(base, variant)
    states = [m.pod_mounted for m in variant.equipment]
    second = reconcile(base, variant)

    assert first.miss_count == 0
    assert states == [False, True]
    assert second.fixed == []
    assert [m.pod_mounted for m in variant.equipment] == states
    # the heat sink fixed by the first run is no longer pod-mounted, so it is reported
    assert second.miss_count == 1
    assert second.misses[0].equipment_name == "Double Heat Sink"


def test_reconcile_never_mutates_base():
    base = make_base(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT"), Mounted(JUMP_JET, "CT")])
    before = base.copy()
    variant = make_unit(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT", pod_mounted=True)])
    reconcile(base, variant)
    assert base == before
    assert len(variant.equipment) == 1


def test_set_all_pod():
    unit = make_unit(equipment=[
        Mounted(CL_ENDO_STEEL, "LT"),
        Mounted(CL_LRM20, LOC_NONE),
        Mounted(CL_DOUBLE_HEAT_SINK, "CT"),
        Mounted(CL_ER_LARGE_LASER, "LA", pod_mounted=True),
    ])
    changed = set_all_pod(unit)
    assert changed == 1
    assert [m.pod_mounted for m in unit.equipment] == [False, False, True, True]


# === Chassis Resolver Tests ===

def test_base_chassis_names():
    variant = make_unit(chassis="Mad Cat", tech_base=CLAN)
    assert base_chassis_names(variant) == ["Mad Cat <base>", "Mad Cat <base>Clan"]
    variant = make_unit(chassis="Black Hawk-KU", tech_base=INNER_SPHERE)
    assert base_chassis_names(variant) == ["Black Hawk-KU <base>", "Black Hawk-KU <base>IS"]


def test_find_base_plain_name():
    base = make_base()
    store = MemoryStore([base])
    ms = find_base_chassis(make_unit(), store.catalog)
    assert ms is not None
    assert ms.name == "Mad Cat <base>"


def test_find_base_with_tech_base_suffix():
    base = make_base(chassis="Hellbringer", model="<base>Clan", tonnage=65)
    store = MemoryStore([base])
    variant = make_unit(chassis="Hellbringer", tonnage=65)
    ms = find_base_chassis(variant, store.catalog)
    assert ms is not None
    assert ms.model == "<base>Clan"


def test_find_base_missing(caplog):
    store = MemoryStore([])
    with caplog.at_level(logging.WARNING):
        assert find_base_chassis(make_unit(), store.catalog) is None
    assert "Mad Cat Prime" in caplog.text


def test_tonnage_mismatch_yields_none(caplog):
    store = MemoryStore([make_base(tonnage=70)])
    with caplog.at_level(logging.WARNING):
        assert find_base_chassis(make_unit(tonnage=75), store.catalog) is None
    assert "tonnage" in caplog.text


def test_tech_base_mismatch_yields_none(caplog):
    store = MemoryStore([make_base(tech_base=INNER_SPHERE)])
    with caplog.at_level(logging.WARNING):
        assert find_base_chassis(make_unit(tech_base=CLAN), store.catalog) is None
    assert "tech base" in caplog.text


def test_resolve_base_loads_unit():
    base = make_base(heat_sinks=15)
    store = MemoryStore([base])
    loaded = resolve_base(make_unit(), store.catalog, store.load)
    assert loaded == base
    assert loaded is not base


# === Attribute Propagator Tests ===

def test_every_kind_has_a_rule():
    assert set(PROPAGATION_RULES) == set(UnitKind)


def test_mech_heat_sinks_propagate():
    base = make_base(heat_sinks=15)
    variant = make_unit(heat_sinks=17)
    assert propagate(base, variant) is True
    assert variant.base_chassis_heat_sinks == 15
    assert variant.heat_sinks == 17


def test_aero_heat_sinks_propagate():
    base = make_base(chassis="Sulla", kind=UnitKind.AERO, tonnage=30, heat_sinks=10)
    variant = make_unit(chassis="Sulla", kind=UnitKind.AERO, tonnage=30, heat_sinks=14)
    assert propagate(base, variant) is True
    assert variant.base_chassis_heat_sinks == 10


def test_tank_troop_space_excess_added():
    base = make_base(chassis="Epona", kind=UnitKind.TANK, tonnage=45,
                     base_chassis_turret_weight=1.5, base_chassis_turret2_weight=0.5)
    base.add_transporter(4)
    variant = make_unit(chassis="Epona", kind=UnitKind.TANK, tonnage=45)
    variant.add_transporter(6, pod_mounted=True)

    assert propagate(base, variant) is True

    assert len(variant.transporters) == 2
    added = variant.transporters[-1]
    assert added.capacity == 2
    assert added.pod_mounted is False
    assert variant.base_chassis_turret_weight == 1.5
    assert variant.base_chassis_turret2_weight == 0.5


def test_tank_no_excess_adds_nothing():
    base = make_base(chassis="Epona", kind=UnitKind.TANK, tonnage=45)
    base.add_transporter(4)
    variant = make_unit(chassis="Epona", kind=UnitKind.TANK, tonnage=45)
    variant.add_transporter(4, pod_mounted=True)
    propagate(base, variant)
    assert len(variant.transporters) == 1


def test_mismatched_kinds_apply_no_rule():
    base = make_base(kind=UnitKind.TANK)
    variant = make_unit(kind=UnitKind.MECH, heat_sinks=12)
    assert propagate(base, variant) is False
    assert variant.base_chassis_heat_sinks is None


# === Batch Driver Tests ===

def _mad_cat_family():
    base = make_base(heat_sinks=15, equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT")])
    prime = make_unit(equipment=[Mounted(CL_DOUBLE_HEAT_SINK, "CT", pod_mounted=True)])
    a = make_unit(model="A", equipment=[Mounted(CL_ER_LARGE_LASER, "LA", pod_mounted=True)])
    return base, prime, a


def test_run_reconciliation_counts():
    base, prime, a = _mad_cat_family()
    atlas = make_unit(chassis="Atlas", model="AS7-D", tonnage=100,
                      tech_base=INNER_SPHERE, omni=False)
    orphan = make_unit(chassis="Dasher", tonnage=20)
    store = MemoryStore([base, prime, a, atlas, orphan])

    summary = run_reconciliation(store.catalog, store.load)

    assert summary.skipped_base == 1
    assert summary.scanned == 4
    assert summary.reconciled == 2
    assert summary.skipped_not_omni == 1
    assert summary.unresolved == ["Dasher Prime"]
    assert summary.total_misses == 1
    assert summary.misses[0].variant_name == "Mad Cat A"
    assert store.saved == []


def test_load_failure_is_skipped():
    base, prime, a = _mad_cat_family()
    store = MemoryStore([base, prime, a], broken=["Mad Cat B"])

    summary = run_reconciliation(store.catalog, store.load)

    assert summary.scanned == 3
    assert summary.reconciled == 2
    assert [name for name, _ in summary.load_failures] == ["Mad Cat B"]


def test_base_load_failure_is_skipped():
    _, prime, _ = _mad_cat_family()
    store = MemoryStore([prime], broken=["Mad Cat <base>"])
    summary = run_reconciliation(store.catalog, store.load)
    assert summary.reconciled == 0
    assert summary.load_failures[0][0] == "Mad Cat Prime"


def test_write_back_saves_reconciled_variants():
    base, prime, a = _mad_cat_family()
    store = MemoryStore([base, prime, a])

    summary = run_reconciliation(store.catalog, store.load, writer=store.save)

    assert summary.saved == 2
    assert [u.name for u in store.saved] == ["Mad Cat A", "Mad Cat Prime"]
    saved_prime = store.saved[1]
    assert saved_prime.equipment[0].pod_mounted is False
    assert saved_prime.base_chassis_heat_sinks == 15


def test_save_failure_does_not_stop_batch():
    base, prime, a = _mad_cat_family()
    store = MemoryStore([base, prime, a])

    def failing_writer(unit):
        if unit.model == "A":
            raise UnitSaveError("disk full")
        store.save(unit)

    summary = run_reconciliation(store.catalog, store.load, writer=failing_writer)

    assert summary.saved == 1
    assert summary.save_failures == [("Mad Cat A", "disk full")]


def test_reset_all_pod_writes_omni_units():
    base, prime, _ = _mad_cat_family()
    atlas = make_unit(chassis="Atlas", model="AS7-D", tonnage=100, omni=False,
                      equipment=[Mounted(IS_MEDIUM_LASER, "LA")])
    store = MemoryStore([base, prime, atlas])

    summary = reset_all_pod(store.catalog, store.save, store.load)

    assert summary.saved == 2
    assert summary.pod_changes == 1
    assert summary.skipped_not_omni == 1
    assert all(m.pod_mounted for u in store.saved for m in u.equipment)


def test_collect_and_write_chassis_list(tmp_path):
    base, prime, a = _mad_cat_family()
    other = make_unit(chassis="Dasher", tonnage=20)
    atlas = make_unit(chassis="Atlas", model="AS7-D", tonnage=100, omni=False)
    store = MemoryStore([base, prime, a, other, atlas])

    chassis, summary = collect_omni_chassis(store.catalog, store.load)
    assert chassis == ["Dasher", "Mad Cat"]
    assert summary.scanned == 5
    assert summary.skipped_not_omni == 1
    assert summary.load_failures == []


def test_collect_chassis_reports_load_failures(tmp_path):
    base, prime, _ = _mad_cat_family()
    store = MemoryStore([base, prime], broken=["Mad Cat B"])

    chassis, summary = collect_omni_chassis(store.catalog, store.load)

    assert chassis == ["Mad Cat"]
    assert [name for name, _ in summary.load_failures] == ["Mad Cat B"]

    out = tmp_path / "chassis.txt"
    write_chassis_list(chassis, out)
    assert out.read_text() == "\tDasher\n\tMad Cat\n"


def test_format_summary_lists_misses():
    base, prime, a = _mad_cat_family()
    store = MemoryStore([base, prime, a])
    text = format_summary(run_reconciliation(store.catalog, store.load))
    assert "Equipment misses:        1" in text
    assert "Center Torso" in text
    assert "Double Heat Sink" in text
    assert "Mad Cat A" in text


# === Sample Data Tests ===

def test_sample_data_reconciliation():
    catalog = UnitCatalog.from_directory(DATA_DIR)
    summary = run_reconciliation(catalog)

    assert summary.skipped_base == 4
    assert summary.scanned == 7
    assert summary.reconciled == 5
    assert summary.skipped_not_omni == 1
    assert summary.unresolved == ["Dasher Prime"]
    assert summary.load_failures == []
    assert summary.total_misses == 1
    miss = summary.misses[0]
    assert (miss.location_name, miss.equipment_name, miss.variant_name) == \
        ("Left Torso", "Double Heat Sink", "Mad Cat A")
