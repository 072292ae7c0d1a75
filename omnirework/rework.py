"""Batch passes over the unit catalog: fix equipment from base chassis, reset pods, list chassis.

Each unit is loaded fresh, processed on its own and (optionally) written
back straight away. A unit that fails to load or save is logged, recorded
in the run summary and skipped; the batch always continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from typing import Callable, Optional

from .catalog import UnitCatalog, UnitSummary
from .matcher import MISS_EXEMPT_TYPES, Miss, ReconcileResult, reconcile, set_all_pod
from .propagate import propagate
from .resolver import is_base_model, resolve_base
from .unit import Unit
from .unitfile import SourceRef, UnitLoadingError, UnitSaveError, load_unit

logger = logging.getLogger(__name__)

Loader = Callable[[SourceRef], Unit]
Writer = Callable[[Unit], None]

DEFAULT_CHASSIS_FILE = "chassis.txt"


@dataclass
class RunSummary:
    """Accumulated outcome of one batch pass."""
    scanned: int = 0            # units considered (base chassis records excluded)
    reconciled: int = 0
    skipped_base: int = 0
    skipped_not_omni: int = 0
    pod_changes: int = 0        # mounts switched to pod-mounted (reset pass only)
    saved: int = 0
    unresolved: list[str] = field(default_factory=list)
    load_failures: list[tuple[str, str]] = field(default_factory=list)
    save_failures: list[tuple[str, str]] = field(default_factory=list)
    misses: list[Miss] = field(default_factory=list)

    @property
    def total_misses(self) -> int:
        return len(self.misses)

    def merge(self, result: ReconcileResult) -> None:
        self.reconciled += 1
        self.misses.extend(result.misses)


def _load(ms: UnitSummary, loader: Loader, summary: RunSummary) -> Optional[Unit]:
    try:
        return loader(ms.source)
    except UnitLoadingError as e:
        logger.warning("Failed to load %s: %s", ms.name, e)
        summary.load_failures.append((ms.name, str(e)))
        return None


def _save(unit: Unit, writer: Writer, summary: RunSummary) -> None:
    try:
        writer(unit)
    except UnitSaveError as e:
        logger.warning("Failed to save %s: %s", unit.name, e)
        summary.save_failures.append((unit.name, str(e)))
        return
    summary.saved += 1


def run_reconciliation(catalog: UnitCatalog, loader: Loader = load_unit,
                       writer: Optional[Writer] = None,
                       exempt: frozenset[str] = MISS_EXEMPT_TYPES) -> RunSummary:
    """Fix every omni variant's equipment against its base chassis.

    With a ``writer``, each variant is saved right after its own
    reconciliation. Without one nothing is written.
    """
    summary = RunSummary()

    for ms in catalog.all_units():
        if is_base_model(ms.model):
            summary.skipped_base += 1
            continue
        summary.scanned += 1

        variant = _load(ms, loader, summary)
        if variant is None:
            continue
        if not variant.omni:
            summary.skipped_not_omni += 1
            continue

        try:
            base = resolve_base(variant, catalog, loader)
        except UnitLoadingError as e:
            logger.warning("Failed to load base chassis of %s: %s", variant.name, e)
            summary.load_failures.append((variant.name, f"base chassis: {e}"))
            continue
        if base is None:
            summary.unresolved.append(variant.name)
            continue

        result = reconcile(base, variant, exempt=exempt)
        propagate(base, variant)
        summary.merge(result)
        logger.info("Reconciled %s against %s (%d fixed, %d missing)",
                    variant.name, base.name, len(result.fixed), result.miss_count)

        if writer is not None:
            _save(variant, writer, summary)

    logger.info("Total failures to find equipment: %d", summary.total_misses)
    return summary


def reset_all_pod(catalog: UnitCatalog, writer: Writer,
                  loader: Loader = load_unit) -> RunSummary:
    """Mark all eligible equipment on every omni unit pod-mounted and write it back.

    Base chassis records are included.
    """
    summary = RunSummary()

    for ms in catalog.all_units():
        summary.scanned += 1
        unit = _load(ms, loader, summary)
        if unit is None:
            continue
        if not unit.omni:
            summary.skipped_not_omni += 1
            continue

        summary.pod_changes += set_all_pod(unit)
        _save(unit, writer, summary)

    return summary


def collect_omni_chassis(catalog: UnitCatalog,
                         loader: Loader = load_unit) -> tuple[list[str], RunSummary]:
    """Sorted, de-duplicated chassis names of all omni units.

    The summary counts scanned and non-omni units and records load failures.
    """
    summary = RunSummary()
    chassis: set[str] = set()
    for ms in catalog.all_units():
        summary.scanned += 1
        unit = _load(ms, loader, summary)
        if unit is None:
            continue
        if not unit.omni:
            summary.skipped_not_omni += 1
            continue
        chassis.add(ms.chassis)
    return sorted(chassis), summary


def write_chassis_list(chassis: list[str], filepath: str | Path = DEFAULT_CHASSIS_FILE) -> None:
    """Write chassis names one per line, tab-indented."""
    with open(filepath, "w") as f:
        for name in chassis:
            f.write(f"\t{name}\n")


def format_summary(summary: RunSummary) -> str:
    """Format a reconciliation summary for terminal output."""
    lines: list[str] = []
    lines.append(f"{'='*60}")
    lines.append(f"  Units scanned:      {summary.scanned:>6d}")
    lines.append(f"  Reconciled:         {summary.reconciled:>6d}")
    lines.append(f"  Not omni:           {summary.skipped_not_omni:>6d}")
    lines.append(f"  No base chassis:    {len(summary.unresolved):>6d}")
    lines.append(f"  Load failures:      {len(summary.load_failures):>6d}")
    if summary.saved or summary.save_failures:
        lines.append(f"  Saved:              {summary.saved:>6d}")
        lines.append(f"  Save failures:      {len(summary.save_failures):>6d}")
    lines.append(f"  Equipment misses:   {summary.total_misses:>6d}")
    lines.append(f"{'='*60}")

    if summary.misses:
        lines.append("")
        lines.append(f"{'Location':16s} {'Equipment':24s} Variant")
        lines.append("-" * 60)
        for miss in summary.misses:
            lines.append(f"{miss.location_name:16s} {miss.equipment_name:24s} {miss.variant_name}")

    if summary.unresolved:
        lines.append("")
        lines.append("No usable base chassis:")
        for name in summary.unresolved:
            lines.append(f"  {name}")

    if summary.load_failures:
        lines.append("")
        lines.append("Load failures:")
        for name, reason in summary.load_failures:
            lines.append(f"  {name}: {reason}")

    if summary.save_failures:
        lines.append("")
        lines.append("Save failures:")
        for name, reason in summary.save_failures:
            lines.append(f"  {name}: {reason}")

    return "\n".join(lines)
