"""CLI entry point for the omni equipment rework."""

import argparse
import logging
import sys
import time
from pathlib import Path

from omnirework.catalog import CatalogError, UnitCatalog
from omnirework.matcher import MISS_EXEMPT_TYPES
from omnirework.rework import (
    DEFAULT_CHASSIS_FILE, collect_omni_chassis, format_summary,
    reset_all_pod, run_reconciliation, write_chassis_list,
)
from omnirework.unitfile import save_unit

DEFAULT_DATA_DIR = "data/units"


def configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Set fixed vs pod-mounted equipment on omni units from their base chassis")
    parser.add_argument("--data", type=str, default=DEFAULT_DATA_DIR,
                        help=f"Directory of unit files (default: {DEFAULT_DATA_DIR})")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--fix-from-base", action="store_true",
                      help="Fix variant equipment from the base chassis (default mode)")
    mode.add_argument("--reset-pods", action="store_true",
                      help="Mark all eligible equipment on omni units pod-mounted and save")
    mode.add_argument("--list-chassis", action="store_true",
                      help="Write the sorted list of omni chassis names")
    parser.add_argument("--write", action="store_true",
                        help="Save reconciled variants back to their files")
    parser.add_argument("--output", type=str, default=DEFAULT_CHASSIS_FILE,
                        help=f"Output file for --list-chassis (default: {DEFAULT_CHASSIS_FILE})")
    parser.add_argument("--exempt", action="append", default=[], metavar="INTERNAL_NAME",
                        help="Equipment not counted as missing (repeatable, "
                             f"always includes {', '.join(sorted(MISS_EXEMPT_TYPES))})")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    args = parser.parse_args(argv)

    configure_logging(args.verbose, args.quiet)

    data_path = Path(args.data)
    if not data_path.is_absolute():
        data_path = Path.cwd() / data_path

    try:
        catalog = UnitCatalog.from_directory(data_path)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    start = time.time()

    if args.list_chassis:
        chassis, summary = collect_omni_chassis(catalog)
        write_chassis_list(chassis, args.output)
        print(f"Wrote {len(chassis)} omni chassis to {args.output}")
        if summary.load_failures:
            print(f"{len(summary.load_failures)} units failed to load:")
            for name, reason in summary.load_failures:
                print(f"  {name}: {reason}")
        return 0

    if args.reset_pods:
        summary = reset_all_pod(catalog, writer=save_unit)
        print(f"\nReset {summary.pod_changes} mounts to pod-mounted "
              f"on {summary.saved} omni units")
        if summary.load_failures or summary.save_failures:
            print(format_summary(summary))
        return 0

    exempt = MISS_EXEMPT_TYPES | frozenset(args.exempt)
    writer = save_unit if args.write else None
    summary = run_reconciliation(catalog, writer=writer, exempt=exempt)
    elapsed = time.time() - start

    print(f"\nOmni rework over {len(catalog)} catalog entries"
          f"{' (writing changes)' if args.write else ''}")
    print(format_summary(summary))
    print(f"\nCompleted in {elapsed:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
