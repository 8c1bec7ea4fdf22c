"""Command line interface for guest seating."""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Sequence

from .adjacency import score_adjacency_neighbors
from .csv_loader import load_all
from .planner import EmptyInputError, SeatingPlanner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Event table seating")
    parser.add_argument("--guests", required=True, help="Path to guests.csv")
    parser.add_argument("--tables", required=True, help="Path to tables.csv")
    parser.add_argument("--constraints", help="Path to constraints.csv (must/cannot pairs).")
    parser.add_argument("--adjacency", help="Path to adjacency.csv (side-by-side pairs).")
    parser.add_argument("--assignments", help="Path to assignments.csv (guest to table tokens).")
    parser.add_argument("--no-table-names", action="store_true",
                        help="Only accept numeric table ids in assignments.")
    parser.add_argument("--strict-locks", action="store_true",
                        help="Leave locked guests unplaced when their tables are full.")
    parser.add_argument("--keep-order", action="store_true",
                        help="Do not re-order seats at a table to follow adjacency chains.")
    parser.add_argument("--skip-adjacency-check", action="store_true",
                        help="Leave adjacency out of the conflict report.")
    parser.add_argument("--check-only", action="store_true",
                        help="Report conflicts and exit without generating a plan.")
    parser.add_argument("--out-plan", type=Path,
                        help="Write plan CSV: table,seat,guest_id,guest.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``guest-seating`` and ``python -m guest_seating.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        guests, tables, constraints, adjacency, assignments = load_all(
            args.guests, args.tables, args.constraints, args.adjacency, args.assignments
        )
    except ValueError as e:
        print(f"Input validation error: {e}", file=sys.stderr)
        return 1

    model = SeatingPlanner(
        resolve_table_names=not args.no_table_names,
        strict_locks=args.strict_locks,
        order_by_adjacency=not args.keep_order,
        check_adjacency=not args.skip_adjacency_check,
    )
    model.build(guests, tables, constraints, adjacency, assignments)

    for c in model.conflicts():
        print(f"[WARNING] {c.kind.value} ({c.severity.value}): {c.description}")
    if args.check_only:
        return 0

    try:
        plan = model.solve()
    except EmptyInputError as e:
        print(f"No feasible plan: {e}", file=sys.stderr)
        return 1

    for table in plan.tables:
        label = table.name or f"Table {table.table_id}"
        members = ", ".join(
            u.name if u.party_size == 1 else f"{u.name} (party of {u.party_size})" for u in table.seated_units
        )
        print(f"{label} [{table.occupied}/{table.capacity}]: {members}")

    unplaced = plan.unplaced(guests)
    if unplaced:
        print("[REPORT] unplaced: " + ", ".join(g.name for g in unplaced))
    print(f"[REPORT] seated {len(guests) - len(unplaced)}/{len(guests)} "
          f"adjacent_pairs={score_adjacency_neighbors(plan, adjacency)}/{len(adjacency)}")

    if args.out_plan:
        args.out_plan.parent.mkdir(parents=True, exist_ok=True)
        with args.out_plan.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["table", "seat", "guest_id", "guest"])
            for table in plan.tables:
                for i, seat in enumerate(table.seats, start=1):
                    w.writerow([table.table_id, i, seat.guest_id, seat.name])
    return 0 if not unplaced else 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
