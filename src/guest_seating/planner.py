"""
Seating plan generation.

One deterministic plan per call: hard locks first, then first-fit by table
id, then (optionally) seats at each table re-ordered so adjacency chains sit
side by side. Constraint validation is separate; run
:func:`guest_seating.conflicts.detect_constraint_conflicts` first to warn
about inputs that cannot be satisfied.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence

from .adjacency import order_by_adjacency_endpoints
from .allocator import CapacityTracker, allocate
from .conflicts import detect_constraint_conflicts
from .models import (
    AdjacencyMap,
    Conflict,
    ConstraintMap,
    GuestUnit,
    PlanTable,
    SeatingPlan,
    Table,
)

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when there is no guest or no table to plan with."""


def generate_seating_plan(
    guests: Sequence[GuestUnit],
    tables: Sequence[Table],
    constraints: "ConstraintMap | Mapping[str, Mapping[str, object]] | None" = None,
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None" = None,
    assignments: Optional[Mapping[str, "str | Iterable[str]"]] = None,
    *,
    resolve_table_names: bool = True,
    strict_locks: bool = False,
    order_by_adjacency: bool = True,
) -> SeatingPlan:
    """Build one seating plan.

    ``constraints`` are accepted for interface parity with the detector; the
    greedy pass does not consult them. Raises :class:`EmptyInputError` when
    ``guests`` or ``tables`` is empty.
    """
    if not guests:
        raise EmptyInputError("No guests to seat")
    if not tables:
        raise EmptyInputError("No tables to seat guests at")

    seated = allocate(
        guests,
        tables,
        assignments,
        tracker=CapacityTracker(tables),
        resolve_table_names=resolve_table_names,
        strict_locks=strict_locks,
    )

    adj = AdjacencyMap.coerce(adjacency)
    by_id = {t.id: t for t in tables}
    plan = SeatingPlan()
    for table_id, units in seated.items():
        if order_by_adjacency and len(adj):
            units = order_by_adjacency_endpoints(units, adj)
        table = by_id[table_id]
        plan.tables.append(PlanTable(
            table_id=table_id,
            capacity=table.capacity,
            name=table.name,
            seated_units=list(units),
        ))

    unplaced = plan.unplaced(guests)
    logger.debug(
        "Seated %d of %d guest units across %d tables",
        len(guests) - len(unplaced), len(guests), len(plan.tables),
    )
    return plan


class SeatingPlanner:
    """Holds one input snapshot and produces plans and conflicts from it."""

    def __init__(
        self,
        resolve_table_names: bool = True,
        strict_locks: bool = False,
        order_by_adjacency: bool = True,
        check_adjacency: bool = True,
    ) -> None:
        # Inputs
        self.guests: List[GuestUnit] = []
        self.tables: List[Table] = []
        self.constraints = ConstraintMap()
        self.adjacency = AdjacencyMap()
        self.assignments: dict = {}
        # Options
        self.resolve_table_names = resolve_table_names
        self.strict_locks = strict_locks
        self.order_by_adjacency = order_by_adjacency
        self.check_adjacency = check_adjacency

    def build(
        self,
        guests: Sequence[GuestUnit],
        tables: Sequence[Table],
        constraints: "ConstraintMap | Mapping[str, Mapping[str, object]] | None" = None,
        adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None" = None,
        assignments: Optional[Mapping[str, "str | Iterable[str]"]] = None,
    ) -> None:
        """Store model data."""
        self.guests = list(guests)
        self.tables = sorted(tables, key=lambda t: t.id)
        self.constraints = ConstraintMap.coerce(constraints)
        self.adjacency = AdjacencyMap.coerce(adjacency)
        self.assignments = dict(assignments or {})

    def conflicts(self) -> List[Conflict]:
        return detect_constraint_conflicts(
            self.guests,
            self.constraints,
            self.tables,
            check_adjacency=self.check_adjacency,
            adjacency=self.adjacency,
            assignments=self.assignments,
        )

    def solve(self) -> SeatingPlan:
        return generate_seating_plan(
            self.guests,
            self.tables,
            self.constraints,
            self.adjacency,
            self.assignments,
            resolve_table_names=self.resolve_table_names,
            strict_locks=self.strict_locks,
            order_by_adjacency=self.order_by_adjacency,
        )
