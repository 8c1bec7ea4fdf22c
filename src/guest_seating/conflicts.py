"""
Read-only validation of seating constraints.

Every check collects all of its findings; nothing here raises on bad
constraints or mutates its inputs. Conflicts are advisory: callers usually
show them as warnings before generating a plan.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .adjacency import detect_adjacency_conflicts
from .assignments import resolve_assignments
from .models import (
    AdjacencyMap,
    Conflict,
    ConflictKind,
    ConstraintMap,
    ConstraintValue,
    GuestUnit,
    Severity,
    Table,
)
from .union_find import UnionFind

logger = logging.getLogger(__name__)


def find_must_groups(guests: Sequence[GuestUnit], constraints: ConstraintMap) -> List[List[str]]:
    """Guests chained together by must edges, only groups with a real edge.

    Pairs naming a guest outside ``guests`` are ignored.
    """
    present = {g.id for g in guests}
    uf = UnionFind()
    for g in guests:
        uf.add(g.id)
    linked: Set[str] = set()
    for a, b in constraints.pairs(ConstraintValue.MUST):
        if a not in present or b not in present:
            continue
        uf.union(a, b)
        linked.update((a, b))
    return [group for group in uf.groups() if any(m in linked for m in group)]


def _group_names(group: Iterable[str], by_id: Mapping[str, GuestUnit]) -> str:
    return ", ".join(by_id[g].name if g in by_id else g for g in group)


def detect_must_group_conflicts(
    guests: Sequence[GuestUnit],
    tables: Sequence[Table],
    constraints: ConstraintMap,
    assignments: Optional[Mapping[str, "str | Iterable[str]"]] = None,
) -> List[Conflict]:
    """Must groups larger than the largest table, or than every locked table."""
    conflicts: List[Conflict] = []
    if not guests or not tables:
        return conflicts

    by_id = {g.id: g for g in guests}
    capacity_by_id = {t.id: t.capacity for t in tables}
    max_cap = max(capacity_by_id.values())
    locks = resolve_assignments(assignments, tables) if assignments else {}

    for group in find_must_groups(guests, constraints):
        members = tuple(sorted(group))
        seats = sum(by_id[m].party_size for m in members)
        if seats > max_cap:
            conflicts.append(Conflict(
                kind=ConflictKind.CAPACITY_VIOLATION,
                severity=Severity.HIGH,
                description=(
                    f"Must-sit group too large: {_group_names(members, by_id)} need {seats} seats; "
                    f"largest table is {max_cap}."
                ),
                affected_guest_ids=members,
            ))
            continue

        candidates: List[int] = []
        for m in members:
            for table_id in locks.get(m, []):
                if table_id not in candidates:
                    candidates.append(table_id)
        if not candidates or any(capacity_by_id[t] >= seats for t in candidates):
            continue
        where = f"table {candidates[0]}" if len(candidates) == 1 else "tables " + ", ".join(str(t) for t in candidates)
        conflicts.append(Conflict(
            kind=ConflictKind.CAPACITY_VIOLATION,
            severity=Severity.HIGH,
            description=(
                f"Must-sit group {_group_names(members, by_id)} needs {seats} seats but is locked to "
                f"{where}, which cannot hold it."
            ),
            affected_guest_ids=members,
        ))
    return conflicts


def detect_contradictions(guests: Sequence[GuestUnit], constraints: ConstraintMap) -> List[Conflict]:
    """Pairs written as must one way and cannot the other, plus cannot pairs
    trapped inside a must group."""
    conflicts: List[Conflict] = []
    by_id = {g.id: g for g in guests}
    checked: Set[Tuple[str, str]] = set()

    for a, b, value in constraints.entries():
        key = (a, b) if a < b else (b, a)
        if key in checked:
            continue
        checked.add(key)
        reverse = constraints.get(b, a)
        if {value, reverse} == {ConstraintValue.MUST, ConstraintValue.CANNOT}:
            conflicts.append(Conflict(
                kind=ConflictKind.IMPOSSIBLE,
                severity=Severity.HIGH,
                description=f"Contradictory constraints between {_group_names(key, by_id)}.",
                affected_guest_ids=key,
            ))

    contradictory = {c.affected_guest_ids for c in conflicts}
    group_of: Dict[str, int] = {}
    for i, group in enumerate(find_must_groups(guests, constraints)):
        for m in group:
            group_of[m] = i
    for a, b in constraints.pairs(ConstraintValue.CANNOT):
        if (a, b) in contradictory:
            continue
        if a in group_of and group_of.get(b) == group_of[a]:
            conflicts.append(Conflict(
                kind=ConflictKind.IMPOSSIBLE,
                severity=Severity.HIGH,
                description=(
                    f"{_group_names((a, b), by_id)} cannot sit together but are linked "
                    f"through must-sit constraints."
                ),
                affected_guest_ids=(a, b),
            ))
    return conflicts


def detect_constraint_conflicts(
    guests: Sequence[GuestUnit],
    constraints: "ConstraintMap | Mapping[str, Mapping[str, object]] | None",
    tables: Sequence[Table],
    check_adjacency: bool = False,
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None" = None,
    assignments: Optional[Mapping[str, "str | Iterable[str]"]] = None,
) -> List[Conflict]:
    """Run every constraint check and return the conflicts in a stable order.

    Order: must group capacity, contradictions, then adjacency (when
    ``check_adjacency`` is set). Empty guest or table lists yield nothing.
    """
    if not guests or not tables:
        return []
    cmap = ConstraintMap.coerce(constraints)

    conflicts = detect_must_group_conflicts(guests, tables, cmap, assignments)
    conflicts.extend(detect_contradictions(guests, cmap))
    if check_adjacency and adjacency:
        conflicts.extend(detect_adjacency_conflicts(guests, tables, adjacency))

    logger.debug("Constraint check found %d conflicts", len(conflicts))
    return conflicts
