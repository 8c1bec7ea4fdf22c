"""
Tests for constraint conflict detection.
"""
import pathlib
import sys

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from guest_seating.conflicts import (
    detect_constraint_conflicts,
    detect_contradictions,
    find_must_groups,
)
from guest_seating.models import ConflictKind, ConstraintMap, GuestUnit, Severity, Table


def _guests(*entries):
    out = []
    for entry in entries:
        gid, size = entry if isinstance(entry, tuple) else (entry, 1)
        out.append(GuestUnit(gid, f"Guest {gid}", size))
    return out


def _kinds(conflicts):
    return [c.kind for c in conflicts]


def test_must_group_larger_than_largest_table():
    guests = _guests("A", "B")
    tables = [Table(1, 1)]
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    conflicts = detect_constraint_conflicts(guests, cmap, tables)
    assert len(conflicts) == 1
    c = conflicts[0]
    assert c.kind is ConflictKind.CAPACITY_VIOLATION
    assert c.severity is Severity.HIGH
    assert c.affected_guest_ids == ("A", "B")
    assert "largest table is 1" in c.description


def test_transitive_group_reported_once():
    guests = _guests(("A", 2), ("B", 2), ("C", 2), "D")
    tables = [Table(1, 4), Table(2, 5)]
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    cmap.set_pair("B", "C", "must")
    conflicts = detect_constraint_conflicts(guests, cmap, tables)
    assert _kinds(conflicts) == [ConflictKind.CAPACITY_VIOLATION]
    assert conflicts[0].affected_guest_ids == ("A", "B", "C")


def test_group_fitting_any_table_is_fine():
    guests = _guests(("A", 3), ("B", 3))
    tables = [Table(1, 2), Table(2, 6)]
    raw = {"A": {"B": "must"}, "B": {"A": "must"}}
    assert detect_constraint_conflicts(guests, raw, tables) == []


def test_empty_inputs_yield_nothing():
    raw = {"A": {"B": "must"}, "B": {"A": "cannot"}}
    assert detect_constraint_conflicts([], raw, [Table(1, 4)]) == []
    assert detect_constraint_conflicts(_guests("A", "B"), raw, []) == []


def test_contradiction_reported_once_per_pair():
    guests = _guests("A", "B", "C", "D")
    tables = [Table(1, 8)]
    raw = {
        "A": {"B": "must", "C": "cannot"},
        "B": {"A": "cannot"},
        "C": {"A": "must"},
        "D": {"A": "cannot"},
    }
    conflicts = detect_constraint_conflicts(guests, raw, tables)
    impossible = [c for c in conflicts if c.kind is ConflictKind.IMPOSSIBLE]
    assert sorted(c.affected_guest_ids for c in impossible) == [("A", "B"), ("A", "C")]
    assert all(c.severity is Severity.HIGH for c in impossible)


def test_symmetric_writes_never_contradict():
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    cmap.set_pair("A", "B", "cannot")
    assert detect_contradictions(_guests("A", "B"), cmap) == []


def test_cannot_inside_must_group_is_impossible():
    guests = _guests("A", "B", "C")
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    cmap.set_pair("B", "C", "must")
    cmap.set_pair("A", "C", "cannot")
    conflicts = detect_constraint_conflicts(guests, cmap, [Table(1, 8)])
    assert len(conflicts) == 1
    assert conflicts[0].kind is ConflictKind.IMPOSSIBLE
    assert conflicts[0].affected_guest_ids == ("A", "C")


def test_must_groups_ignore_unknown_guests():
    guests = _guests("A", "B")
    cmap = ConstraintMap()
    cmap.set_pair("A", "Z", "must")
    cmap.set_pair("A", "B", "must")
    assert [sorted(g) for g in find_must_groups(guests, cmap)] == [["A", "B"]]


def test_locked_group_too_big_for_its_tables():
    guests = _guests(("A", 2), ("B", 2))
    tables = [Table(1, 2, "Head Table"), Table(2, 10)]
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    assert detect_constraint_conflicts(guests, cmap, tables) == []

    conflicts = detect_constraint_conflicts(guests, cmap, tables, assignments={"A": "head table"})
    assert _kinds(conflicts) == [ConflictKind.CAPACITY_VIOLATION]
    assert "table 1" in conflicts[0].description

    # a lock that includes a big enough table is fine
    assert detect_constraint_conflicts(guests, cmap, tables, assignments={"A": "1", "B": "2"}) == []


def test_adjacency_only_checked_when_requested():
    guests = _guests("A", "B", "C", "D")
    tables = [Table(1, 8)]
    adjacency = {"A": ["B", "C", "D"]}
    assert detect_constraint_conflicts(guests, {}, tables, adjacency=adjacency) == []
    conflicts = detect_constraint_conflicts(guests, {}, tables, check_adjacency=True, adjacency=adjacency)
    assert _kinds(conflicts) == [ConflictKind.DEGREE_VIOLATION]


def test_all_conflicts_collected_together():
    guests = _guests("A", "B", "C", "D", "E", "F")
    tables = [Table(1, 1), Table(2, 3)]
    raw = {
        "A": {"B": "must"},
        "B": {"A": "must"},
        "E": {"F": "must"},
        "F": {"E": "cannot"},
    }
    adjacency = {"C": ["A", "B", "D"]}
    conflicts = detect_constraint_conflicts(guests, raw, tables, check_adjacency=True, adjacency=adjacency)
    kinds = _kinds(conflicts)
    assert ConflictKind.IMPOSSIBLE in kinds
    assert ConflictKind.DEGREE_VIOLATION in kinds
    assert ConflictKind.CAPACITY_VIOLATION in kinds


def test_detection_is_idempotent_and_does_not_mutate():
    guests = _guests("A", "B", "C")
    tables = [Table(1, 2)]
    raw = {"A": {"B": "must", "C": "must"}, "B": {"A": "cannot"}}
    adjacency = {"A": ["B"], "B": ["C"], "C": ["A"]}
    first = detect_constraint_conflicts(guests, raw, tables, check_adjacency=True, adjacency=adjacency)
    second = detect_constraint_conflicts(guests, raw, tables, check_adjacency=True, adjacency=adjacency)
    assert {c.key for c in first} == {c.key for c in second}
    assert first == second
    assert raw == {"A": {"B": "must", "C": "must"}, "B": {"A": "cannot"}}
    assert adjacency == {"A": ["B"], "B": ["C"], "C": ["A"]}


def test_lock_check_only_applies_with_assignments():
    guests = _guests(("A", 3), ("B", 3))
    tables = [Table(1, 4), Table(2, 6)]
    cmap = ConstraintMap()
    cmap.set_pair("A", "B", "must")
    # the group fits table 2, so nothing without locks
    assert detect_constraint_conflicts(guests, cmap, tables) == []

    conflicts = detect_constraint_conflicts(guests, cmap, tables, assignments={"B": "1"})
    assert len(conflicts) == 1
    assert conflicts[0].kind is ConflictKind.CAPACITY_VIOLATION
    assert conflicts[0].affected_guest_ids == ("A", "B")
    assert "needs 6 seats but is locked to table 1" in conflicts[0].description
