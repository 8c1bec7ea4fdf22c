"""Greedy first-fit table allocation."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .assignments import resolve_assignments
from .models import GuestUnit, Table

logger = logging.getLogger(__name__)


class CapacityTracker:
    """Remaining seats per table id."""

    def __init__(self, tables: Sequence[Table]) -> None:
        self.capacity: Dict[int, int] = {t.id: t.capacity for t in tables}
        self.remaining: Dict[int, int] = dict(self.capacity)

    def fits(self, table_id: int, seats: int) -> bool:
        return self.remaining.get(table_id, 0) >= seats

    def take(self, table_id: int, seats: int) -> None:
        if not self.fits(table_id, seats):
            raise ValueError(f"Table {table_id} has {self.remaining.get(table_id, 0)} seats left, need {seats}")
        self.remaining[table_id] -= seats

    def first_fit(self, candidates: Iterable[int], seats: int) -> Optional[int]:
        for table_id in candidates:
            if self.fits(table_id, seats):
                return table_id
        return None


def allocate(
    guests: Sequence[GuestUnit],
    tables: Sequence[Table],
    assignments: Optional[Mapping[str, "str | Iterable[str]"]] = None,
    tracker: Optional[CapacityTracker] = None,
    resolve_table_names: bool = True,
    strict_locks: bool = False,
) -> Dict[int, List[GuestUnit]]:
    """Seat every guest unit at one table, first-fit, without backtracking.

    Locked guests (those with at least one resolvable assignment token) go
    first, trying their candidate tables in the order given. Everyone else
    then tries all tables by ascending id. A party is never split: a unit
    that fits nowhere is left out of the result. A locked unit whose
    candidates are all full joins the open pass unless ``strict_locks`` is set.

    Returns table id -> seated units in seating order, for every table.
    """
    tracker = tracker or CapacityTracker(tables)
    seated: Dict[int, List[GuestUnit]] = {t.id: [] for t in sorted(tables, key=lambda t: t.id)}
    locks = resolve_assignments(assignments, tables, resolve_table_names)
    placed = set()

    def seat(guest: GuestUnit, table_id: int) -> None:
        tracker.take(table_id, guest.party_size)
        seated[table_id].append(guest)
        placed.add(guest.id)

    for guest in guests:
        candidates = locks.get(guest.id)
        if not candidates:
            continue
        table_id = tracker.first_fit(candidates, guest.party_size)
        if table_id is not None:
            seat(guest, table_id)
        else:
            logger.debug("No room for %s at locked tables %s", guest.name, candidates)

    open_order = list(seated)
    for guest in guests:
        if guest.id in placed:
            continue
        if strict_locks and locks.get(guest.id):
            continue
        table_id = tracker.first_fit(open_order, guest.party_size)
        if table_id is not None:
            seat(guest, table_id)
        else:
            logger.debug("No table can hold %s (party of %d)", guest.name, guest.party_size)

    return seated
