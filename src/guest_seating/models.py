"""Data models for guest seating."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple
import math


def parse_party_size(value: object) -> int:
    """Parse a party size column value.

    Empty values such as ``""`` or ``None`` mean a single seat. ``pandas``
    often provides ``float('nan')`` for missing values which is also treated
    as empty. Fractional sizes raise ``ValueError``.
    """
    if value is None:
        return 1
    if isinstance(value, float) and math.isnan(value):
        return 1
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return 1
    number = float(text)
    if not number.is_integer():
        raise ValueError(f"party_size must be a whole number, got {value!r}")
    return int(number)


class ConstraintValue(str, Enum):
    """Pairwise seating rule between two guest units."""

    MUST = "must"
    CANNOT = "cannot"
    NONE = ""

    @classmethod
    def parse(cls, value: object) -> "ConstraintValue":
        if isinstance(value, ConstraintValue):
            return value
        text = "" if value is None else str(value).strip().lower()
        if text in ("", "none", "nan"):
            return cls.NONE
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown constraint value: {value!r}") from None


@dataclass(frozen=True)
class GuestUnit:
    """One guest list entry, possibly a couple or family sharing seats."""

    id: str
    name: str
    party_size: int = 1

    def __post_init__(self) -> None:
        if self.party_size < 1:
            raise ValueError(f"Guest {self.id} party_size must be at least 1, got {self.party_size}")


@dataclass(frozen=True)
class Table:
    """Dinner table definition."""

    id: int
    capacity: int
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"Table {self.id} capacity must be at least 1, got {self.capacity}")

    @property
    def display_name(self) -> str:
        return self.name or f"Table {self.id}"


class ConstraintMap:
    """Directed guest id -> guest id -> ConstraintValue map.

    Application code writes pairs through :meth:`set_pair`, which keeps both
    directions in step. :meth:`from_dict` loads raw data entry by entry so
    the conflict detector can still see contradictory bidirectional writes.
    """

    def __init__(self) -> None:
        self._rows: Dict[str, Dict[str, ConstraintValue]] = {}

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Mapping[str, object]]]) -> "ConstraintMap":
        cmap = cls()
        for a, row in (raw or {}).items():
            for b, value in (row or {}).items():
                a_key, b_key = str(a), str(b)
                parsed = ConstraintValue.parse(value)
                if parsed is ConstraintValue.NONE or a_key == b_key:
                    continue
                cmap._rows.setdefault(a_key, {})[b_key] = parsed
        return cmap

    @classmethod
    def coerce(cls, value: "ConstraintMap | Mapping[str, Mapping[str, object]] | None") -> "ConstraintMap":
        if isinstance(value, ConstraintMap):
            return value
        return cls.from_dict(value)

    def set_pair(self, a: str, b: str, value: object) -> None:
        """Write ``value`` for the pair in both directions."""
        if a == b:
            raise ValueError(f"Cannot constrain guest {a} against itself")
        parsed = ConstraintValue.parse(value)
        if parsed is ConstraintValue.NONE:
            self._rows.get(a, {}).pop(b, None)
            self._rows.get(b, {}).pop(a, None)
            return
        self._rows.setdefault(a, {})[b] = parsed
        self._rows.setdefault(b, {})[a] = parsed

    def get(self, a: str, b: str) -> ConstraintValue:
        return self._rows.get(a, {}).get(b, ConstraintValue.NONE)

    def entries(self) -> Iterator[Tuple[str, str, ConstraintValue]]:
        for a, row in self._rows.items():
            for b, value in row.items():
                yield a, b, value

    def pairs(self, value: ConstraintValue) -> List[Tuple[str, str]]:
        """Unordered pairs carrying ``value`` in at least one direction."""
        seen: Set[Tuple[str, str]] = set()
        out: List[Tuple[str, str]] = []
        for a, b, v in self.entries():
            if v is not value:
                continue
            key = (a, b) if a < b else (b, a)
            if key not in seen:
                seen.add(key)
                out.append(key)
        return out

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {a: {b: v.value for b, v in row.items()} for a, row in self._rows.items() if row}

    def __len__(self) -> int:
        return sum(len(row) for row in self._rows.values())


class AdjacencyMap:
    """Guest id -> ids that must sit immediately beside it."""

    def __init__(self) -> None:
        self._links: Dict[str, Set[str]] = {}

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Iterable[str]]]) -> "AdjacencyMap":
        # A single directed entry is enough to imply the undirected edge.
        adj = cls()
        for a, others in (raw or {}).items():
            if isinstance(others, str):
                others = [others]
            for b in others or []:
                if str(a) != str(b):
                    adj.add_pair(str(a), str(b))
        return adj

    @classmethod
    def coerce(cls, value: "AdjacencyMap | Mapping[str, Iterable[str]] | None") -> "AdjacencyMap":
        if isinstance(value, AdjacencyMap):
            return value
        return cls.from_dict(value)

    def add_pair(self, a: str, b: str) -> None:
        if a == b:
            raise ValueError(f"Guest {a} cannot be adjacent to itself")
        self._links.setdefault(a, set()).add(b)
        self._links.setdefault(b, set()).add(a)

    def remove_pair(self, a: str, b: str) -> None:
        self._links.get(a, set()).discard(b)
        self._links.get(b, set()).discard(a)

    def neighbors(self, guest_id: str) -> Set[str]:
        return set(self._links.get(guest_id, set()))

    def degree(self, guest_id: str) -> int:
        return len(self._links.get(guest_id, ()))

    def is_adjacent(self, a: str, b: str) -> bool:
        return b in self._links.get(a, ())

    def pairs(self) -> List[Tuple[str, str]]:
        seen: Set[Tuple[str, str]] = set()
        out: List[Tuple[str, str]] = []
        for a, others in self._links.items():
            for b in sorted(others):
                key = (a, b) if a < b else (b, a)
                if key not in seen:
                    seen.add(key)
                    out.append(key)
        return out

    def to_dict(self) -> Dict[str, List[str]]:
        return {a: sorted(others) for a, others in self._links.items() if others}

    def __len__(self) -> int:
        return len(self.pairs())


@dataclass(frozen=True)
class PlanSeat:
    """A single physical seat."""

    guest_id: str
    name: str
    party_index: int


@dataclass
class PlanTable:
    """One table of a generated plan."""

    table_id: int
    capacity: int
    name: Optional[str] = None
    seated_units: List[GuestUnit] = field(default_factory=list)

    @property
    def occupied(self) -> int:
        return sum(u.party_size for u in self.seated_units)

    @property
    def remaining(self) -> int:
        return self.capacity - self.occupied

    @property
    def seats(self) -> List[PlanSeat]:
        out: List[PlanSeat] = []
        for unit in self.seated_units:
            for i in range(unit.party_size):
                out.append(PlanSeat(guest_id=unit.id, name=unit.name, party_index=i))
        return out


@dataclass
class SeatingPlan:
    """Tables sorted by id, each with its seated units in seat order."""

    tables: List[PlanTable] = field(default_factory=list)

    def seated_guest_ids(self) -> List[str]:
        return [u.id for t in self.tables for u in t.seated_units]

    def table_for(self, guest_id: str) -> Optional[int]:
        for t in self.tables:
            if any(u.id == guest_id for u in t.seated_units):
                return t.table_id
        return None

    def unplaced(self, guests: Iterable[GuestUnit]) -> List[GuestUnit]:
        seated = set(self.seated_guest_ids())
        return [g for g in guests if g.id not in seated]

    def is_complete(self, guests: Iterable[GuestUnit]) -> bool:
        return not self.unplaced(guests)


class ConflictKind(str, Enum):
    CAPACITY_VIOLATION = "capacity_violation"
    IMPOSSIBLE = "impossible"
    DEGREE_VIOLATION = "degree_violation"
    CLOSED_LOOP = "closed_loop"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Conflict:
    """Advisory diagnostic about the declared constraints."""

    kind: ConflictKind
    severity: Severity
    description: str
    affected_guest_ids: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Stable identity: kind plus sorted affected guests."""
        return f"{self.kind.value}::{'|'.join(sorted(self.affected_guest_ids))}"
