"""CSV loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Set, Tuple

import pandas as pd

from .models import AdjacencyMap, ConstraintMap, GuestUnit, Table, parse_party_size


def _require(df: pd.DataFrame, columns: List[str], label: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Error in {label}: missing columns: {', '.join(missing)}")


def _text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def load_guests(path: Path | str | IO[Any]) -> List[GuestUnit]:
    """Load guests from ``guests.csv`` (``id,name[,party_size]``)."""
    df = pd.read_csv(path, dtype={"id": str})
    _require(df, ["id", "name"], "guests.csv")
    guests: List[GuestUnit] = []
    seen: Set[str] = set()
    for _, row in df.iterrows():
        gid = _text(row["id"])
        if gid in seen:
            raise ValueError(f"Duplicate guest id: {gid}")
        seen.add(gid)
        guests.append(
            GuestUnit(
                id=gid,
                name=_text(row["name"]) or f"Guest {gid}",
                party_size=parse_party_size(row.get("party_size", 1)),
            )
        )
    return guests


def load_tables(path: Path | str | IO[Any]) -> List[Table]:
    """Load table definitions (``id,capacity[,name]``)."""
    df = pd.read_csv(path)
    _require(df, ["id", "capacity"], "tables.csv")
    tables: List[Table] = []
    for _, row in df.iterrows():
        tables.append(
            Table(
                id=int(row["id"]),
                capacity=int(row["capacity"]),
                name=_text(row.get("name", "")) or None,
            )
        )
    return tables


def _check_pair(a: str, b: str, guest_ids: Optional[Set[str]], label: str) -> None:
    if guest_ids is not None and (a not in guest_ids or b not in guest_ids):
        raise ValueError(f"{label} references unknown guest: {a}, {b}")


def load_constraints(path: Path | str | IO[Any], guest_ids: Optional[Set[str]] = None) -> ConstraintMap:
    """Load must/cannot pairs (``guest1_id,guest2_id,constraint``).

    If ``guest_ids`` is provided it validates that both endpoints exist.
    """
    df = pd.read_csv(path, dtype={"guest1_id": str, "guest2_id": str})
    _require(df, ["guest1_id", "guest2_id", "constraint"], "constraints.csv")
    cmap = ConstraintMap()
    for _, row in df.iterrows():
        a, b = _text(row["guest1_id"]), _text(row["guest2_id"])
        _check_pair(a, b, guest_ids, "Constraint")
        cmap.set_pair(a, b, _text(row["constraint"]))
    return cmap


def load_adjacency(path: Path | str | IO[Any], guest_ids: Optional[Set[str]] = None) -> AdjacencyMap:
    """Load side-by-side pairs (``guest1_id,guest2_id``)."""
    df = pd.read_csv(path, dtype={"guest1_id": str, "guest2_id": str})
    _require(df, ["guest1_id", "guest2_id"], "adjacency.csv")
    adj = AdjacencyMap()
    for _, row in df.iterrows():
        a, b = _text(row["guest1_id"]), _text(row["guest2_id"])
        _check_pair(a, b, guest_ids, "Adjacency")
        adj.add_pair(a, b)
    return adj


def load_assignments(path: Path | str | IO[Any], guest_ids: Optional[Set[str]] = None) -> Dict[str, str]:
    """Load hard assignments (``guest_id,tables``), tokens kept as raw text."""
    df = pd.read_csv(path, dtype={"guest_id": str, "tables": str})
    _require(df, ["guest_id", "tables"], "assignments.csv")
    assignments: Dict[str, str] = {}
    for _, row in df.iterrows():
        gid = _text(row["guest_id"])
        if guest_ids is not None and gid not in guest_ids:
            raise ValueError(f"Assignment references unknown guest: {gid}")
        tokens = _text(row["tables"])
        if tokens:
            assignments[gid] = tokens
    return assignments


def load_all(
    guests_path: Path | str,
    tables_path: Path | str,
    constraints_path: Optional[Path | str] = None,
    adjacency_path: Optional[Path | str] = None,
    assignments_path: Optional[Path | str] = None,
) -> Tuple[List[GuestUnit], List[Table], ConstraintMap, AdjacencyMap, Dict[str, str]]:
    """Convenience wrapper returning guests, tables, constraints, adjacency and assignments."""
    guests = load_guests(guests_path)
    guest_ids = {g.id for g in guests}
    tables = load_tables(tables_path)
    constraints = load_constraints(constraints_path, guest_ids) if constraints_path else ConstraintMap()
    adjacency = load_adjacency(adjacency_path, guest_ids) if adjacency_path else AdjacencyMap()
    assignments = load_assignments(assignments_path, guest_ids) if assignments_path else {}
    return guests, tables, constraints, adjacency, assignments
