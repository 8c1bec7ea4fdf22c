"""
Adjacency validation and seat ordering.

Adjacency links say two guest units must sit side by side. Each unit has at
most two sides, so a valid link graph is a set of simple chains. A chain that
closes on itself (a ring) only works at a table with exactly as many seats as
the ring needs.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Set

import networkx as nx

from .models import (
    AdjacencyMap,
    Conflict,
    ConflictKind,
    GuestUnit,
    SeatingPlan,
    Severity,
    Table,
)

logger = logging.getLogger(__name__)

MAX_ADJACENT = 2


def ring_fits_exactly(seats: int, capacities: Iterable[int]) -> bool:
    """A closed ring is only seatable at a table of exactly ``seats``."""
    return any(cap == seats for cap in capacities)


def build_adjacency_graph(guests: Sequence[GuestUnit], adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None") -> nx.Graph:
    """Undirected graph of adjacency links between guests in ``guests``."""
    adj = AdjacencyMap.coerce(adjacency)
    graph = nx.Graph()
    for g in guests:
        graph.add_node(g.id, party_size=g.party_size, name=g.name)
    for a, b in adj.pairs():
        if a in graph and b in graph:
            graph.add_edge(a, b)
    return graph


def can_link(
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None",
    a: str,
    b: str,
    capacities: Iterable[int],
    party_sizes: Optional[Mapping[str, int]] = None,
) -> bool:
    """Edit guard: would linking ``a`` and ``b`` keep the adjacency valid?

    Rejects self links, links pushing either guest past two neighbors and
    links closing a ring whose seat count matches no table exactly.
    """
    adj = AdjacencyMap.coerce(adjacency)
    if a == b:
        return False
    if adj.is_adjacent(a, b):
        return True
    if adj.degree(a) >= MAX_ADJACENT or adj.degree(b) >= MAX_ADJACENT:
        return False

    graph = nx.Graph()
    graph.add_edges_from(adj.pairs())
    if a not in graph or b not in graph or not nx.has_path(graph, a, b):
        return True
    ring = nx.shortest_path(graph, a, b)
    sizes = party_sizes or {}
    return ring_fits_exactly(sum(sizes.get(gid, 1) for gid in ring), capacities)


def detect_adjacency_conflicts(
    guests: Sequence[GuestUnit],
    tables: Sequence[Table],
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None",
) -> List[Conflict]:
    """Degree cap, closed rings and chain size against the smallest table."""
    conflicts: List[Conflict] = []
    if not guests or not tables:
        return conflicts

    graph = build_adjacency_graph(guests, adjacency)
    capacities = [t.capacity for t in tables]
    min_cap = min(capacities)

    for node, degree in graph.degree():
        if degree > MAX_ADJACENT:
            conflicts.append(Conflict(
                kind=ConflictKind.DEGREE_VIOLATION,
                severity=Severity.CRITICAL,
                description=f"Too many neighbors: {graph.nodes[node]['name']} has {degree}; max is {MAX_ADJACENT}.",
                affected_guest_ids=(node,),
            ))

    for component in nx.connected_components(graph):
        if len(component) < 2:
            continue
        chain = tuple(sorted(component))
        seats = sum(graph.nodes[n]["party_size"] for n in chain)
        if seats > min_cap:
            conflicts.append(Conflict(
                kind=ConflictKind.CAPACITY_VIOLATION,
                severity=Severity.HIGH,
                description=(
                    f"Adjacent chain won't fit the smallest table: {_names(graph, chain)} "
                    f"total {seats} > smallest {min_cap}."
                ),
                affected_guest_ids=chain,
            ))
        if len(chain) < 3:
            continue
        degrees = [graph.degree(n) for n in chain]
        endpoints = sum(1 for d in degrees if d == 1)
        if max(degrees) <= MAX_ADJACENT and endpoints < 2 and not ring_fits_exactly(seats, capacities):
            conflicts.append(Conflict(
                kind=ConflictKind.CLOSED_LOOP,
                severity=Severity.HIGH,
                description=(
                    f"Adjacent chain forms a closed loop of {seats} seats ({_names(graph, chain)}) "
                    f"and no table has exactly {seats} seats: remove a link so the chain has ends."
                ),
                affected_guest_ids=chain,
            ))

    logger.debug("Adjacency check over %d guests found %d conflicts", len(guests), len(conflicts))
    return conflicts


def _names(graph: nx.Graph, ids: Iterable[str]) -> str:
    return ", ".join(graph.nodes[n]["name"] for n in ids)


def order_by_adjacency_endpoints(
    units: Sequence[GuestUnit],
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None",
) -> List[GuestUnit]:
    """Seat order that walks every adjacency chain from one of its ends.

    Chains come first in the order their first member appears in ``units``;
    units without links follow in their original order.
    """
    graph = build_adjacency_graph(units, adjacency)
    by_id = {u.id: u for u in units}
    seen: Set[str] = set()
    ordered: List[GuestUnit] = []

    for unit in units:
        if unit.id in seen or graph.degree(unit.id) == 0:
            continue
        component = nx.node_connected_component(graph, unit.id)
        seen.update(component)
        members = [u.id for u in units if u.id in component]
        start = next((m for m in members if graph.degree(m) == 1), members[0])

        path: List[str] = []
        visited: Set[str] = set()
        current = start
        while current is not None and current not in visited:
            path.append(current)
            visited.add(current)
            nxt = [m for m in members if m not in visited and graph.has_edge(current, m)]
            current = nxt[0] if nxt else None
        # branches past the degree cap leave members off the walk
        path.extend(m for m in members if m not in visited)
        ordered.extend(by_id[m] for m in path)

    ordered.extend(u for u in units if u.id not in seen)
    return ordered


def score_adjacency_neighbors(
    plan: SeatingPlan,
    adjacency: "AdjacencyMap | Mapping[str, Iterable[str]] | None",
) -> int:
    """Count adjacency pairs sitting side by side at a round table."""
    adj = AdjacencyMap.coerce(adjacency)
    satisfied: Set[frozenset] = set()
    for table in plan.tables:
        units = table.seated_units
        n = len(units)
        if n < 2:
            continue
        for i, unit in enumerate(units):
            right = units[(i + 1) % n]
            if right.id != unit.id and adj.is_adjacent(unit.id, right.id):
                satisfied.add(frozenset((unit.id, right.id)))
    return len(satisfied)

