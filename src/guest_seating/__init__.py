"""Guest seating package."""
from .models import (
    AdjacencyMap,
    Conflict,
    ConflictKind,
    ConstraintMap,
    ConstraintValue,
    GuestUnit,
    PlanSeat,
    PlanTable,
    SeatingPlan,
    Severity,
    Table,
)
from .union_find import UnionFind
from .conflicts import detect_constraint_conflicts
from .adjacency import can_link, detect_adjacency_conflicts, order_by_adjacency_endpoints
from .assignments import resolve_table_tokens
from .allocator import CapacityTracker, allocate
from .planner import EmptyInputError, SeatingPlanner, generate_seating_plan
from .csv_loader import (
    load_adjacency,
    load_all,
    load_assignments,
    load_constraints,
    load_guests,
    load_tables,
)

__all__ = [
    "AdjacencyMap",
    "Conflict",
    "ConflictKind",
    "ConstraintMap",
    "ConstraintValue",
    "GuestUnit",
    "PlanSeat",
    "PlanTable",
    "SeatingPlan",
    "Severity",
    "Table",
    "UnionFind",
    "detect_constraint_conflicts",
    "can_link",
    "detect_adjacency_conflicts",
    "order_by_adjacency_endpoints",
    "resolve_table_tokens",
    "CapacityTracker",
    "allocate",
    "EmptyInputError",
    "SeatingPlanner",
    "generate_seating_plan",
    "load_adjacency",
    "load_all",
    "load_assignments",
    "load_constraints",
    "load_guests",
    "load_tables",
]
