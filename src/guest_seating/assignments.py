"""Hard assignment parsing: guest -> permitted table tokens."""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .models import Table

logger = logging.getLogger(__name__)


def parse_assignment_tokens(raw: "str | Iterable[str] | None") -> List[str]:
    """Split a comma separated token string (or list of them) into tokens.

    >>> parse_assignment_tokens("1, Head Table,,3")
    ['1', 'Head Table', '3']
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = raw.split(",")
    else:
        parts = [p for item in raw for p in str(item).split(",")]
    return [p.strip() for p in parts if p.strip()]


def resolve_table_token(token: str, tables: Sequence[Table], resolve_names: bool = True) -> Optional[int]:
    """Map one token to a table id, or ``None`` when nothing matches."""
    tok = token.strip()
    try:
        number = float(tok)
    except ValueError:
        number = None
    if number is not None and not math.isfinite(number):
        number = None
    if number is not None:
        # numeric tokens never fall back to name matching
        if not number.is_integer():
            return None
        return int(number) if any(t.id == number for t in tables) else None
    if not resolve_names:
        return None
    wanted = tok.lower()
    for t in tables:
        if t.name and t.name.strip().lower() == wanted:
            return t.id
    return None


def resolve_table_tokens(
    raw: "str | Iterable[str] | None",
    tables: Sequence[Table],
    resolve_names: bool = True,
) -> List[int]:
    """Resolve tokens to table ids in the order given.

    Unresolvable and duplicate tokens are dropped without error.
    """
    ids: List[int] = []
    for tok in parse_assignment_tokens(raw):
        table_id = resolve_table_token(tok, tables, resolve_names)
        if table_id is None:
            logger.debug("Dropping unresolved table token %r", tok)
            continue
        if table_id not in ids:
            ids.append(table_id)
    return ids


def resolve_assignments(
    assignments: Optional[Mapping[str, "str | Iterable[str]"]],
    tables: Sequence[Table],
    resolve_names: bool = True,
) -> Dict[str, List[int]]:
    """Resolve every guest's tokens. Guests left with no table are omitted."""
    out: Dict[str, List[int]] = {}
    for guest_id, raw in (assignments or {}).items():
        ids = resolve_table_tokens(raw, tables, resolve_names)
        if ids:
            out[str(guest_id)] = ids
    return out
