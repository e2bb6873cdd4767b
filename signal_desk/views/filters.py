"""
Filter and sort engine. Pure functions: inputs are never mutated and a new list is
always returned. Python's sort is stable, so ties keep their backing-collection order.
"""

from __future__ import annotations
import locale
from typing import List, Optional, Sequence

from signal_desk.core.types import ClosedTrade, Signal
from signal_desk.utils.timeframes import parse_timestamp

SIGNAL_SORT_KEYS = ("newest", "oldest", "name_az", "price_desc", "price_asc", "confidence_desc")
CLOSED_SORT_KEYS = ("profit_asc", "profit_desc", "value_az", "value_za")


def _matches_query(record, q: str) -> bool:
    return any(q in (value or "").lower() for value in (record.ticker, record.name, record.notes))


def _has_tag(record, tag: str) -> bool:
    if not record.notes:
        return False
    return tag in [part.strip().lower() for part in str(record.notes).split(",")]


def filter_records(records: Sequence, query: Optional[str] = "", tag: Optional[str] = "") -> List:
    """
    Case-insensitive substring match on ticker, name and notes, then exact
    (case-insensitive) tag match. Empty query/tag are no-ops.
    """
    out = list(records)
    q = (query or "").strip().lower()
    if q:
        out = [r for r in out if _matches_query(r, q)]
    if tag:
        t = tag.lower()
        out = [r for r in out if _has_tag(r, t)]
    return out


def _num(value: Optional[float]) -> float:
    return value if isinstance(value, (int, float)) else 0.0


def _name_key(record) -> str:
    # collation follows LC_COLLATE; case is folded first so the C locale still ignores case
    return locale.strxfrm(record.display_name.casefold())


def _newest_first(records: Sequence[Signal]) -> List[Signal]:
    stamped = [(parse_timestamp(r.created_at), r) for r in records]
    dated = [(ts, r) for ts, r in stamped if ts is not None]
    undated = [r for ts, r in stamped if ts is None]
    return [r for _, r in sorted(dated, key=lambda pair: pair[0], reverse=True)] + undated


def sort_signals(records: Sequence[Signal], key: str = "newest") -> List[Signal]:
    """Order open signals for display. 'oldest' is the exact reverse of 'newest'."""
    if key == "newest":
        return _newest_first(records)
    if key == "oldest":
        return list(reversed(_newest_first(records)))
    if key == "name_az":
        return sorted(records, key=_name_key)
    if key == "price_desc":
        return sorted(records, key=lambda r: _num(r.buy_price), reverse=True)
    if key == "price_asc":
        return sorted(records, key=lambda r: _num(r.buy_price))
    if key == "confidence_desc":
        return sorted(records, key=lambda r: _num(r.confidence_score), reverse=True)
    raise ValueError(f"Unsupported signal sort: {key}")


def sort_closed_trades(records: Sequence[ClosedTrade], key: str = "profit_desc") -> List[ClosedTrade]:
    """Order closed trades by stored profit (missing = 0) or by name."""
    if key == "profit_asc":
        return sorted(records, key=lambda r: _num(r.profit))
    if key == "profit_desc":
        return sorted(records, key=lambda r: _num(r.profit), reverse=True)
    if key == "value_az":
        return sorted(records, key=_name_key)
    if key == "value_za":
        return sorted(records, key=_name_key, reverse=True)
    raise ValueError(f"Unsupported closed-trade sort: {key}")
