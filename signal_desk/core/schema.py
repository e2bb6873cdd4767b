"""
Record schema: permissive coercion of raw JSON values into typed Signal/ClosedTrade
fields, and the reverse mapping for export. Everything that touches raw dicts goes
through here.
"""

from __future__ import annotations
import copy
import math
from dataclasses import fields
from enum import Enum
from typing import Any, Optional, Union

from signal_desk.core.types import (
    Action,
    ClosedTrade,
    Signal,
    NUMERIC_FIELDS,
    SIGNAL_FIELDS,
    TIMESTAMP_FIELDS,
    new_id,
)
from signal_desk.utils.timeframes import format_timestamp, parse_timestamp

TEXT_FIELDS = ("exchange", "name", "notes")
ACTION_ALIASES = ("action", "type", "side")
CLOSING_FIELDS = ("close_price", "closed_at", "profit")

Record = Union[Signal, ClosedTrade]


def coerce_number(value: Any) -> Optional[float]:
    """Number or numeric string -> float. Empty, garbage and non-finite -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    return num if math.isfinite(num) else None


def normalize_ticker(value: Any) -> str:
    return str(value or "").strip().upper()


def coerce_field(name: str, value: Any) -> Any:
    """Coerce one raw value for a known record field."""
    if isinstance(value, Enum):
        value = value.value
    if name in NUMERIC_FIELDS:
        return coerce_number(value)
    if name in TIMESTAMP_FIELDS:
        return parse_timestamp(value)
    if name == "ticker":
        return normalize_ticker(value)
    if name == "action":
        return str(value).strip().lower() if value else Action.BUY.value
    if name in TEXT_FIELDS:
        return None if value is None else str(value)
    if name == "id":
        return str(value) if value else new_id()
    return value


def record_from_dict(raw: dict, closed: bool = False) -> Record:
    """
    Build a typed record from a raw JSON object. Unknown keys are kept in `extra`.
    `type`/`side` are accepted as aliases for `action`.
    """
    known = set(SIGNAL_FIELDS)
    kwargs: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in raw.items():
        if key in known:
            kwargs[key] = coerce_field(key, value)
        else:
            extra[key] = value
    if not raw.get("action"):
        alias = next((raw[k] for k in ACTION_ALIASES[1:] if raw.get(k)), None)
        kwargs["action"] = coerce_field("action", alias)
    kwargs.setdefault("ticker", "")
    # loaded records keep whatever timestamp they had, including none
    kwargs.setdefault("created_at", None)
    kwargs.setdefault("id", new_id())
    cls = ClosedTrade if closed else Signal
    return cls(extra=extra, **kwargs)


def record_to_dict(record: Record) -> dict:
    """Typed record -> JSON-ready dict. Empty closing fields are omitted on open signals."""
    out: dict[str, Any] = {}
    is_closed = isinstance(record, ClosedTrade)
    for name in SIGNAL_FIELDS:
        value = getattr(record, name)
        if name in CLOSING_FIELDS and value is None and not is_closed:
            continue
        if name in TIMESTAMP_FIELDS:
            value = format_timestamp(value)
        out[name] = value
    for key, value in record.extra.items():
        out.setdefault(key, value)
    return out


def copy_record(record: Record, as_type: Optional[type] = None, **changes: Any) -> Record:
    """Independent deep copy (optionally converted to another record type) with a fresh id."""
    cls = as_type or type(record)
    values = {f.name: copy.deepcopy(getattr(record, f.name)) for f in fields(Signal)}
    values["id"] = new_id()
    values.update(changes)
    return cls(**values)
