"""Window labels to days, and ISO timestamp parsing/formatting."""

from __future__ import annotations
from datetime import date, datetime, time, timezone
from typing import Any, Optional

import pandas as pd


def window_days(label: str) -> int:
    """Convert a rollup window label (e.g. '7d', '1m', '1y') to days. A month is 30 days."""
    label = label.strip().lower()
    if label.endswith("d"):
        return int(label[:-1])
    if label.endswith("w"):
        return int(label[:-1]) * 7
    if label.endswith("m"):
        return int(label[:-1]) * 30
    if label.endswith("y"):
        return int(label[:-1]) * 365
    raise ValueError(f"Unsupported window: {label}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO string, date, datetime or epoch-milliseconds number into an aware UTC datetime.
    Naive values are taken as UTC. Returns None when missing or unparseable.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        ts = pd.to_datetime(value, unit="ms", utc=True, errors="coerce")
    else:
        ts = pd.to_datetime(str(value).strip(), utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """UTC ISO string with millisecond precision and a Z suffix, e.g. 2024-05-01T00:00:00.000Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def start_of_day_utc(day: date) -> datetime:
    """Midnight UTC of the given calendar day."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
