"""Utils: rollup windows and timestamp helpers."""

from signal_desk.utils.timeframes import (
    window_days,
    parse_timestamp,
    format_timestamp,
    start_of_day_utc,
)

__all__ = ["window_days", "parse_timestamp", "format_timestamp", "start_of_day_utc"]
