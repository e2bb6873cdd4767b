"""Views: filtering, sorting and tag derivation over record collections."""

from signal_desk.views.filters import (
    filter_records,
    sort_signals,
    sort_closed_trades,
    SIGNAL_SORT_KEYS,
    CLOSED_SORT_KEYS,
)
from signal_desk.views.tags import extract_tags, note_tags

__all__ = [
    "filter_records",
    "sort_signals",
    "sort_closed_trades",
    "SIGNAL_SORT_KEYS",
    "CLOSED_SORT_KEYS",
    "extract_tags",
    "note_tags",
]
