"""Tags are derived from notes: comma-separated, trimmed, case preserved."""

from __future__ import annotations
from typing import Iterable, List, Optional


def note_tags(notes: Optional[str]) -> List[str]:
    """Split notes on commas, trim, drop empties."""
    if not notes:
        return []
    return [part.strip() for part in str(notes).split(",") if part.strip()]


def extract_tags(records: Iterable) -> List[str]:
    """Sorted distinct tags across all records. Full rebuild on every call."""
    tags = set()
    for r in records:
        tags.update(note_tags(r.notes))
    return sorted(tags)
