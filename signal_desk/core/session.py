"""Per-process view state: dry-run flag and the closed-view display unit."""

from __future__ import annotations
import logging
from dataclasses import dataclass

from signal_desk.core.types import DisplayUnit

logger = logging.getLogger("signal_desk.session")


@dataclass
class Session:
    dry_run: bool = False
    closed_view: DisplayUnit = DisplayUnit.USD

    def toggle_closed_view(self) -> DisplayUnit:
        """Flip between usd and pct; the choice sticks for the rest of the session."""
        self.closed_view = DisplayUnit.PCT if self.closed_view == DisplayUnit.USD else DisplayUnit.USD
        logger.debug("Closed view unit -> %s", self.closed_view.value)
        return self.closed_view

    @classmethod
    def from_config(cls, config) -> "Session":
        return cls(dry_run=config.dry_run, closed_view=DisplayUnit(config.closed_view))
