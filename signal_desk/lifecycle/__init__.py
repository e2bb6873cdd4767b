"""Lifecycle: the signal -> closed trade transition."""

from signal_desk.lifecycle.close import (
    PendingClose,
    begin_close,
    confirm_close,
    close_signal,
    compute_profit,
)

__all__ = ["PendingClose", "begin_close", "confirm_close", "close_signal", "compute_profit"]
