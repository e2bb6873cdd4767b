"""Record store: owns the open-signal and closed-trade collections."""

from signal_desk.store.record_store import RecordStore

__all__ = ["RecordStore"]
