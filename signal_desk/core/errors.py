"""
Error taxonomy and the result value returned by every store and lifecycle operation.
Errors are returned, not raised, so the caller decides how to show them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional


class SignalDeskError(Exception):
    """Base for all value-level errors."""


class ValidationError(SignalDeskError):
    pass


class MissingTicker(ValidationError):
    def __init__(self, message: str = "Ticker is required"):
        super().__init__(message)


class DuplicateTicker(ValidationError):
    def __init__(self, ticker: str):
        super().__init__(f"Ticker {ticker} already exists; edit it instead")
        self.ticker = ticker


class RecordNotFound(SignalDeskError):
    def __init__(self, record_id: str):
        super().__init__(f"No record with id {record_id}")
        self.record_id = record_id


class ClosePreconditionError(SignalDeskError):
    pass


class InvalidClosePrice(SignalDeskError):
    def __init__(self, value: Any):
        super().__init__(f"Invalid close price: {value!r}")
        self.value = value


class MalformedImport(SignalDeskError):
    pass


class LoadFailure(SignalDeskError):
    pass


class WriteFailure(SignalDeskError):
    pass


@dataclass
class OpResult:
    """Outcome of a store or lifecycle operation: ok + record/value, or the error."""
    ok: bool
    record: Any = None
    error: Optional[SignalDeskError] = None
    value: Any = None

    @property
    def reason(self) -> str:
        return str(self.error) if self.error else ""

    @classmethod
    def success(cls, record: Any = None, value: Any = None) -> "OpResult":
        return cls(ok=True, record=record, value=value)

    @classmethod
    def failure(cls, error: SignalDeskError) -> "OpResult":
        return cls(ok=False, error=error)
