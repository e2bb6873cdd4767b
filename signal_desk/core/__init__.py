"""Core: config, types, errors, session, logging."""

from signal_desk.core.config import load_config, Config
from signal_desk.core.types import Signal, ClosedTrade, Action, DisplayUnit, Collection
from signal_desk.core.errors import (
    OpResult,
    SignalDeskError,
    ValidationError,
    MissingTicker,
    DuplicateTicker,
    RecordNotFound,
    ClosePreconditionError,
    InvalidClosePrice,
    MalformedImport,
    LoadFailure,
    WriteFailure,
)
from signal_desk.core.session import Session
from signal_desk.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "Signal",
    "ClosedTrade",
    "Action",
    "DisplayUnit",
    "Collection",
    "OpResult",
    "SignalDeskError",
    "ValidationError",
    "MissingTicker",
    "DuplicateTicker",
    "RecordNotFound",
    "ClosePreconditionError",
    "InvalidClosePrice",
    "MalformedImport",
    "LoadFailure",
    "WriteFailure",
    "Session",
    "setup_logging",
]
