"""
Record store: sole owner of the open-signal and closed-trade collections.
Records are addressed by their stable id, never by position in a filtered view.
"""

from __future__ import annotations
import copy
import logging
from dataclasses import fields
from typing import Any, Iterable, List, Optional, Union

from signal_desk.core.errors import (
    DuplicateTicker,
    MissingTicker,
    OpResult,
    RecordNotFound,
)
from signal_desk.core.schema import coerce_field, copy_record, normalize_ticker, Record
from signal_desk.core.types import ClosedTrade, Collection, Signal

logger = logging.getLogger("signal_desk.store")

_FIELD_NAMES = {f.name for f in fields(Signal)} - {"id", "extra"}


class RecordStore:
    """
    Holds two independent collections. Ticker uniqueness is enforced per collection
    on add only; closed trades never clash with open signals.
    """

    def __init__(
        self,
        signals: Optional[Iterable[Signal]] = None,
        closed_trades: Optional[Iterable[ClosedTrade]] = None,
    ):
        self.signals: List[Signal] = list(signals or [])
        self.closed_trades: List[ClosedTrade] = list(closed_trades or [])

    def collection(self, which: Union[Collection, str]) -> List[Record]:
        which = Collection(which)
        return self.signals if which == Collection.SIGNALS else self.closed_trades

    def get(self, which: Union[Collection, str], record_id: str) -> Optional[Record]:
        return next((r for r in self.collection(which) if r.id == record_id), None)

    def index_of(self, which: Union[Collection, str], record_id: str) -> int:
        """Position in the backing collection, or -1."""
        for i, r in enumerate(self.collection(which)):
            if r.id == record_id:
                return i
        return -1

    # --- add ---

    def _validate_new(self, records: List[Record], rec: Record) -> Optional[Exception]:
        ticker = normalize_ticker(rec.ticker)
        if not ticker:
            return MissingTicker()
        if any(normalize_ticker(r.ticker) == ticker for r in records):
            return DuplicateTicker(ticker)
        return None

    def _add(self, which: Collection, rec: Record, record_type: type) -> OpResult:
        records = self.collection(which)
        error = self._validate_new(records, rec)
        if error is not None:
            logger.info("Rejected %s add: %s", which.value, error)
            return OpResult.failure(error)
        record = copy.deepcopy(rec)
        if type(record) is not record_type:
            record = copy_record(record, as_type=record_type, id=record.id)
        record.ticker = normalize_ticker(record.ticker)
        record.action = coerce_field("action", record.action)
        record.created_at = coerce_field("created_at", record.created_at)
        record.closed_at = coerce_field("closed_at", record.closed_at)
        records.append(record)
        logger.debug("Added %s %s (%s)", which.value, record.ticker, record.id)
        return OpResult.success(record)

    def add_signal(self, rec: Signal) -> OpResult:
        """Append a new open signal. Fails with MissingTicker or DuplicateTicker."""
        return self._add(Collection.SIGNALS, rec, Signal)

    def add_closed_trade(self, rec: ClosedTrade) -> OpResult:
        return self._add(Collection.CLOSED, rec, ClosedTrade)

    def append_closed_trade(self, trade: ClosedTrade) -> ClosedTrade:
        """Unchecked append used by the close transition; repeated closes of a ticker are allowed."""
        self.closed_trades.append(trade)
        return trade

    # --- update ---

    def _update(self, which: Collection, record_id: str, patch: dict) -> OpResult:
        record = self.get(which, record_id)
        if record is None:
            return OpResult.failure(RecordNotFound(record_id))
        changes: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in patch.items():
            if key in ("id", "extra"):
                continue
            if key in _FIELD_NAMES:
                changes[key] = coerce_field(key, value)
            else:
                extra[key] = value
        if "ticker" in changes and not changes["ticker"]:
            return OpResult.failure(MissingTicker())
        for key, value in changes.items():
            setattr(record, key, value)
        record.extra.update(extra)
        logger.debug("Updated %s %s: %s", which.value, record_id, sorted(patch))
        return OpResult.success(record)

    def update_signal(self, record_id: str, patch: dict) -> OpResult:
        """Shallow merge `patch` onto the signal; absent fields are preserved."""
        return self._update(Collection.SIGNALS, record_id, patch)

    def update_closed_trade(self, record_id: str, patch: dict) -> OpResult:
        return self._update(Collection.CLOSED, record_id, patch)

    # --- remove ---

    def _remove(self, which: Collection, record_id: str) -> OpResult:
        records = self.collection(which)
        idx = self.index_of(which, record_id)
        if idx < 0:
            return OpResult.failure(RecordNotFound(record_id))
        record = records.pop(idx)
        logger.debug("Removed %s %s (%s)", which.value, record.ticker, record_id)
        return OpResult.success(record)

    def remove_signal(self, record_id: str) -> OpResult:
        return self._remove(Collection.SIGNALS, record_id)

    def remove_closed_trade(self, record_id: str) -> OpResult:
        return self._remove(Collection.CLOSED, record_id)

    # --- duplicate / replace ---

    def duplicate(self, which: Union[Collection, str], record_id: str) -> OpResult:
        """
        Append an independent copy with a fresh id. Ticker uniqueness is not
        re-checked, so duplicating an open signal yields two records with one ticker.
        """
        which = Collection(which)
        record = self.get(which, record_id)
        if record is None:
            return OpResult.failure(RecordNotFound(record_id))
        dup = copy_record(record)
        self.collection(which).append(dup)
        logger.debug("Duplicated %s %s -> %s", which.value, record_id, dup.id)
        return OpResult.success(dup)

    def replace(self, which: Union[Collection, str], records: List[Record]) -> None:
        """Swap the whole collection in place (import)."""
        target = self.collection(which)
        target[:] = records
