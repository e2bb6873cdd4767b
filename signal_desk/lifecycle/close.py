"""
Close transition: OPEN -> PENDING_CLOSE -> CLOSED.

begin_close checks the signal can be closed and proposes defaults (price = buy price,
date = today). confirm_close re-validates against the live record, computes realized
profit and appends a ClosedTrade copy. Nothing is committed unless every check passes.
Repeated confirms are not deduplicated here; callers guard against double closes.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from signal_desk.core.errors import (
    ClosePreconditionError,
    InvalidClosePrice,
    OpResult,
    RecordNotFound,
)
from signal_desk.core.schema import coerce_number, copy_record
from signal_desk.core.types import ClosedTrade, Collection, Signal
from signal_desk.store.record_store import RecordStore
from signal_desk.utils.timeframes import parse_timestamp, start_of_day_utc

logger = logging.getLogger("signal_desk.lifecycle")


@dataclass
class PendingClose:
    """A signal that passed precondition checks, with user-overridable defaults."""
    signal_id: str
    ticker: str
    default_price: float
    default_date: date


def compute_profit(buy_price: float, buy_amount: float, close_price: float) -> float:
    """(close - buy) * amount. Applied the same way for buy and sell actions."""
    return (close_price - buy_price) * buy_amount


def _check_preconditions(signal: Signal) -> Optional[ClosePreconditionError]:
    if signal.buy_amount is None or signal.buy_price is None:
        return ClosePreconditionError(
            f"{signal.ticker or 'Signal'} needs buy price and buy amount before it can be closed"
        )
    return None


def begin_close(store: RecordStore, signal_id: str, today: Optional[date] = None) -> OpResult:
    """Validate and enter PENDING_CLOSE. `value` holds the PendingClose on success."""
    signal = store.get(Collection.SIGNALS, signal_id)
    if signal is None:
        return OpResult.failure(RecordNotFound(signal_id))
    error = _check_preconditions(signal)
    if error is not None:
        return OpResult.failure(error)
    pending = PendingClose(
        signal_id=signal.id,
        ticker=signal.ticker,
        default_price=signal.buy_price,
        default_date=today or datetime.now(timezone.utc).date(),
    )
    return OpResult.success(signal, value=pending)


def _close_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    ts = parse_timestamp(value)
    return ts.date() if ts else None


def confirm_close(
    store: RecordStore,
    pending: PendingClose,
    close_price: Union[float, str, None] = None,
    close_date: Union[date, str, None] = None,
    dry_run: bool = False,
) -> OpResult:
    """
    Commit the close. `close_price`/`close_date` default to the pending defaults.
    In dry-run mode the source signal stays in the open collection.
    """
    signal = store.get(Collection.SIGNALS, pending.signal_id)
    if signal is None:
        return OpResult.failure(RecordNotFound(pending.signal_id))
    error = _check_preconditions(signal)
    if error is not None:
        return OpResult.failure(error)

    raw_price = pending.default_price if close_price is None else close_price
    price = coerce_number(raw_price)
    if price is None:
        return OpResult.failure(InvalidClosePrice(raw_price))
    day = _close_date(pending.default_date if close_date is None else close_date)
    if day is None:
        return OpResult.failure(ClosePreconditionError("A close date is required"))

    profit = compute_profit(signal.buy_price, signal.buy_amount, price)
    trade = copy_record(
        signal,
        as_type=ClosedTrade,
        close_price=price,
        closed_at=start_of_day_utc(day),
        profit=profit,
    )
    store.append_closed_trade(trade)
    if not dry_run:
        store.remove_signal(signal.id)
    logger.info(
        "Closed %s @ %.4f on %s profit=%.2f%s",
        trade.ticker, price, day.isoformat(), profit, " (dry run, signal kept)" if dry_run else "",
    )
    return OpResult.success(trade)


def close_signal(
    store: RecordStore,
    signal_id: str,
    close_price: Union[float, str, None] = None,
    close_date: Union[date, str, None] = None,
    dry_run: bool = False,
) -> OpResult:
    """begin_close + confirm_close in one step."""
    started = begin_close(store, signal_id)
    if not started.ok:
        return started
    return confirm_close(store, started.value, close_price, close_date, dry_run=dry_run)
