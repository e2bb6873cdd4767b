"""
Core data types for open signals and closed trades.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Action(str, Enum):
    BUY = "buy"
    SELL = "sell"


class DisplayUnit(str, Enum):
    """Closed-view display unit: signed currency or percent of cost basis."""
    USD = "usd"
    PCT = "pct"


class Collection(str, Enum):
    SIGNALS = "signals"
    CLOSED = "closed"


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds, the precision records are stored at."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


# Field order used for export; anything else lives in `extra`.
SIGNAL_FIELDS = (
    "id", "ticker", "exchange", "name", "buy_price", "buy_amount",
    "expected_profit", "max_risk", "target_price", "stop_loss", "action",
    "confidence_score", "created_at", "notes", "close_price", "closed_at", "profit",
)
NUMERIC_FIELDS = (
    "buy_price", "buy_amount", "expected_profit", "max_risk", "target_price",
    "stop_loss", "confidence_score", "close_price", "profit",
)
TIMESTAMP_FIELDS = ("created_at", "closed_at")


@dataclass
class Signal:
    """Open position with entry parameters. Notes double as comma-separated tags."""
    ticker: str
    exchange: Optional[str] = None
    name: Optional[str] = None
    buy_price: Optional[float] = None
    buy_amount: Optional[float] = None
    expected_profit: Optional[float] = None  # percent
    max_risk: Optional[float] = None  # percent
    target_price: Optional[float] = None
    stop_loss: Optional[float] = None
    action: str = Action.BUY.value
    confidence_score: Optional[float] = None  # 0-100
    created_at: Optional[datetime] = field(default_factory=utc_now)
    notes: Optional[str] = None
    close_price: Optional[float] = None
    closed_at: Optional[datetime] = None
    profit: Optional[float] = None
    id: str = field(default_factory=new_id)
    extra: dict = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.name or self.ticker or ""

    @property
    def cost_basis(self) -> float:
        return (self.buy_price or 0.0) * (self.buy_amount or 0.0)


@dataclass
class ClosedTrade(Signal):
    """Resolved signal: close_price, closed_at and profit are set by the close transition."""

    @property
    def realized_profit(self) -> Optional[float]:
        """Stored profit, or (close - buy) * amount when profit is absent. None without a close price."""
        if self.profit is not None:
            return self.profit
        if self.close_price is None:
            return None
        return (self.close_price - (self.buy_price or 0.0)) * (self.buy_amount or 0.0)
