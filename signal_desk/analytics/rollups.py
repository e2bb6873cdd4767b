"""
Profit rollups over closed trades: by trailing time window and by confidence score.
One engine for both units; the display unit only changes which number is read out.
Recomputed from scratch on every call.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from signal_desk.core.types import ClosedTrade, DisplayUnit
from signal_desk.utils.timeframes import window_days

logger = logging.getLogger("signal_desk.analytics.rollups")

TIME_WINDOWS: Tuple[str, ...] = ("1d", "3d", "7d", "1m", "3m", "1y")
CONFIDENCE_BUCKETS: Tuple[Tuple[float, float], ...] = ((10, 50), (50, 80), (80, 90), (90, 100))
PLACEHOLDER = "-"


class BoundaryPolicy(str, Enum):
    """
    INCLUSIVE: every bucket is [lo, hi], so shared edges (50, 80) count in both neighbours.
    HALF_OPEN: [lo, hi) except the last bucket, which is closed; each score lands once.
    """
    INCLUSIVE = "inclusive"
    HALF_OPEN = "half_open"


@dataclass
class BucketTotal:
    """Summed realized profit and cost basis for one bucket."""
    label: str
    profit: float
    cost: float
    count: int

    @property
    def pct(self) -> Optional[float]:
        """Profit as percent of cost basis; None when there is no cost."""
        if self.cost == 0:
            return None
        return self.profit / self.cost * 100.0

    def value(self, unit: Union[DisplayUnit, str] = DisplayUnit.USD) -> Optional[float]:
        return self.pct if DisplayUnit(unit) == DisplayUnit.PCT else self.profit

    def format_value(self, unit: Union[DisplayUnit, str] = DisplayUnit.USD) -> str:
        v = self.value(unit)
        if v is None:
            return PLACEHOLDER
        if DisplayUnit(unit) == DisplayUnit.PCT:
            return f"{v:+.2f}%"
        return f"{'-' if v < 0 else '+'}${abs(v):,.2f}"


def trades_frame(trades: Sequence[ClosedTrade]) -> pd.DataFrame:
    """
    One row per trade: closed_at (UTC, NaT when missing), profit, cost, confidence.
    A trade with neither stored profit nor close price contributes 0 profit.
    """
    rows = [
        {
            "closed_at": t.closed_at,
            "profit": t.realized_profit,
            "cost": t.cost_basis,
            "confidence": t.confidence_score if t.confidence_score is not None else np.nan,
        }
        for t in trades
    ]
    df = pd.DataFrame(rows, columns=["closed_at", "profit", "cost", "confidence"])
    df["closed_at"] = pd.to_datetime(df["closed_at"], utc=True, errors="coerce")
    df["profit"] = df["profit"].astype(float).fillna(0.0)
    df["cost"] = df["cost"].astype(float)
    df["confidence"] = df["confidence"].astype(float)
    return df


def _total(label: str, df: pd.DataFrame, mask: pd.Series) -> BucketTotal:
    sel = df[mask]
    return BucketTotal(
        label=label,
        profit=float(sel["profit"].sum()),
        cost=float(sel["cost"].sum()),
        count=int(len(sel)),
    )


def time_rollup(
    trades: Sequence[ClosedTrade],
    now: Optional[datetime] = None,
    windows: Sequence[str] = TIME_WINDOWS,
) -> List[BucketTotal]:
    """
    For each trailing window, totals over trades with closed_at >= now - window.
    No upper bound, so future-dated closes count. Trades without a close date never count.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    df = trades_frame(trades)
    out = []
    for label in windows:
        since = pd.Timestamp(now - timedelta(days=window_days(label)))
        mask = df["closed_at"].notna() & (df["closed_at"] >= since)
        out.append(_total(label, df, mask))
    return out


def _bucket_label(lo: float, hi: float) -> str:
    return f"{lo:g}-{hi:g}"


def confidence_rollup(
    trades: Sequence[ClosedTrade],
    buckets: Sequence[Tuple[float, float]] = CONFIDENCE_BUCKETS,
    boundary: Union[BoundaryPolicy, str] = BoundaryPolicy.INCLUSIVE,
) -> List[BucketTotal]:
    """Totals per confidence-score range. Trades without a score are skipped."""
    boundary = BoundaryPolicy(boundary)
    df = trades_frame(trades)
    score = df["confidence"]
    out = []
    for i, (lo, hi) in enumerate(buckets):
        last = i == len(buckets) - 1
        if boundary == BoundaryPolicy.INCLUSIVE or last:
            mask = (score >= lo) & (score <= hi)
        else:
            mask = (score >= lo) & (score < hi)
        out.append(_total(_bucket_label(lo, hi), df, mask))
    return out
