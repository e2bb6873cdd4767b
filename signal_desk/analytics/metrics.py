"""
Closed-trade summary: totals, win rate, profit factor, expectancy.
Uses the same realized-profit and cost rules as the rollups.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from signal_desk.core.types import ClosedTrade


@dataclass
class TradeSummary:
    """Aggregate closed-trade statistics."""
    total_trades: int
    winning_trades: int
    losing_trades: int
    total_profit: float
    total_cost: float
    return_pct: Optional[float]
    win_rate: float
    profit_factor: float
    expectancy: float
    avg_win: float
    avg_loss: float


def win_rate(pnls: List[float]) -> float:
    """Fraction of trades with positive PnL."""
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls)


def profit_factor(pnls: List[float]) -> float:
    """Gross profit / gross loss. inf when there are wins but no losses, 0 when neither."""
    wins = sum(p for p in pnls if p > 0)
    losses = sum(-p for p in pnls if p < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def expectancy(pnls: List[float]) -> float:
    """Average PnL per trade."""
    if not pnls:
        return 0.0
    return sum(pnls) / len(pnls)


def compute_summary(trades: Sequence[ClosedTrade]) -> TradeSummary:
    """Summary over all given closed trades. Trades with no realized profit count as 0."""
    pnls = np.array([t.realized_profit or 0.0 for t in trades], dtype=float)
    costs = np.array([t.cost_basis for t in trades], dtype=float)
    total_cost = float(costs.sum())
    total_profit = float(pnls.sum())
    wins = pnls[pnls > 0]
    losses = pnls[pnls < 0]
    as_list = pnls.tolist()
    return TradeSummary(
        total_trades=len(as_list),
        winning_trades=int(wins.size),
        losing_trades=int(losses.size),
        total_profit=total_profit,
        total_cost=total_cost,
        return_pct=total_profit / total_cost * 100.0 if total_cost else None,
        win_rate=win_rate(as_list),
        profit_factor=profit_factor(as_list),
        expectancy=expectancy(as_list),
        avg_win=float(wins.mean()) if wins.size else 0.0,
        avg_loss=float(losses.mean()) if losses.size else 0.0,
    )
