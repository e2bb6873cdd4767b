"""Analytics: time and confidence rollups, closed-trade summary."""

from signal_desk.analytics.rollups import (
    BoundaryPolicy,
    BucketTotal,
    CONFIDENCE_BUCKETS,
    TIME_WINDOWS,
    confidence_rollup,
    time_rollup,
    trades_frame,
)
from signal_desk.analytics.metrics import (
    TradeSummary,
    compute_summary,
    win_rate,
    profit_factor,
    expectancy,
)

__all__ = [
    "BoundaryPolicy",
    "BucketTotal",
    "CONFIDENCE_BUCKETS",
    "TIME_WINDOWS",
    "confidence_rollup",
    "time_rollup",
    "trades_frame",
    "TradeSummary",
    "compute_summary",
    "win_rate",
    "profit_factor",
    "expectancy",
]
