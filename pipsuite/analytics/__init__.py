"""Trade filtering and performance analytics."""

from pipsuite.analytics.aggregator import (
    PROFIT_FACTOR_SENTINEL,
    TOP_STRATEGIES,
    aggregate,
    breakdown_by,
    closed_trades,
    compute_stats,
    daily_pnl,
    distribution,
    equity_curve,
    expectancy,
    hourly_pnl,
    profit_factor,
)
from pipsuite.analytics.filters import NumberCondition, TradeFilter, apply_filters, matches

__all__ = [
    "PROFIT_FACTOR_SENTINEL",
    "TOP_STRATEGIES",
    "NumberCondition",
    "TradeFilter",
    "aggregate",
    "apply_filters",
    "breakdown_by",
    "closed_trades",
    "compute_stats",
    "daily_pnl",
    "distribution",
    "equity_curve",
    "expectancy",
    "hourly_pnl",
    "matches",
    "profit_factor",
]
