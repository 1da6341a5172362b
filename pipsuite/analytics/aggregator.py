"""Performance statistics and breakdowns over a trade set.

All P&L statistics are computed over closed trades only. Open trades count
toward `total_trades` and nothing else. Every function recomputes from its
input and never mutates it.
"""

from collections import defaultdict
from typing import Callable, Iterable, Optional, Union

from pipsuite.analytics.filters import TradeFilter, apply_filters
from pipsuite.models import (
    DailyBucket,
    EquityPoint,
    GroupedResult,
    HourlyBucket,
    StatsSnapshot,
    Trade,
    WinLossDistribution,
)

# Profit factor reported when there are gains and no losses.
PROFIT_FACTOR_SENTINEL = 999.0

# Number of strategies shown on the dashboard.
TOP_STRATEGIES = 8

DIMENSION_DEFAULTS = {
    "setup": "No Setup",
    "symbol": "Unknown",
    "type": "Unknown",
    "account": "No Account",
    "tag": "No Tags",
}

Dimension = Union[str, Callable[[Trade], Optional[str]]]


def closed_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Closed trades, in input order."""
    return [trade for trade in trades if trade.is_closed]


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit divided by gross loss magnitude.

    Args:
        gross_profit: Sum of winning P&L.
        gross_loss: Sum of losing P&L (sign ignored).

    Returns:
        The ratio; PROFIT_FACTOR_SENTINEL when there is profit but no loss;
        0 when both are zero.
    """
    gross_loss = abs(gross_loss)
    if gross_loss == 0:
        return PROFIT_FACTOR_SENTINEL if gross_profit > 0 else 0.0
    return gross_profit / gross_loss


def expectancy(win_rate: float, avg_win: float, avg_loss: float) -> float:
    """Expected P&L per trade. `avg_loss` is a magnitude."""
    rate = win_rate / 100
    return rate * avg_win - (1 - rate) * avg_loss


def compute_stats(trades: Iterable[Trade]) -> StatsSnapshot:
    """Summary statistics of an already-filtered trade set."""
    trades = list(trades)
    closed = closed_trades(trades)
    if not closed:
        return StatsSnapshot(total_trades=len(trades))

    wins = [t.pnl for t in closed if t.pnl > 0]
    losses = [t.pnl for t in closed if t.pnl <= 0]

    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))
    win_rate = len(wins) / len(closed) * 100
    avg_win = gross_profit / len(wins) if wins else 0.0
    avg_loss = gross_loss / len(losses) if losses else 0.0
    pnls = [t.pnl for t in closed]

    return StatsSnapshot(
        total_trades=len(trades),
        closed_trades=len(closed),
        wins=len(wins),
        losses=len(losses),
        break_even=sum(1 for p in pnls if p == 0),
        win_rate=win_rate,
        net_pnl=gross_profit - gross_loss,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor(gross_profit, gross_loss),
        expectancy=expectancy(win_rate, avg_win, avg_loss),
        best_trade=max(max(pnls), 0.0),
        worst_trade=min(min(pnls), 0.0),
    )


def aggregate(trades: Iterable[Trade], filters: Optional[TradeFilter] = None) -> StatsSnapshot:
    """Filter a trade collection and reduce it to summary statistics.

    Args:
        trades: Trade collection from the store.
        filters: Active filters. Defaults to excluding soft-deleted trades.

    Returns:
        StatsSnapshot of the filtered trades.
    """
    return compute_stats(apply_filters(trades, filters))


def equity_curve(trades: Iterable[Trade]) -> list[EquityPoint]:
    """Cumulative P&L of closed trades in entry-time order.

    Trades sharing a timestamp keep their input order.
    """
    ordered = sorted(closed_trades(trades), key=lambda t: t.local_time)
    points = []
    running = 0.0
    for trade in ordered:
        running += trade.pnl
        points.append(
            EquityPoint(timestamp=trade.trade_time, cumulative_pnl=running, trade_pnl=trade.pnl)
        )
    return points


def daily_pnl(trades: Iterable[Trade]) -> list[DailyBucket]:
    """P&L and trade count per local calendar day, for days with trades."""
    totals = defaultdict(lambda: {"pnl": 0.0, "count": 0})
    for trade in closed_trades(trades):
        day = trade.local_time.date()
        totals[day]["pnl"] += trade.pnl
        totals[day]["count"] += 1
    return [
        DailyBucket(date=day, pnl=stats["pnl"], count=stats["count"])
        for day, stats in sorted(totals.items())
    ]


def hourly_pnl(trades: Iterable[Trade]) -> list[HourlyBucket]:
    """P&L and trade count for each hour of the day (always 24 buckets)."""
    pnl = [0.0] * 24
    count = [0] * 24
    for trade in closed_trades(trades):
        hour = trade.local_time.hour
        pnl[hour] += trade.pnl
        count[hour] += 1
    return [HourlyBucket(hour=hour, pnl=pnl[hour], count=count[hour]) for hour in range(24)]


def _group_keys(trade: Trade, dimension: Dimension) -> list[str]:
    if callable(dimension):
        return [dimension(trade) or "Unknown"]

    default = DIMENSION_DEFAULTS[dimension]
    if dimension == "tag":
        return list(dict.fromkeys(trade.tags)) or [default]
    if dimension == "setup":
        value = trade.setup.strip()
    elif dimension == "symbol":
        value = trade.symbol.upper()
    elif dimension == "type":
        value = trade.type.value
    else:
        value = trade.account_id
    return [value or default]


def breakdown_by(
    trades: Iterable[Trade],
    dimension: Dimension = "setup",
    top: Optional[int] = None,
) -> list[GroupedResult]:
    """Closed-trade performance grouped by a dimension.

    Args:
        trades: Trades to group.
        dimension: One of "setup", "symbol", "type", "account", "tag", or a
            callable returning the group key of a trade. With "tag" a trade
            counts once under each of its tags.
        top: Optional cap on the number of groups returned.

    Returns:
        Groups sorted by descending P&L; ties keep first-seen order.

    Raises:
        ValueError: If the dimension name is unknown.
    """
    if not callable(dimension) and dimension not in DIMENSION_DEFAULTS:
        raise ValueError(
            f"Unknown dimension: {dimension}. Must be one of {list(DIMENSION_DEFAULTS)}"
        )

    groups = {}
    for trade in closed_trades(trades):
        for key in _group_keys(trade, dimension):
            current = groups.setdefault(key, {"pnl": 0.0, "count": 0, "wins": 0})
            current["pnl"] += trade.pnl
            current["count"] += 1
            current["wins"] += 1 if trade.pnl > 0 else 0

    results = [
        GroupedResult(
            key=key,
            pnl=data["pnl"],
            count=data["count"],
            wins=data["wins"],
            win_rate=data["wins"] / data["count"] * 100,
        )
        for key, data in groups.items()
    ]
    results.sort(key=lambda r: r.pnl, reverse=True)
    if top is not None:
        results = results[:max(top, 0)]
    return results


def distribution(trades: Iterable[Trade]) -> WinLossDistribution:
    """Closed trades split into wins, losses and break-even."""
    closed = closed_trades(trades)
    return WinLossDistribution(
        wins=sum(1 for t in closed if t.pnl > 0),
        losses=sum(1 for t in closed if t.pnl < 0),
        break_even=sum(1 for t in closed if t.pnl == 0),
    )
