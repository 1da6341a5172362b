"""Tests for performance statistics and breakdowns.

**Feature: performance-analytics**
"""

import random
from datetime import date, datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pipsuite.analytics import (
    PROFIT_FACTOR_SENTINEL,
    TOP_STRATEGIES,
    TradeFilter,
    aggregate,
    breakdown_by,
    compute_stats,
    daily_pnl,
    distribution,
    equity_curve,
    expectancy,
    hourly_pnl,
    profit_factor,
)
from pipsuite.models import Trade, TradeOutcome, TradeStatus


def closed(trade_id: str, pnl: float, when: datetime = datetime(2024, 3, 15, 10, 0), **overrides) -> Trade:
    status = TradeStatus.WIN if pnl > 0 else TradeStatus.LOSS if pnl < 0 else TradeStatus.BREAK_EVEN
    values = {
        "id": trade_id,
        "symbol": "XAUUSD",
        "entry_price": 2000.0,
        "quantity": 0.1,
        "pnl": pnl,
        "status": status,
        "outcome": TradeOutcome.CLOSED,
        "entry_date": when,
    }
    values.update(overrides)
    return Trade(**values)


def opened(trade_id: str, **overrides) -> Trade:
    values = {"id": trade_id, "symbol": "XAUUSD", "entry_price": 2000.0, "quantity": 0.1}
    values.update(overrides)
    return Trade(**values)


pnl_values = st.floats(min_value=-10000.0, max_value=10000.0, allow_nan=False, allow_infinity=False)


def closed_trade_strategy():
    return st.builds(
        closed,
        trade_id=st.text(alphabet="abcdef0123456789", min_size=1, max_size=8),
        pnl=st.one_of(st.just(0.0), pnl_values),
        when=st.datetimes(min_value=datetime(2024, 1, 1), max_value=datetime(2024, 12, 31)),
        setup=st.sampled_from(["", "SMC", "Scalping", "Break-Retest"]),
    )


class TestStatsScenario:
    """Three closed trades: +100, -50 and break-even."""

    def test_basic_stats(self):
        stats = compute_stats([closed("a", 100), closed("b", -50), closed("c", 0)])

        assert stats.total_trades == 3
        assert stats.closed_trades == 3
        assert stats.wins == 1
        assert stats.break_even == 1
        assert stats.win_rate == pytest.approx(33.333, rel=1e-3)
        assert stats.net_pnl == pytest.approx(50)
        assert stats.profit_factor == pytest.approx(2.0)
        assert stats.avg_win == pytest.approx(100)
        assert stats.avg_loss == pytest.approx(25)
        assert stats.best_trade == 100
        assert stats.worst_trade == -50

    def test_expectancy(self):
        stats = compute_stats([closed("a", 100), closed("b", -50)])
        assert stats.expectancy == pytest.approx(0.5 * 100 - 0.5 * 50)
        assert expectancy(40.0, 200.0, 100.0) == pytest.approx(20.0)

    def test_open_trades_only_count_toward_total(self):
        trades = [closed("a", 100), closed("b", -50), opened("c", pnl=1_000_000)]
        stats = compute_stats(trades)
        assert stats.total_trades == 3
        assert stats.closed_trades == 2
        assert stats.net_pnl == pytest.approx(50)
        assert stats.best_trade == 100

    def test_no_closed_trades(self):
        stats = compute_stats([opened("a")])
        assert stats.total_trades == 1
        assert stats.win_rate == 0
        assert stats.profit_factor == 0

    def test_best_and_worst_are_floored_at_zero(self):
        assert compute_stats([closed("a", -20)]).best_trade == 0
        assert compute_stats([closed("a", 20)]).worst_trade == 0


class TestProfitFactor:
    def test_sentinel_without_losses(self):
        assert profit_factor(100, 0) == PROFIT_FACTOR_SENTINEL
        assert compute_stats([closed("a", 10), closed("b", 5)]).profit_factor == PROFIT_FACTOR_SENTINEL

    def test_zero_without_activity(self):
        assert profit_factor(0, 0) == 0

    def test_loss_sign_is_ignored(self):
        assert profit_factor(150, -50) == pytest.approx(3.0)


class TestOrderIndependence:
    """
    **Feature: performance-analytics, Property: Order Independence**

    *For any* trade set, scalar statistics do not depend on input order.
    """

    @given(trades=st.lists(closed_trade_strategy(), min_size=1, max_size=30), seed=st.integers())
    @settings(max_examples=100)
    def test_shuffle_invariance(self, trades, seed):
        """*For any* permutation, the statistics are the same."""
        shuffled = list(trades)
        random.Random(seed).shuffle(shuffled)

        a, b = compute_stats(trades), compute_stats(shuffled)
        assert a.closed_trades == b.closed_trades
        assert a.wins == b.wins
        assert a.win_rate == pytest.approx(b.win_rate)
        assert a.net_pnl == pytest.approx(b.net_pnl, abs=1e-6)
        assert a.profit_factor == pytest.approx(b.profit_factor, rel=1e-9, abs=1e-9)
        assert a.best_trade == b.best_trade
        assert a.worst_trade == b.worst_trade

    @given(trades=st.lists(closed_trade_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_win_rate_bounds(self, trades):
        """*For any* trade set, win rate stays within [0, 100]."""
        stats = compute_stats(trades)
        assert 0 <= stats.win_rate <= 100
        assert stats.wins + stats.losses == stats.closed_trades


class TestAggregate:
    def test_filters_applied_before_reduction(self):
        trades = [
            closed("a", 100, account_id="acc_2"),
            closed("b", -50),
            closed("c", 40, is_deleted=True, deleted_at=datetime(2024, 4, 1)),
        ]
        assert aggregate(trades).closed_trades == 2
        assert aggregate(trades, TradeFilter(account_id="acc_2")).net_pnl == pytest.approx(100)


class TestEquityCurve:
    def test_cumulative_in_time_order(self):
        trades = [
            closed("b", -50, datetime(2024, 3, 2, 9)),
            closed("a", 100, datetime(2024, 3, 1, 9)),
            opened("c", entry_date=datetime(2024, 3, 3, 9)),
        ]
        points = equity_curve(trades)
        assert [p.trade_pnl for p in points] == [100, -50]
        assert [p.cumulative_pnl for p in points] == [100, 50]

    def test_equal_timestamps_keep_input_order(self):
        when = datetime(2024, 3, 1, 9)
        points = equity_curve([closed("a", 1, when), closed("b", 2, when), closed("c", 3, when)])
        assert [p.trade_pnl for p in points] == [1, 2, 3]

    @given(trades=st.lists(closed_trade_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_last_point_is_net(self, trades):
        """*For any* trade set, the curve ends at the summed P&L."""
        points = equity_curve(trades)
        if points:
            assert points[-1].cumulative_pnl == pytest.approx(sum(t.pnl for t in trades), abs=1e-6)


class TestBuckets:
    def test_daily_buckets_sorted_and_non_empty(self):
        trades = [
            closed("a", 10, datetime(2024, 3, 2, 9)),
            closed("b", 20, datetime(2024, 3, 1, 9)),
            closed("c", -5, datetime(2024, 3, 2, 15)),
        ]
        buckets = daily_pnl(trades)
        assert [b.date for b in buckets] == [date(2024, 3, 1), date(2024, 3, 2)]
        assert buckets[1].pnl == pytest.approx(5)
        assert buckets[1].count == 2

    @given(trades=st.lists(closed_trade_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_always_24_hours(self, trades):
        """*For any* trade set, there is one bucket per hour of the day."""
        buckets = hourly_pnl(trades)
        assert [b.hour for b in buckets] == list(range(24))
        assert sum(b.count for b in buckets) == len(trades)

    def test_hour_labels(self):
        buckets = hourly_pnl([closed("a", 10, datetime(2024, 3, 1, 14, 45))])
        assert buckets[14].count == 1
        assert buckets[14].label == "14:00"
        assert buckets[0].label == "0:00"


class TestBreakdown:
    def test_setup_breakdown(self):
        trades = [
            closed("a", 100, setup="SMC"),
            closed("b", -30, setup="SMC"),
            closed("c", 20, setup=""),
            closed("d", 50, setup="Scalping"),
        ]
        results = breakdown_by(trades)
        assert [r.key for r in results] == ["SMC", "Scalping", "No Setup"]
        assert results[0].count == 2
        assert results[0].win_rate == pytest.approx(50)

    def test_top_strategies(self):
        trades = [closed(str(i), float(i), setup=f"S{i}") for i in range(12)]
        results = breakdown_by(trades, top=TOP_STRATEGIES)
        assert len(results) == 8
        assert results[0].key == "S11"

    def test_tag_dimension_counts_each_tag(self):
        trades = [closed("a", 10, tags=["#TP", "#FOMO"]), closed("b", -5)]
        results = {r.key: r for r in breakdown_by(trades, "tag")}
        assert set(results) == {"#TP", "#FOMO", "No Tags"}

    def test_callable_dimension(self):
        results = breakdown_by([closed("a", 10), closed("b", -5)], lambda t: t.status.value)
        assert [r.key for r in results] == ["WIN", "LOSS"]

    def test_unknown_dimension(self):
        with pytest.raises(ValueError):
            breakdown_by([], "weekday")

    def test_distribution(self):
        split = distribution([closed("a", 10), closed("b", -5), closed("c", 0), opened("d")])
        assert (split.wins, split.losses, split.break_even) == (1, 1, 1)
