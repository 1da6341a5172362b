"""Tests for the journal database store.

**Feature: trade-journal**
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pipsuite.db import (
    DEFAULT_ACCOUNT,
    DEFAULT_STRATEGIES,
    DEFAULT_TAG_GROUPS,
    DataStore,
    SettingsCache,
)
from pipsuite.models import Account, TagGroup, Trade, TradeOutcome, TradePartial, TradeStatus


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


def make_trade(trade_id: str = "t1", **overrides) -> Trade:
    values = {
        "id": trade_id,
        "symbol": "XAUUSD",
        "entry_price": 2000.0,
        "quantity": 0.1,
        "entry_date": datetime(2024, 3, 15, 10, 30),
        "created_at": datetime(2024, 3, 15, 10, 31),
    }
    values.update(overrides)
    return Trade(**values)


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, all required tables should exist.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        tables = temp_db.get_tables()
        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_stats_count_rows(self, temp_db: DataStore):
        temp_db.save_trade(make_trade())
        assert temp_db.get_stats()["trades"] == 1


class TestTradePersistence:
    """
    **Feature: trade-journal, Property: Trade Round Trip**

    *For any* trade saved to the store, reading it back returns an equal trade.
    """

    @given(
        pnl=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
        tags=st.lists(st.sampled_from(["#FOMO", "#TP", "#SMC"]), unique=True),
        setup=st.text(
            alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd", "Zs")),
            max_size=20,
        ),
        closed=st.booleans(),
    )
    @settings(max_examples=30)
    def test_round_trip(self, pnl, tags, setup, closed):
        """*For any* trade, save then load returns the same trade."""
        trade = make_trade(
            pnl=pnl,
            tags=tags,
            setup=setup,
            outcome=TradeOutcome.CLOSED if closed else TradeOutcome.OPEN,
            exit_price=2010.0 if closed else None,
            partials=[TradePartial(quantity=0.05, price=2005.0, pnl=25.0, closed_at=datetime(2024, 3, 15, 11))],
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            store.save_trade(trade)
            assert store.get_trade(trade.id) == trade

    def test_upsert(self, temp_db: DataStore):
        temp_db.save_trade(make_trade(notes="before"))
        temp_db.save_trade(make_trade(notes="after"))
        trades = temp_db.get_trades()
        assert len(trades) == 1
        assert trades[0].notes == "after"

    def test_filter_by_account(self, temp_db: DataStore):
        temp_db.save_trades([make_trade("a"), make_trade("b", account_id="acc_2")])
        assert [t.id for t in temp_db.get_trades("acc_2")] == ["b"]
        assert [t.id for t in temp_db.get_trades()] == ["a", "b"]

    def test_missing_trade(self, temp_db: DataStore):
        assert temp_db.get_trade("nope") is None


class TestSoftDelete:
    """Trash lifecycle and balance reversal."""

    def test_delete_reverses_balance(self, temp_db: DataStore):
        temp_db.get_accounts()
        trade = make_trade(
            pnl=150.0, outcome=TradeOutcome.CLOSED, status=TradeStatus.WIN, is_balance_updated=True
        )
        temp_db.save_trade(trade)
        temp_db.adjust_account_balance("default_1", 150.0)

        deleted = temp_db.soft_delete_trades([trade.id], now=datetime(2024, 4, 1))
        assert deleted[0].is_deleted
        assert temp_db.get_trade(trade.id).deleted_at == datetime(2024, 4, 1)
        assert temp_db.get_account("default_1").balance == pytest.approx(10000.0)

        temp_db.restore_trades([trade.id])
        restored = temp_db.get_trade(trade.id)
        assert not restored.is_deleted
        assert restored.deleted_at is None
        assert temp_db.get_account("default_1").balance == pytest.approx(10150.0)

    def test_delete_without_balance_impact(self, temp_db: DataStore):
        temp_db.get_accounts()
        temp_db.save_trade(make_trade(pnl=150.0, outcome=TradeOutcome.CLOSED))
        temp_db.soft_delete_trades(["t1"])
        assert temp_db.get_account("default_1").balance == pytest.approx(10000.0)

    def test_delete_twice_is_noop(self, temp_db: DataStore):
        temp_db.save_trade(make_trade())
        temp_db.soft_delete_trades(["t1"])
        assert temp_db.soft_delete_trades(["t1"]) == []

    def test_unknown_trade(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.soft_delete_trades(["missing"])

    def test_purge_respects_retention(self, temp_db: DataStore):
        now = datetime(2024, 5, 1)
        temp_db.save_trades([make_trade("old"), make_trade("recent"), make_trade("kept")])
        temp_db.soft_delete_trades(["old"], now=now - timedelta(days=31))
        temp_db.soft_delete_trades(["recent"], now=now - timedelta(days=5))

        assert temp_db.purge_deleted(now=now) == 1
        assert [t.id for t in temp_db.get_trades()] == ["recent", "kept"]

    def test_remove_tag(self, temp_db: DataStore):
        temp_db.save_trades([make_trade("a", tags=["#FOMO", "#TP"]), make_trade("b", tags=["#TP"])])
        assert temp_db.remove_tag("#FOMO") == 1
        assert temp_db.get_trade("a").tags == ["#TP"]


class TestAccounts:
    def test_default_account_created(self, temp_db: DataStore):
        assert temp_db.get_accounts() == [DEFAULT_ACCOUNT]
        assert temp_db.get_stats()["accounts"] == 1

    def test_save_and_adjust(self, temp_db: DataStore):
        temp_db.save_account(Account(id="acc_2", name="Prop", currency="EUR", balance=500.0))
        assert temp_db.adjust_account_balance("acc_2", -125.5) == pytest.approx(374.5)
        assert temp_db.get_account("acc_2").currency == "EUR"

    def test_adjust_unknown_account(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.adjust_account_balance("missing", 10)


class TestSettings:
    def test_defaults_initialized(self, temp_db: DataStore):
        assert temp_db.get_strategies() == DEFAULT_STRATEGIES
        assert [g.name for g in temp_db.get_tag_groups()] == [g.name for g in DEFAULT_TAG_GROUPS]
        assert temp_db.get_setting("strategies") == DEFAULT_STRATEGIES

    def test_per_user_settings(self, temp_db: DataStore):
        temp_db.save_strategies(["Mine"], user_id="u1")
        assert temp_db.get_strategies("u1") == ["Mine"]
        assert temp_db.get_strategies() == DEFAULT_STRATEGIES

    def test_setting_default(self, temp_db: DataStore):
        assert temp_db.get_setting("missing", {"a": 1}) == {"a": 1}


class FlakyStore:
    """Store stand-in whose writes can be made to fail."""

    def __init__(self, store: DataStore):
        self.store = store
        self.fail = False
        self.reads = 0

    def get_tag_groups(self, user_id=None):
        self.reads += 1
        return self.store.get_tag_groups(user_id)

    def save_tag_groups(self, groups, user_id=None):
        if self.fail:
            raise OSError("write failed")
        self.store.save_tag_groups(groups, user_id)

    def get_strategies(self, user_id=None):
        self.reads += 1
        return self.store.get_strategies(user_id)

    def save_strategies(self, strategies, user_id=None):
        if self.fail:
            raise OSError("write failed")
        self.store.save_strategies(strategies, user_id)


class TestSettingsCache:
    """Optimistic per-user cache with rollback."""

    def test_reads_are_cached(self, temp_db: DataStore):
        flaky = FlakyStore(temp_db)
        cache = SettingsCache(flaky)
        cache.get_strategies("u1")
        cache.get_strategies("u1")
        assert flaky.reads == 1

        cache.invalidate("u1")
        cache.get_strategies("u1")
        assert flaky.reads == 2

    def test_optimistic_save(self, temp_db: DataStore):
        cache = SettingsCache(temp_db)
        cache.save_strategies(["A", "B"], "u1")
        assert cache.get_strategies("u1") == ["A", "B"]
        assert temp_db.get_strategies("u1") == ["A", "B"]

    def test_rollback_on_failure(self, temp_db: DataStore):
        flaky = FlakyStore(temp_db)
        cache = SettingsCache(flaky)
        before = cache.get_tag_groups()

        flaky.fail = True
        with pytest.raises(OSError):
            cache.save_tag_groups([TagGroup(name="Only", tags=["#X"])])
        assert cache.get_tag_groups() == before

    def test_rollback_without_previous_value(self, temp_db: DataStore):
        flaky = FlakyStore(temp_db)
        cache = SettingsCache(flaky)
        flaky.fail = True
        with pytest.raises(OSError):
            cache.save_strategies(["A"], "u2")
        flaky.fail = False
        assert cache.get_strategies("u2") == DEFAULT_STRATEGIES
