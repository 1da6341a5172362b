"""SQLite data store for pipsuite."""

import json
import logging
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable, Optional

from pipsuite.models import Account, TagGroup, Trade, TradePartial

logger = logging.getLogger(__name__)

# Soft-deleted trades older than this are purged.
TRASH_RETENTION_DAYS = 30

DEFAULT_ACCOUNT = Account(
    id="default_1",
    name="Main Account",
    currency="USD",
    balance=10000.0,
    is_demo=False,
    type="Real",
)

DEFAULT_TAG_GROUPS = [
    TagGroup(
        name="Technical",
        tags=["#BOS", "#CHoCH", "#OB", "#FVG", "#Liquidity-Sweep", "#POI-Entry",
              "#Inducement", "#Premium", "#Discount", "#Stop-Hunt", "#Mitigation",
              "#Eq-Highs", "#Eq-Lows"],
    ),
    TagGroup(
        name="Execution",
        tags=["#Break-Even", "#Partial", "#Early-Exit", "#Late-Chased", "#News-Vol",
              "#Manual-Close", "#Trailing", "#TP", "#SL"],
    ),
    TagGroup(
        name="Emotional",
        tags=["#FOMO", "#Revenge", "#Greed", "#Hesitation", "#Hope", "#Boredom",
              "#Over-Confidence", "#Impulsive", "#Disciplined", "#Anxious", "#Distracted"],
    ),
    TagGroup(
        name="Risk Management",
        tags=["#Fixed-Risk", "#Wrong-Risk", "#BE-Aggressive", "#BE-Passive",
              "#Over-Leveraged", "#Multiple-Risk", "#Max-Drawdown", "#Daily-Drawdown",
              "#Recovery-Risk"],
    ),
]

DEFAULT_STRATEGIES = [
    "SMC",
    "Price-Action",
    "Supply-Demand",
    "Trend-Following",
    "Break-Retest",
    "News-Trading",
    "Range-Trading",
    "Scalping",
    "Order-Flow",
    "Gap-Fill",
]

TRADE_COLUMNS = [
    "id", "account_id", "symbol", "type", "status", "outcome", "order_type",
    "entry_price", "exit_price", "stop_loss", "take_profit", "quantity",
    "pnl", "main_pnl", "fees", "delta_from_plan", "partials",
    "risk_percentage", "leverage", "created_at", "entry_date", "exit_date",
    "tags", "setup", "notes", "is_deleted", "deleted_at", "is_balance_updated",
]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _settings_key(name: str, user_id: Optional[str]) -> str:
    return f"{name}_{user_id}" if user_id else name


class DataStore:
    """SQLite-based journal store."""

    REQUIRED_TABLES = [
        "trades",
        "accounts",
        "settings",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    account_id TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    type TEXT NOT NULL,
                    status TEXT NOT NULL,
                    outcome TEXT NOT NULL,
                    order_type TEXT NOT NULL,
                    entry_price REAL NOT NULL,
                    exit_price REAL,
                    stop_loss REAL,
                    take_profit REAL,
                    quantity REAL NOT NULL,
                    pnl REAL NOT NULL DEFAULT 0,
                    main_pnl REAL,
                    fees REAL NOT NULL DEFAULT 0,
                    delta_from_plan REAL NOT NULL DEFAULT 0,
                    partials TEXT NOT NULL DEFAULT '[]',
                    risk_percentage REAL,
                    leverage REAL,
                    created_at TEXT NOT NULL,
                    entry_date TEXT,
                    exit_date TEXT,
                    tags TEXT NOT NULL DEFAULT '[]',
                    setup TEXT NOT NULL DEFAULT '',
                    notes TEXT NOT NULL DEFAULT '',
                    is_deleted INTEGER NOT NULL DEFAULT 0,
                    deleted_at TEXT,
                    is_balance_updated INTEGER NOT NULL DEFAULT 0
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    currency TEXT NOT NULL,
                    balance REAL NOT NULL DEFAULT 0,
                    is_demo INTEGER NOT NULL DEFAULT 0,
                    type TEXT NOT NULL
                )
            """)

            # JSON values keyed by setting name (optionally per user)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    @staticmethod
    def _trade_params(trade: Trade) -> tuple:
        return (
            trade.id,
            trade.account_id,
            trade.symbol,
            trade.type.value,
            trade.status.value,
            trade.outcome.value,
            trade.order_type.value,
            trade.entry_price,
            trade.exit_price,
            trade.stop_loss,
            trade.take_profit,
            trade.quantity,
            trade.pnl,
            trade.main_pnl,
            trade.fees,
            trade.delta_from_plan,
            json.dumps([p.model_dump(mode="json") for p in trade.partials]),
            trade.risk_percentage,
            trade.leverage,
            trade.created_at.isoformat(),
            _iso(trade.entry_date),
            _iso(trade.exit_date),
            json.dumps(trade.tags),
            trade.setup,
            trade.notes,
            1 if trade.is_deleted else 0,
            _iso(trade.deleted_at),
            1 if trade.is_balance_updated else 0,
        )

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> Trade:
        return Trade(
            id=row["id"],
            account_id=row["account_id"],
            symbol=row["symbol"],
            type=row["type"],
            status=row["status"],
            outcome=row["outcome"],
            order_type=row["order_type"],
            entry_price=row["entry_price"],
            exit_price=row["exit_price"],
            stop_loss=row["stop_loss"],
            take_profit=row["take_profit"],
            quantity=row["quantity"],
            pnl=row["pnl"],
            main_pnl=row["main_pnl"],
            fees=row["fees"],
            delta_from_plan=row["delta_from_plan"],
            partials=[TradePartial(**p) for p in json.loads(row["partials"])],
            risk_percentage=row["risk_percentage"],
            leverage=row["leverage"],
            created_at=datetime.fromisoformat(row["created_at"]),
            entry_date=_parse_dt(row["entry_date"]),
            exit_date=_parse_dt(row["exit_date"]),
            tags=json.loads(row["tags"]),
            setup=row["setup"],
            notes=row["notes"],
            is_deleted=bool(row["is_deleted"]),
            deleted_at=_parse_dt(row["deleted_at"]),
            is_balance_updated=bool(row["is_balance_updated"]),
        )

    def save_trade(self, trade: Trade) -> None:
        """Insert or replace a trade.

        Args:
            trade: Trade to save.
        """
        self.save_trades([trade])

    def save_trades(self, trades: Iterable[Trade]) -> None:
        """Insert or replace several trades in one transaction.

        Args:
            trades: Trades to save.
        """
        placeholders = ", ".join("?" for _ in TRADE_COLUMNS)
        # Upsert in place so a trade keeps its position in insertion order
        updates = ", ".join(f"{col} = excluded.{col}" for col in TRADE_COLUMNS if col != "id")
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for trade in trades:
                cursor.execute(
                    f"INSERT INTO trades ({', '.join(TRADE_COLUMNS)}) VALUES ({placeholders}) "
                    f"ON CONFLICT(id) DO UPDATE SET {updates}",
                    self._trade_params(trade),
                )
            conn.commit()
        finally:
            conn.close()

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        """Get a trade by ID.

        Args:
            trade_id: Trade ID.

        Returns:
            Trade if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM trades WHERE id = ?", (trade_id,))
            row = cursor.fetchone()
            return self._row_to_trade(row) if row else None
        finally:
            conn.close()

    def get_trades(self, account_id: Optional[str] = None) -> list[Trade]:
        """Get trades, including soft-deleted ones.

        Args:
            account_id: Optional account filter. If None, returns all trades.

        Returns:
            Trades in insertion order.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            if account_id:
                cursor.execute(
                    "SELECT * FROM trades WHERE account_id = ? ORDER BY rowid",
                    (account_id,),
                )
            else:
                cursor.execute("SELECT * FROM trades ORDER BY rowid")
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _require_trades(self, trade_ids: Iterable[str]) -> list[Trade]:
        trades = []
        for trade_id in trade_ids:
            trade = self.get_trade(trade_id)
            if trade is None:
                raise ValueError(f"Trade not found: {trade_id}")
            trades.append(trade)
        return trades

    def soft_delete_trades(
        self, trade_ids: Iterable[str], now: Optional[datetime] = None
    ) -> list[Trade]:
        """Move trades to the trash.

        Trades whose P&L was applied to their account have it reversed.

        Args:
            trade_ids: IDs of trades to delete.
            now: Deletion time; defaults to now.

        Returns:
            The deleted trades.

        Raises:
            ValueError: If a trade ID is unknown.
        """
        now = now or datetime.now()
        deleted = []
        for trade in self._require_trades(trade_ids):
            if trade.is_deleted:
                continue
            if trade.is_balance_updated and trade.pnl != 0:
                self.adjust_account_balance(trade.account_id, -trade.pnl)
            deleted.append(trade.model_copy(update={"is_deleted": True, "deleted_at": now}))
        self.save_trades(deleted)
        return deleted

    def restore_trades(self, trade_ids: Iterable[str]) -> list[Trade]:
        """Restore trades from the trash, re-applying balance impact.

        Raises:
            ValueError: If a trade ID is unknown.
        """
        restored = []
        for trade in self._require_trades(trade_ids):
            if not trade.is_deleted:
                continue
            if trade.is_balance_updated and trade.pnl != 0:
                self.adjust_account_balance(trade.account_id, trade.pnl)
            restored.append(trade.model_copy(update={"is_deleted": False, "deleted_at": None}))
        self.save_trades(restored)
        return restored

    def purge_deleted(
        self, retention_days: int = TRASH_RETENTION_DAYS, now: Optional[datetime] = None
    ) -> int:
        """Permanently delete trashed trades older than the retention window.

        Returns:
            Number of purged trades.
        """
        cutoff = (now or datetime.now()) - timedelta(days=retention_days)
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE is_deleted = 1 AND deleted_at IS NOT NULL AND deleted_at < ?",
                (cutoff.isoformat(),),
            )
            conn.commit()
            purged = cursor.rowcount
        finally:
            conn.close()
        if purged:
            logger.info("Purged %d trades deleted before %s", purged, cutoff.date())
        return purged

    def remove_tag(self, tag: str) -> int:
        """Remove a tag from every trade carrying it.

        Returns:
            Number of trades updated.
        """
        updated = [
            trade.model_copy(update={"tags": [t for t in trade.tags if t != tag]})
            for trade in self.get_trades()
            if tag in trade.tags
        ]
        self.save_trades(updated)
        return len(updated)

    # ==================== Accounts ====================

    def save_account(self, account: Account) -> None:
        """Insert or replace an account.

        Args:
            account: Account to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO accounts (id, name, currency, balance, is_demo, type)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    currency = excluded.currency,
                    balance = excluded.balance,
                    is_demo = excluded.is_demo,
                    type = excluded.type
                """,
                (
                    account.id,
                    account.name,
                    account.currency,
                    account.balance,
                    1 if account.is_demo else 0,
                    account.type,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_accounts(self) -> list[Account]:
        """Get all accounts, creating the default account on first use.

        Returns:
            List of accounts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, name, currency, balance, is_demo, type FROM accounts ORDER BY rowid"
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        if not rows:
            self.save_account(DEFAULT_ACCOUNT)
            return [DEFAULT_ACCOUNT]
        return [
            Account(
                id=row["id"],
                name=row["name"],
                currency=row["currency"],
                balance=row["balance"],
                is_demo=bool(row["is_demo"]),
                type=row["type"],
            )
            for row in rows
        ]

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get an account by ID."""
        for account in self.get_accounts():
            if account.id == account_id:
                return account
        return None

    def adjust_account_balance(self, account_id: str, delta: float) -> float:
        """Add `delta` to an account's balance.

        Returns:
            The new balance.

        Raises:
            ValueError: If the account does not exist.
        """
        account = self.get_account(account_id)
        if account is None:
            raise ValueError(f"Account not found: {account_id}")
        updated = account.model_copy(update={"balance": account.balance + delta})
        self.save_account(updated)
        return updated.balance

    # ==================== Settings ====================

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a JSON setting value.

        Args:
            key: Setting key.
            default: Value returned when the key is not set.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return json.loads(row["value"]) if row else default
        finally:
            conn.close()

    def save_setting(self, key: str, value: Any) -> None:
        """Save a JSON-serializable setting value."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (key, json.dumps(value)),
            )
            conn.commit()
        finally:
            conn.close()

    def get_tag_groups(self, user_id: Optional[str] = None) -> list[TagGroup]:
        """Get tag groups, initializing the defaults when none are stored."""
        stored = self.get_setting(_settings_key("tags", user_id))
        if not stored:
            self.save_tag_groups(DEFAULT_TAG_GROUPS, user_id)
            return list(DEFAULT_TAG_GROUPS)
        return [TagGroup(**group) for group in stored]

    def save_tag_groups(self, groups: list[TagGroup], user_id: Optional[str] = None) -> None:
        """Replace the stored tag groups."""
        self.save_setting(_settings_key("tags", user_id), [g.model_dump() for g in groups])

    def get_strategies(self, user_id: Optional[str] = None) -> list[str]:
        """Get strategy names, initializing the defaults when none are stored."""
        stored = self.get_setting(_settings_key("strategies", user_id))
        if not stored:
            self.save_strategies(DEFAULT_STRATEGIES, user_id)
            return list(DEFAULT_STRATEGIES)
        return list(stored)

    def save_strategies(self, strategies: list[str], user_id: Optional[str] = None) -> None:
        """Replace the stored strategy names."""
        self.save_setting(_settings_key("strategies", user_id), list(strategies))

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
