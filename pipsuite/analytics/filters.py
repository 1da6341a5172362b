"""Trade filtering shared by the journal, dashboard and calendar views.

Every predicate is independent and AND-combined. A filter value that is not
set matches every trade for that dimension.
"""

from datetime import date, datetime, time
from typing import Iterable, Literal, Optional, Union

from pydantic import BaseModel, Field

from pipsuite.models import Trade
from pipsuite.models.trade import to_local_naive

END_OF_DAY = time(23, 59, 59, 999000)
NUMBER_TOLERANCE = 0.0001


class NumberCondition(BaseModel):
    """Numeric comparison against a trade field (e.g. pnl > 100)."""

    field: Literal[
        "entry_price",
        "exit_price",
        "stop_loss",
        "take_profit",
        "quantity",
        "pnl",
        "fees",
        "risk_percentage",
        "leverage",
    ] = Field(..., description="Trade field to compare")
    operator: Literal[">", ">=", "<", "<=", "="] = Field(default=">", description="Comparison")
    value: float = Field(..., description="Value to compare against")

    model_config = {"frozen": True}

    def matches(self, trade: Trade) -> bool:
        actual = getattr(trade, self.field)
        if actual is None:
            return False
        if self.operator == ">":
            return actual > self.value
        if self.operator == ">=":
            return actual >= self.value
        if self.operator == "<":
            return actual < self.value
        if self.operator == "<=":
            return actual <= self.value
        return abs(actual - self.value) <= NUMBER_TOLERANCE


class TradeFilter(BaseModel):
    """Active filters of a trade view."""

    start: Optional[Union[datetime, date]] = Field(default=None, description="Inclusive start")
    end: Optional[Union[datetime, date]] = Field(default=None, description="Inclusive end day")
    account_id: Optional[str] = Field(default=None, description="Account to include")
    tags: frozenset[str] = Field(default_factory=frozenset, description="Required tags")
    tag_match: Literal["all", "any"] = Field(default="all", description="Tag match mode")
    assets: frozenset[str] = Field(default_factory=frozenset, description="Allowed symbols")
    deleted: Literal["exclude", "only", "include"] = Field(
        default="exclude", description="Soft-deleted trade handling"
    )
    conditions: tuple[NumberCondition, ...] = Field(default=(), description="Numeric conditions")
    search: Optional[str] = Field(default=None, description="Text search over symbol/setup/notes")

    model_config = {"frozen": True}

    @property
    def start_bound(self) -> Optional[datetime]:
        """Start as a naive local datetime."""
        if self.start is None:
            return None
        if isinstance(self.start, datetime):
            return to_local_naive(self.start)
        return datetime.combine(self.start, time.min)

    @property
    def end_bound(self) -> Optional[datetime]:
        """End as a naive local datetime at 23:59:59.999 of its day."""
        if self.end is None:
            return None
        day = to_local_naive(self.end).date() if isinstance(self.end, datetime) else self.end
        return datetime.combine(day, END_OF_DAY)


def _matches_deleted(trade: Trade, mode: str) -> bool:
    if mode == "exclude":
        return not trade.is_deleted
    if mode == "only":
        return trade.is_deleted
    return True


def _matches_tags(trade: Trade, tags: frozenset[str], mode: str) -> bool:
    if not tags:
        return True
    trade_tags = set(trade.tags)
    if mode == "any":
        return not tags.isdisjoint(trade_tags)
    return tags <= trade_tags


def _matches_search(trade: Trade, text: Optional[str]) -> bool:
    if not text:
        return True
    needle = text.lower()
    return any(needle in value.lower() for value in (trade.symbol, trade.setup, trade.notes))


def matches(trade: Trade, filters: TradeFilter) -> bool:
    """Whether a trade passes every active filter."""
    if not _matches_deleted(trade, filters.deleted):
        return False
    if filters.account_id is not None and trade.account_id != filters.account_id:
        return False

    start, end = filters.start_bound, filters.end_bound
    if start is not None or end is not None:
        when = trade.local_time
        if start is not None and when < start:
            return False
        if end is not None and when > end:
            return False

    if not _matches_tags(trade, filters.tags, filters.tag_match):
        return False
    if filters.assets:
        allowed = {symbol.upper() for symbol in filters.assets}
        if trade.symbol.upper() not in allowed:
            return False
    if not all(condition.matches(trade) for condition in filters.conditions):
        return False
    return _matches_search(trade, filters.search)


def apply_filters(trades: Iterable[Trade], filters: Optional[TradeFilter] = None) -> list[Trade]:
    """Trades passing the filters, in their original order.

    Args:
        trades: Trades to filter. Not modified.
        filters: Active filters. Defaults to excluding soft-deleted trades.

    Returns:
        New list of matching trades.
    """
    filters = filters or TradeFilter()
    return [trade for trade in trades if matches(trade, filters)]
