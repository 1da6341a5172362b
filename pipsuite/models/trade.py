"""Trade data model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TradeType(str, Enum):
    """Trade direction."""

    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(str, Enum):
    """Result classification of a trade."""

    OPEN = "OPEN"
    WIN = "WIN"
    LOSS = "LOSS"
    BREAK_EVEN = "BREAK_EVEN"


class TradeOutcome(str, Enum):
    """Lifecycle state of a trade."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class OrderType(str, Enum):
    """Pending-order classification of an entry relative to the market."""

    MARKET_BUY = "MARKET_BUY"
    MARKET_SELL = "MARKET_SELL"
    BUY_LIMIT = "BUY_LIMIT"
    BUY_STOP = "BUY_STOP"
    SELL_LIMIT = "SELL_LIMIT"
    SELL_STOP = "SELL_STOP"
    NONE = "NONE"

    @property
    def label(self) -> str:
        """Human readable label (e.g. 'Buy Limit')."""
        if self is OrderType.NONE:
            return "-"
        return self.value.replace("_", " ").title()


class TradePartial(BaseModel):
    """A partial close of an open trade."""

    quantity: float = Field(..., gt=0, description="Closed lots")
    price: float = Field(..., ge=0, description="Partial exit price")
    pnl: float = Field(default=0.0, description="Realized P&L of the partial")
    closed_at: Optional[datetime] = Field(default=None, description="Partial close time")

    model_config = {"frozen": True}


class Trade(BaseModel):
    """Represents a journaled trade."""

    id: str = Field(..., min_length=1, description="Trade identifier")
    account_id: str = Field(default="default_1", description="Owning account")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    type: TradeType = Field(default=TradeType.LONG, description="Trade direction")
    status: TradeStatus = Field(default=TradeStatus.OPEN, description="Result classification")
    outcome: TradeOutcome = Field(default=TradeOutcome.OPEN, description="Open or closed")
    order_type: OrderType = Field(default=OrderType.NONE, description="Entry order type")

    entry_price: float = Field(..., ge=0, description="Entry price")
    exit_price: Optional[float] = Field(default=None, ge=0, description="Exit price")
    stop_loss: Optional[float] = Field(default=None, ge=0, description="Stop loss price")
    take_profit: Optional[float] = Field(default=None, ge=0, description="Take profit price")
    quantity: float = Field(..., gt=0, description="Position size in lots")
    pnl: float = Field(default=0.0, description="Net realized P&L")
    main_pnl: Optional[float] = Field(default=None, description="P&L of the final exit")
    fees: float = Field(default=0.0, ge=0, description="Manually recorded fees")
    delta_from_plan: float = Field(default=0.0, description="Planned reward minus realized P&L")
    partials: list[TradePartial] = Field(default_factory=list, description="Partial closes")
    risk_percentage: Optional[float] = Field(default=None, description="Planned risk %")
    leverage: Optional[float] = Field(default=None, gt=0, description="Account leverage")

    created_at: datetime = Field(default_factory=datetime.now, description="Creation time")
    entry_date: Optional[datetime] = Field(default=None, description="Entry time")
    exit_date: Optional[datetime] = Field(default=None, description="Exit time")

    tags: list[str] = Field(default_factory=list, description="Tags (unique)")
    setup: str = Field(default="", description="Setup / strategy name")
    notes: str = Field(default="", description="Free-form notes")

    is_deleted: bool = Field(default=False, description="Soft-delete flag")
    deleted_at: Optional[datetime] = Field(default=None, description="Soft-delete time")
    is_balance_updated: bool = Field(default=False, description="P&L applied to account")

    model_config = {"frozen": True}

    @property
    def trade_time(self) -> datetime:
        """Time used for every bucketing and date filter: entry, else creation."""
        return self.entry_date or self.created_at

    @property
    def local_time(self) -> datetime:
        """`trade_time` as naive local time."""
        return to_local_naive(self.trade_time)

    @property
    def is_closed(self) -> bool:
        return self.outcome == TradeOutcome.CLOSED


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values are local already."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
