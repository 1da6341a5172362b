"""Derived metrics and analytics result models."""

from datetime import date as date_type, datetime

from pydantic import BaseModel, Field

from pipsuite.models.trade import OrderType, TradeType


class DistanceSet(BaseModel):
    """Distance between a price level and the entry."""

    points: float = Field(default=0.0, ge=0, description="Absolute price distance")
    pips: float = Field(default=0.0, ge=0, description="Distance in pips")
    ticks: float = Field(default=0.0, ge=0, description="Distance in ticks")

    model_config = {"frozen": True}


class DerivedMetrics(BaseModel):
    """Risk/reward snapshot computed from a trade draft."""

    direction: TradeType = Field(..., description="Classified trade direction")
    order_type: OrderType = Field(..., description="Pending-order classification")
    risk_amount: float = Field(default=0.0, description="Displayed monetary risk")
    lot_risk_amount: float = Field(default=0.0, description="Risk derived from lot size")
    potential_profit: float = Field(default=0.0, description="Monetary reward at target")
    reward_to_risk: float = Field(default=0.0, description="Reward divided by risk")
    required_margin: float = Field(default=0.0, description="Margin needed at entry")
    tp: DistanceSet = Field(default_factory=DistanceSet, description="Target distance")
    sl: DistanceSet = Field(default_factory=DistanceSet, description="Stop distance")
    quote_currency: str = Field(default="USD", description="Currency of monetary fields")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal draft issues")

    model_config = {"frozen": True}


class StatsSnapshot(BaseModel):
    """Summary statistics over a trade set. Always recomputed, never stored."""

    total_trades: int = Field(default=0, ge=0, description="Filtered trades, open included")
    closed_trades: int = Field(default=0, ge=0, description="Closed trades")
    wins: int = Field(default=0, ge=0, description="Closed trades with pnl > 0")
    losses: int = Field(default=0, ge=0, description="Closed trades with pnl <= 0")
    break_even: int = Field(default=0, ge=0, description="Closed trades with pnl == 0")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    net_pnl: float = Field(default=0.0, description="Net P&L of closed trades")
    avg_win: float = Field(default=0.0, ge=0, description="Average winning P&L")
    avg_loss: float = Field(default=0.0, ge=0, description="Average losing P&L magnitude")
    profit_factor: float = Field(default=0.0, ge=0, description="Gross profit / gross loss")
    expectancy: float = Field(default=0.0, description="Expected P&L per trade")
    best_trade: float = Field(default=0.0, description="Largest P&L (floored at 0)")
    worst_trade: float = Field(default=0.0, description="Smallest P&L (capped at 0)")

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    """One step of the cumulative P&L curve."""

    timestamp: datetime
    cumulative_pnl: float
    trade_pnl: float

    model_config = {"frozen": True}


class DailyBucket(BaseModel):
    """P&L summed over a local calendar day."""

    date: date_type
    pnl: float = 0.0
    count: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class HourlyBucket(BaseModel):
    """P&L summed over an hour of the day."""

    hour: int = Field(..., ge=0, le=23)
    pnl: float = 0.0
    count: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.hour}:00"


class GroupedResult(BaseModel):
    """Performance of one group in a per-dimension breakdown."""

    key: str
    pnl: float = 0.0
    count: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)

    model_config = {"frozen": True}


class WinLossDistribution(BaseModel):
    """Closed trades split into wins, losses and break-even."""

    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    break_even: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
