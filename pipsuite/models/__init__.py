"""Data models for pipsuite."""

from pipsuite.models.account import Account, TagGroup
from pipsuite.models.asset import Asset
from pipsuite.models.draft import TradeDraft, parse_number
from pipsuite.models.metrics import (
    DailyBucket,
    DerivedMetrics,
    DistanceSet,
    EquityPoint,
    GroupedResult,
    HourlyBucket,
    StatsSnapshot,
    WinLossDistribution,
)
from pipsuite.models.trade import (
    OrderType,
    Trade,
    TradeOutcome,
    TradePartial,
    TradeStatus,
    TradeType,
)

__all__ = [
    "Account",
    "Asset",
    "DailyBucket",
    "DerivedMetrics",
    "DistanceSet",
    "EquityPoint",
    "GroupedResult",
    "HourlyBucket",
    "OrderType",
    "StatsSnapshot",
    "TagGroup",
    "Trade",
    "TradeDraft",
    "TradeOutcome",
    "TradePartial",
    "TradeStatus",
    "TradeType",
    "WinLossDistribution",
    "parse_number",
]
