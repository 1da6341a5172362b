"""Closing an open trade."""

from datetime import datetime
from typing import Optional

from pipsuite.journal.autotag import calculate_auto_tags
from pipsuite.models import Asset, Trade, TradeOutcome, TradeStatus


def classify_status(pnl: float) -> TradeStatus:
    """Result classification from realized P&L."""
    if pnl > 0:
        return TradeStatus.WIN
    if pnl < 0:
        return TradeStatus.LOSS
    return TradeStatus.BREAK_EVEN


def planned_reward(trade: Trade, asset: Optional[Asset]) -> float:
    """Monetary reward the trade was planned for at its take profit."""
    if asset is None or trade.take_profit is None:
        return 0.0
    return abs(trade.take_profit - trade.entry_price) * asset.contract_size * trade.quantity


def close_trade(
    trade: Trade,
    exit_price: float,
    main_pnl: float,
    fees: float = 0.0,
    exit_date: Optional[datetime] = None,
    asset: Optional[Asset] = None,
    affect_balance: bool = False,
) -> Trade:
    """Close a trade and derive its result fields.

    Net P&L is the final exit's P&L plus every partial's P&L. Fees are
    recorded as entered.

    Args:
        trade: Trade to close.
        exit_price: Final exit price.
        main_pnl: P&L of the final exit.
        fees: Fees to record.
        exit_date: Exit time; defaults to now.
        asset: Instrument, used for the delta from the planned reward.
        affect_balance: Whether the P&L is being applied to the account balance.

    Returns:
        The closed trade.

    Raises:
        ValueError: If the trade is already closed or deleted.
    """
    if trade.is_closed:
        raise ValueError(f"Trade {trade.id} is already closed")
    if trade.is_deleted:
        raise ValueError(f"Trade {trade.id} is in the trash")

    net_pnl = main_pnl + sum(p.pnl for p in trade.partials)
    planned = planned_reward(trade, asset)
    tags = calculate_auto_tags(
        trade.tags,
        trade.type,
        trade.entry_price,
        exit_price=exit_price,
        take_profit=trade.take_profit,
        stop_loss=trade.stop_loss,
        partials=trade.partials,
    )

    return trade.model_copy(
        update={
            "exit_price": exit_price,
            "exit_date": exit_date or datetime.now(),
            "main_pnl": main_pnl,
            "pnl": net_pnl,
            "fees": fees,
            "delta_from_plan": planned - net_pnl if planned > 0 else trade.delta_from_plan,
            "status": classify_status(net_pnl),
            "outcome": TradeOutcome.CLOSED,
            "tags": tags,
            "is_balance_updated": affect_balance,
        }
    )
