"""Position sizing and risk calculations over a trade draft.

Drafts are edited one field at a time and are usually incomplete, so none of
the functions here raise on draft input. Missing, unparseable or overflowing
values produce zero for the affected output and None for solvers
that cannot run. Only an unknown instrument makes the whole metrics snapshot
None.
"""

import logging
import math
from typing import Optional

from pipsuite.models import (
    Asset,
    DerivedMetrics,
    DistanceSet,
    OrderType,
    TradeDraft,
    TradeType,
    parse_number,
)
from pipsuite.models.draft import NumberLike

logger = logging.getLogger(__name__)

# Lot-derived risk within this fraction of balance * risk% is displayed as
# balance * risk%. Display heuristic only; it hides lot rounding noise.
RISK_RECONCILIATION_TOLERANCE = 0.05


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _with(draft: TradeDraft, **changes) -> TradeDraft:
    """Copy of the draft with `changes` applied and validated."""
    return TradeDraft.model_validate({**draft.model_dump(), **changes})


def classify_direction(
    entry: Optional[float],
    take_profit: Optional[float],
    stop_loss: Optional[float],
) -> TradeType:
    """Classify trade direction from price levels.

    The take profit decides when present, then the stop loss, else LONG.
    """
    if entry is None:
        return TradeType.LONG
    if take_profit is not None:
        return TradeType.LONG if take_profit > entry else TradeType.SHORT
    if stop_loss is not None:
        return TradeType.LONG if stop_loss < entry else TradeType.SHORT
    return TradeType.LONG


def classify_order_type(
    direction: TradeType,
    entry: Optional[float],
    current: Optional[float],
) -> OrderType:
    """Classify the pending order needed to enter at `entry` given the market price."""
    if entry is None or current is None:
        return OrderType.NONE

    if direction == TradeType.LONG:
        if entry < current:
            return OrderType.BUY_LIMIT
        if entry > current:
            return OrderType.BUY_STOP
        return OrderType.MARKET_BUY

    if entry > current:
        return OrderType.SELL_LIMIT
    if entry < current:
        return OrderType.SELL_STOP
    return OrderType.MARKET_SELL


def distance(target: Optional[float], entry: Optional[float], asset: Asset) -> DistanceSet:
    """Distance from entry to a price level in points, pips and ticks.

    Returns a zero DistanceSet when either price is absent or the distance
    overflows.
    """
    if target is None or entry is None:
        return DistanceSet()
    points = abs(target - entry)
    if not math.isfinite(points):
        return DistanceSet()
    return DistanceSet(
        points=points,
        pips=_finite(points / asset.pip) if asset.pip > 0 else 0.0,
        ticks=_finite(points / asset.tick) if asset.tick > 0 else 0.0,
    )


def _direction_warnings(
    entry: float,
    take_profit: Optional[float],
    stop_loss: Optional[float],
) -> list[str]:
    warnings = []
    if take_profit is not None and take_profit == entry:
        warnings.append("Take profit equals entry price.")
    if stop_loss is not None and stop_loss == entry:
        warnings.append("Stop loss equals entry price.")
    if take_profit is not None and stop_loss is not None:
        by_target = TradeType.LONG if take_profit > entry else TradeType.SHORT
        by_stop = TradeType.LONG if stop_loss < entry else TradeType.SHORT
        if by_target != by_stop:
            warnings.append("Take profit and stop loss imply opposite directions.")
    return warnings


def reconcile_risk(lot_risk: float, balance: Optional[float], risk_percentage: Optional[float]) -> float:
    """Risk amount to display for a draft.

    When both balance and risk % are known and the lot-derived risk is within
    RISK_RECONCILIATION_TOLERANCE of balance * risk%, the percentage-derived
    figure is shown instead of the lot-derived one.
    """
    if balance is None or risk_percentage is None:
        return lot_risk
    theoretical = balance * risk_percentage / 100
    if 0 < theoretical < math.inf and abs(lot_risk - theoretical) <= theoretical * RISK_RECONCILIATION_TOLERANCE:
        return theoretical
    return lot_risk


def compute_derived_metrics(
    draft: TradeDraft,
    asset: Optional[Asset],
    rate_to_usd: float = 1.0,
) -> Optional[DerivedMetrics]:
    """Compute the risk/reward snapshot of a draft.

    Args:
        draft: Trade-entry draft.
        asset: Resolved instrument, or None when the symbol is unknown.
        rate_to_usd: Quote-to-account currency rate used to compare the
            lot-derived risk with balance * risk%.

    Returns:
        DerivedMetrics, or None when the asset is unknown. A draft without
        an entry price gives a zeroed LONG snapshot. Monetary amounts are in
        the quote currency.
    """
    if asset is None:
        return None

    entry = draft.number("entry_price")
    if entry is None:
        return DerivedMetrics(
            direction=TradeType.LONG,
            order_type=OrderType.NONE,
            quote_currency=asset.quote,
        )

    take_profit = draft.number("take_profit")
    stop_loss = draft.number("stop_loss")
    lots = draft.number("quantity")
    current = draft.number("current_price")
    balance = draft.number("balance")
    risk_percentage = draft.number("risk_percentage")
    leverage = draft.number("leverage")
    if leverage is None or leverage <= 0:
        leverage = 1.0

    direction = classify_direction(entry, take_profit, stop_loss)
    order_type = classify_order_type(direction, entry, current)
    tp = distance(take_profit, entry, asset)
    sl = distance(stop_loss, entry, asset)

    lot_risk = 0.0
    potential_profit = 0.0
    required_margin = 0.0
    if lots is not None:
        if stop_loss is not None:
            lot_risk = _finite(sl.points * asset.contract_size * lots)
        if take_profit is not None:
            potential_profit = _finite(tp.points * asset.contract_size * lots)
        required_margin = _finite((entry * asset.contract_size * lots) / leverage)

    # Balance and risk % are in account currency; compare in quote currency.
    theoretical_balance = balance / rate_to_usd if balance is not None and rate_to_usd > 0 else None
    display_risk = _finite(reconcile_risk(lot_risk, theoretical_balance, risk_percentage))
    reward_to_risk = _finite(potential_profit / display_risk) if display_risk > 0 else 0.0

    return DerivedMetrics(
        direction=direction,
        order_type=order_type,
        risk_amount=display_risk,
        lot_risk_amount=lot_risk,
        potential_profit=potential_profit,
        reward_to_risk=reward_to_risk,
        required_margin=required_margin,
        tp=tp,
        sl=sl,
        quote_currency=asset.quote,
        warnings=_direction_warnings(entry, take_profit, stop_loss),
    )


def solve_lots_from_risk(
    draft: TradeDraft,
    asset: Optional[Asset],
    rate_to_usd: float = 1.0,
) -> Optional[float]:
    """Lot size that risks `risk_percentage` of `balance` at the stop.

    Returns None when any input is missing, the entry equals the stop,
    or the conversion rate is not positive.
    """
    if asset is None or rate_to_usd <= 0:
        return None
    risk_percentage = draft.number("risk_percentage")
    balance = draft.number("balance")
    entry = draft.number("entry_price")
    stop_loss = draft.number("stop_loss")
    if None in (risk_percentage, balance, entry, stop_loss):
        return None

    points = abs(entry - stop_loss)
    if points == 0:
        return None

    risk_amount = balance * risk_percentage / 100
    lots = (risk_amount / rate_to_usd) / (points * asset.contract_size)
    return lots if math.isfinite(lots) else None


def solve_risk_from_lots(
    draft: TradeDraft,
    asset: Optional[Asset],
    rate_to_usd: float = 1.0,
) -> Optional[float]:
    """Risk as a percentage of `balance` for the draft's lot size.

    Returns None when any input is missing, the balance is zero, or the
    conversion rate is not positive.
    """
    if asset is None or rate_to_usd <= 0:
        return None
    lots = draft.number("quantity")
    balance = draft.number("balance")
    entry = draft.number("entry_price")
    stop_loss = draft.number("stop_loss")
    if None in (lots, balance, entry, stop_loss) or balance == 0:
        return None

    risk_amount = abs(entry - stop_loss) * asset.contract_size * lots * rate_to_usd
    risk_percentage = risk_amount / balance * 100
    return risk_percentage if math.isfinite(risk_percentage) else None


def is_calculator_active(draft: TradeDraft, asset: Optional[Asset]) -> bool:
    """Whether the risk-based inputs (lots and risk %) can be edited."""
    if asset is None or not draft.symbol:
        return False
    entry = draft.number("entry_price")
    stop_loss = draft.number("stop_loss")
    balance = draft.number("balance")
    if None in (entry, stop_loss, balance):
        return False
    return entry != stop_loss


def apply_quantity(
    draft: TradeDraft,
    asset: Optional[Asset],
    value: NumberLike,
    rate_to_usd: float = 1.0,
) -> TradeDraft:
    """Set the lot size and recompute risk % from it.

    Risk % is left untouched when it cannot be derived.
    """
    updated = _with(draft, quantity=value)
    risk_percentage = solve_risk_from_lots(updated, asset, rate_to_usd)
    if risk_percentage is None:
        return updated
    return _with(updated, risk_percentage=risk_percentage)


def apply_risk_percentage(
    draft: TradeDraft,
    asset: Optional[Asset],
    value: NumberLike,
    rate_to_usd: float = 1.0,
) -> TradeDraft:
    """Set risk % and recompute the lot size from it.

    The lot size is left untouched when it cannot be derived.
    """
    updated = _with(draft, risk_percentage=value)
    lots = solve_lots_from_risk(updated, asset, rate_to_usd)
    if lots is None:
        return updated
    return _with(updated, quantity=lots)


def apply_price_refresh(draft: TradeDraft, issued_for: Optional[str], price: NumberLike) -> TradeDraft:
    """Apply a fetched market price to the draft it was requested for.

    Args:
        draft: The draft as it is now.
        issued_for: Symbol the price request was issued for.
        price: Resolved price.

    Returns:
        The draft with `current_price` set, or the draft unchanged when the
        symbol has changed since the request was issued.
    """
    current_symbol = (draft.symbol or "").strip().upper()
    if not issued_for or issued_for.strip().upper() != current_symbol:
        logger.debug("Discarding stale price for %s (draft is %s)", issued_for, draft.symbol)
        return draft
    if parse_number(price) is None:
        return draft
    return _with(draft, current_price=price)
