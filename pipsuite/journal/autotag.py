"""Execution tags derived from how a trade was closed."""

from typing import Iterable, Optional

from pipsuite.models import TradePartial, TradeType

TAG_PARTIAL = "#Partial"
TAG_BREAK_EVEN = "#Break-Even"
TAG_TP = "#TP"
TAG_SL = "#SL"
TAG_EARLY_EXIT = "#Early-Exit"
TAG_LATE_CHASED = "#Late-Chased"

AUTO_TAGS = (TAG_PARTIAL, TAG_BREAK_EVEN, TAG_TP, TAG_SL, TAG_EARLY_EXIT, TAG_LATE_CHASED)

# Exit within this fraction of the entry price counts as break-even.
BREAK_EVEN_TOLERANCE = 0.0001


def calculate_auto_tags(
    tags: Iterable[str],
    trade_type: TradeType,
    entry_price: float,
    exit_price: Optional[float] = None,
    take_profit: Optional[float] = None,
    stop_loss: Optional[float] = None,
    partials: Optional[list[TradePartial]] = None,
) -> list[str]:
    """Add or remove execution tags on a trade's tag list.

    User tags are kept in order. `#Partial` follows the partials list;
    the remaining execution tags are only evaluated once an exit price
    is known.

    Args:
        tags: Current tags.
        trade_type: Trade direction.
        entry_price: Entry price.
        exit_price: Final exit price, if closed.
        take_profit: Planned target.
        stop_loss: Planned stop.
        partials: Partial closes.

    Returns:
        Updated tag list without duplicates.
    """
    current = dict.fromkeys(tags)

    def set_tag(tag: str, present: bool) -> None:
        if present:
            current.setdefault(tag)
        else:
            current.pop(tag, None)

    set_tag(TAG_PARTIAL, bool(partials))

    if exit_price is None:
        return list(current)

    is_break_even = abs(exit_price - entry_price) <= entry_price * BREAK_EVEN_TOLERANCE
    set_tag(TAG_BREAK_EVEN, is_break_even)

    hit_tp = hit_sl = early = late = False
    if trade_type == TradeType.LONG:
        if take_profit is not None:
            hit_tp = exit_price >= take_profit
            early = entry_price < exit_price < take_profit and not is_break_even
            late = exit_price > take_profit
        if stop_loss is not None:
            hit_sl = exit_price <= stop_loss
    else:
        if take_profit is not None:
            hit_tp = exit_price <= take_profit
            early = take_profit < exit_price < entry_price and not is_break_even
            late = exit_price < take_profit
        if stop_loss is not None:
            hit_sl = exit_price >= stop_loss

    set_tag(TAG_TP, hit_tp)
    set_tag(TAG_SL, hit_sl)
    set_tag(TAG_EARLY_EXIT, early)
    set_tag(TAG_LATE_CHASED, late)
    return list(current)
