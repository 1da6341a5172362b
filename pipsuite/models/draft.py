"""TradeDraft data model.

A draft is the transient state of the trade-entry form. Fields are edited one
at a time, so every financial field may hold the raw text the user typed, a
number, or nothing. Values are only parsed when a calculation needs them.
"""

import math
from typing import Optional, Union

from pydantic import BaseModel, Field

NumberLike = Optional[Union[float, str]]


def parse_number(value: NumberLike) -> Optional[float]:
    """Parse a draft field into a finite float.

    Args:
        value: Raw field value.

    Returns:
        The parsed number, or None for absent, blank, non-numeric,
        NaN or infinite input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        number = float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class TradeDraft(BaseModel):
    """Partially-filled trade-entry form state. Never persisted."""

    symbol: Optional[str] = Field(default=None, description="Instrument symbol")
    entry_price: NumberLike = Field(default=None, description="Planned entry price")
    current_price: NumberLike = Field(default=None, description="Latest market price")
    take_profit: NumberLike = Field(default=None, description="Take profit price")
    stop_loss: NumberLike = Field(default=None, description="Stop loss price")
    quantity: NumberLike = Field(default=None, description="Position size in lots")
    leverage: NumberLike = Field(default=None, description="Account leverage")
    balance: NumberLike = Field(default=None, description="Account balance")
    risk_percentage: NumberLike = Field(default=None, description="Risk as % of balance")

    model_config = {"validate_assignment": True}

    def number(self, field: str) -> Optional[float]:
        """Parsed value of a financial field."""
        return parse_number(getattr(self, field))
