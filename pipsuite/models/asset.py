"""Asset (tradable instrument) data model."""

from pydantic import BaseModel, Field


class Asset(BaseModel):
    """Represents a tradable instrument and its price increments."""

    pair: str = Field(..., min_length=1, description="Instrument symbol (e.g. XAUUSD)")
    pip: float = Field(..., gt=0, description="Pip size")
    tick: float = Field(..., gt=0, description="Tick size")
    contract_size: float = Field(..., gt=0, description="Notional units per lot")
    quote: str = Field(default="USD", min_length=3, description="Quote currency")

    model_config = {"frozen": True}
