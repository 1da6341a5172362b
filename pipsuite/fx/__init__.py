"""Currency normalization."""

from pipsuite.fx.base import RateProvider
from pipsuite.fx.frankfurter import FrankfurterRateProvider
from pipsuite.fx.normalizer import (
    PLACEHOLDER,
    REPORTING_CURRENCY,
    CurrencyNormalizer,
    format_money,
)

__all__ = [
    "PLACEHOLDER",
    "REPORTING_CURRENCY",
    "CurrencyNormalizer",
    "FrankfurterRateProvider",
    "RateProvider",
    "format_money",
]
