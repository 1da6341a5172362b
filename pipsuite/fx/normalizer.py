"""Conversion of quote-currency amounts into the reporting currency."""

import logging
from typing import Optional

from pipsuite.fx.base import RateProvider

logger = logging.getLogger(__name__)

PLACEHOLDER = "-"
REPORTING_CURRENCY = "USD"


class CurrencyNormalizer:
    """Converts amounts to the reporting currency using cached rates.

    Rates are cached per currency code for the lifetime of the normalizer,
    without expiry. `convert` never waits for the network: it returns None
    until `resolve` has fetched the rate, and callers show a placeholder.
    """

    def __init__(self, provider: RateProvider):
        """Initialize the normalizer.

        Args:
            provider: Source of rates into the reporting currency (USD).
        """
        self._provider = provider
        self.reporting_currency = REPORTING_CURRENCY
        self._rates: dict[str, float] = {}

    def cached_rate(self, currency: str) -> Optional[float]:
        """Rate already resolved for a currency, if any."""
        code = currency.strip().upper()
        if code == self.reporting_currency:
            return 1.0
        return self._rates.get(code)

    async def resolve(self, currency: str) -> Optional[float]:
        """Get the rate for a currency, fetching and caching it when missing.

        Returns:
            The rate, or None if the provider could not supply one.
        """
        code = currency.strip().upper()
        cached = self.cached_rate(code)
        if cached is not None:
            return cached

        rate = await self._provider.get_rate_to_usd(code)
        if rate is None:
            logger.info("Rate for %s unavailable", code)
            return None
        self._rates[code] = rate
        return rate

    def convert(self, amount: float, currency: str) -> Optional[float]:
        """Convert using cached rates only.

        Returns:
            The converted amount, or None while the rate is unresolved.
        """
        rate = self.cached_rate(currency)
        if rate is None:
            return None
        return amount * rate

    async def convert_async(self, amount: float, currency: str) -> Optional[float]:
        """Convert, resolving the rate first if needed."""
        rate = await self.resolve(currency)
        if rate is None:
            return None
        return amount * rate

    def invalidate(self, currency: Optional[str] = None) -> None:
        """Drop one cached rate, or all of them."""
        if currency is None:
            self._rates.clear()
        else:
            self._rates.pop(currency.strip().upper(), None)


def format_money(amount: Optional[float], currency: str = "USD") -> str:
    """Format an amount for display, or a placeholder when unresolved."""
    if amount is None:
        return PLACEHOLDER
    if currency.upper() == "USD":
        return f"${amount:,.2f}"
    return f"{amount:,.2f} {currency.upper()}"
