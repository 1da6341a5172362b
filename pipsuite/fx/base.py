"""Exchange-rate provider interface."""

from abc import ABC, abstractmethod
from typing import Optional


class RateProvider(ABC):
    """Abstract source of currency conversion rates.

    Implementations resolve out-of-band (network, files, fixtures). A rate
    that cannot be obtained is reported as None rather than raised, so
    callers can show a placeholder and try again later.
    """

    @abstractmethod
    async def get_rate_to_usd(self, currency: str) -> Optional[float]:
        """Get the rate converting one unit of `currency` into USD.

        Args:
            currency: ISO currency code (e.g. 'JPY').

        Returns:
            Conversion rate, or None if it could not be resolved.
        """
        pass
