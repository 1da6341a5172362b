"""HTTP rate provider backed by the Frankfurter exchange-rate API."""

import logging
from typing import Optional

import httpx

from pipsuite.fx.base import RateProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.frankfurter.app"
DEFAULT_TIMEOUT = 5.0


class FrankfurterRateProvider(RateProvider):
    """Fetches latest reference rates from a Frankfurter-compatible API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the provider.

        Args:
            base_url: API root URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used to stub the network).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_rate_to_usd(self, currency: str) -> Optional[float]:
        """Fetch the latest rate from `currency` to USD.

        Network and HTTP errors are logged and reported as None.
        """
        code = currency.strip().upper()
        if code == "USD":
            return 1.0

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/latest", params={"from": code, "to": "USD"}
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch %s/USD rate: %s", code, e)
            return None

        rate = payload.get("rates", {}).get("USD") if isinstance(payload, dict) else None
        if not isinstance(rate, (int, float)) or rate <= 0:
            logger.warning("No USD rate in response for %s", code)
            return None
        return float(rate)
