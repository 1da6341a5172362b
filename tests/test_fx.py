"""Tests for currency normalization.

**Feature: currency-normalization**
"""

import asyncio
from typing import Optional

import httpx
import pytest

from pipsuite.fx import (
    PLACEHOLDER,
    CurrencyNormalizer,
    FrankfurterRateProvider,
    RateProvider,
    format_money,
)


class FakeProvider(RateProvider):
    """Rate provider answering from a dict and counting lookups."""

    def __init__(self, rates: dict[str, float]):
        self.rates = rates
        self.calls: list[str] = []

    async def get_rate_to_usd(self, currency: str) -> Optional[float]:
        self.calls.append(currency)
        return self.rates.get(currency)


class TestCurrencyNormalizer:
    """
    **Feature: currency-normalization, Property: Cached Conversion**

    *For any* currency, `convert` returns None until the rate is resolved,
    and a resolved rate is fetched from the provider only once.
    """

    def test_usd_needs_no_lookup(self):
        provider = FakeProvider({})
        normalizer = CurrencyNormalizer(provider)
        assert normalizer.convert(125.0, "usd") == 125.0
        assert provider.calls == []

    def test_convert_before_and_after_resolve(self):
        provider = FakeProvider({"JPY": 0.0067})
        normalizer = CurrencyNormalizer(provider)

        assert normalizer.convert(10000, "JPY") is None
        assert asyncio.run(normalizer.resolve("jpy")) == 0.0067
        assert normalizer.convert(10000, "JPY") == pytest.approx(67.0)

    def test_rate_fetched_once(self):
        provider = FakeProvider({"EUR": 1.08})
        normalizer = CurrencyNormalizer(provider)

        async def run():
            await normalizer.convert_async(100, "EUR")
            await normalizer.convert_async(200, "EUR")

        asyncio.run(run())
        assert provider.calls == ["EUR"]

    def test_unavailable_rate_is_not_cached(self):
        provider = FakeProvider({})
        normalizer = CurrencyNormalizer(provider)

        assert asyncio.run(normalizer.convert_async(100, "GBP")) is None
        assert normalizer.cached_rate("GBP") is None
        provider.rates["GBP"] = 1.27
        assert asyncio.run(normalizer.convert_async(100, "GBP")) == pytest.approx(127.0)

    def test_resolutions_only_write_their_own_key(self):
        normalizer = CurrencyNormalizer(FakeProvider({"EUR": 1.08, "JPY": 0.0067}))

        async def run():
            await asyncio.gather(normalizer.resolve("EUR"), normalizer.resolve("JPY"))

        asyncio.run(run())
        assert normalizer.cached_rate("EUR") == 1.08
        assert normalizer.cached_rate("JPY") == 0.0067

    def test_invalidate(self):
        provider = FakeProvider({"EUR": 1.08, "JPY": 0.0067})
        normalizer = CurrencyNormalizer(provider)
        asyncio.run(normalizer.resolve("EUR"))
        asyncio.run(normalizer.resolve("JPY"))

        normalizer.invalidate("eur")
        assert normalizer.cached_rate("EUR") is None
        assert normalizer.cached_rate("JPY") == 0.0067

        normalizer.invalidate()
        assert normalizer.cached_rate("JPY") is None


class TestFormatMoney:
    def test_usd(self):
        assert format_money(1234.5) == "$1,234.50"

    def test_other_currency(self):
        assert format_money(1500, "jpy") == "1,500.00 JPY"

    def test_unresolved_placeholder(self):
        assert format_money(None) == PLACEHOLDER


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


class TestFrankfurterRateProvider:
    """HTTP provider behavior against a stubbed transport."""

    def test_fetches_latest_rate(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"amount": 1.0, "base": "EUR", "rates": {"USD": 1.0842}})

        provider = FrankfurterRateProvider(base_url="https://fx.test/", transport=_transport(handler))
        assert asyncio.run(provider.get_rate_to_usd("eur")) == pytest.approx(1.0842)
        assert seen["path"] == "/latest"
        assert seen["params"] == {"from": "EUR", "to": "USD"}

    def test_usd_short_circuits(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        provider = FrankfurterRateProvider(transport=_transport(handler))
        assert asyncio.run(provider.get_rate_to_usd("USD")) == 1.0

    def test_http_error_returns_none(self):
        provider = FrankfurterRateProvider(
            transport=_transport(lambda request: httpx.Response(404, json={"message": "not found"}))
        )
        assert asyncio.run(provider.get_rate_to_usd("XYZ")) is None

    def test_network_error_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = FrankfurterRateProvider(transport=_transport(handler))
        assert asyncio.run(provider.get_rate_to_usd("EUR")) is None

    def test_missing_rate_returns_none(self):
        provider = FrankfurterRateProvider(
            transport=_transport(lambda request: httpx.Response(200, json={"rates": {}}))
        )
        assert asyncio.run(provider.get_rate_to_usd("EUR")) is None

    def test_invalid_json_returns_none(self):
        provider = FrankfurterRateProvider(
            transport=_transport(lambda request: httpx.Response(200, text="<html>"))
        )
        assert asyncio.run(provider.get_rate_to_usd("EUR")) is None

    def test_normalizer_with_http_provider(self):
        provider = FrankfurterRateProvider(
            transport=_transport(lambda request: httpx.Response(200, json={"rates": {"USD": 0.0067}}))
        )
        normalizer = CurrencyNormalizer(provider)
        assert asyncio.run(normalizer.convert_async(10000, "JPY")) == pytest.approx(67.0)
