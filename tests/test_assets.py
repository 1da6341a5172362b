"""Tests for the asset catalog.

**Feature: position-sizing**
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pipsuite.assets import DEFAULT_ASSETS, AssetCatalog, default_catalog, quote_currency
from pipsuite.models import Asset


class TestAssetLookup:
    """
    **Feature: position-sizing, Property: Case-Insensitive Exact Lookup**

    *For any* catalog pair, lookup by any casing (with surrounding whitespace)
    should return that asset; prefixes and unknown symbols return None.
    """

    @given(asset=st.sampled_from(DEFAULT_ASSETS), lower=st.booleans())
    @settings(max_examples=50)
    def test_lookup_ignores_case(self, asset: Asset, lower: bool):
        """*For any* catalog asset, the lookup is case-insensitive."""
        symbol = asset.pair.lower() if lower else asset.pair
        assert default_catalog().find(f"  {symbol} ") == asset

    def test_xauusd_metadata(self):
        asset = default_catalog().find("xauusd")
        assert asset is not None
        assert asset.pip == 0.1
        assert asset.tick == 0.01
        assert asset.contract_size == 100

    @pytest.mark.parametrize("symbol", ["", None, "XAU", "XAUUSDX", "FOO"])
    def test_no_fuzzy_match(self, symbol):
        assert default_catalog().find(symbol) is None

    def test_contains_and_len(self):
        catalog = default_catalog()
        assert "eurusd" in catalog
        assert "EUR" not in catalog
        assert 42 not in catalog
        assert len(catalog) == len(DEFAULT_ASSETS)

    def test_later_duplicates_replace_earlier(self):
        catalog = AssetCatalog([
            Asset(pair="ABCUSD", pip=0.1, tick=0.01, contract_size=1),
            Asset(pair="abcusd", pip=1.0, tick=0.1, contract_size=10),
        ])
        assert len(catalog) == 1
        assert catalog.find("ABCUSD").contract_size == 10

    def test_pairs_keep_catalog_order(self):
        assert default_catalog().pairs()[:2] == ["XAUUSD", "XAGUSD"]


class TestQuoteCurrency:
    """Quote currency resolution for FX normalization."""

    def test_catalog_entry_wins(self):
        assert quote_currency("USDJPY") == "JPY"
        assert quote_currency("GER40") == "EUR"

    def test_six_letter_fallback(self):
        assert quote_currency("audnzd") == "NZD"

    def test_unknown_defaults_to_usd(self):
        assert quote_currency("UK100") == "USD"

    def test_empty_catalog_is_respected(self):
        assert quote_currency("USDJPY", AssetCatalog([])) == "JPY"
        assert quote_currency("GER40", AssetCatalog([])) == "USD"
