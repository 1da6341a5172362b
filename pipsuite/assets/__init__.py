"""Instrument catalog."""

from pipsuite.assets.catalog import (
    DEFAULT_ASSETS,
    AssetCatalog,
    default_catalog,
    quote_currency,
)

__all__ = [
    "DEFAULT_ASSETS",
    "AssetCatalog",
    "default_catalog",
    "quote_currency",
]
