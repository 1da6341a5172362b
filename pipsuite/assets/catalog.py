"""Static catalog of tradable instruments."""

from typing import Iterable, Optional

from pipsuite.models import Asset


DEFAULT_ASSETS: tuple[Asset, ...] = (
    # Metals
    Asset(pair="XAUUSD", pip=0.1, tick=0.01, contract_size=100, quote="USD"),
    Asset(pair="XAGUSD", pip=0.01, tick=0.001, contract_size=5000, quote="USD"),
    # FX majors and crosses
    Asset(pair="EURUSD", pip=0.0001, tick=0.00001, contract_size=100000, quote="USD"),
    Asset(pair="GBPUSD", pip=0.0001, tick=0.00001, contract_size=100000, quote="USD"),
    Asset(pair="AUDUSD", pip=0.0001, tick=0.00001, contract_size=100000, quote="USD"),
    Asset(pair="NZDUSD", pip=0.0001, tick=0.00001, contract_size=100000, quote="USD"),
    Asset(pair="USDJPY", pip=0.01, tick=0.001, contract_size=100000, quote="JPY"),
    Asset(pair="USDCHF", pip=0.0001, tick=0.00001, contract_size=100000, quote="CHF"),
    Asset(pair="USDCAD", pip=0.0001, tick=0.00001, contract_size=100000, quote="CAD"),
    Asset(pair="EURJPY", pip=0.01, tick=0.001, contract_size=100000, quote="JPY"),
    Asset(pair="GBPJPY", pip=0.01, tick=0.001, contract_size=100000, quote="JPY"),
    Asset(pair="EURGBP", pip=0.0001, tick=0.00001, contract_size=100000, quote="GBP"),
    # Indices
    Asset(pair="US30", pip=1.0, tick=0.1, contract_size=1, quote="USD"),
    Asset(pair="NAS100", pip=1.0, tick=0.1, contract_size=1, quote="USD"),
    Asset(pair="SPX500", pip=0.1, tick=0.01, contract_size=1, quote="USD"),
    Asset(pair="GER40", pip=1.0, tick=0.1, contract_size=1, quote="EUR"),
    # Crypto
    Asset(pair="BTCUSD", pip=1.0, tick=0.01, contract_size=1, quote="USD"),
    Asset(pair="ETHUSD", pip=0.1, tick=0.01, contract_size=1, quote="USD"),
)


def _normalize(pair: str) -> str:
    return pair.strip().upper()


class AssetCatalog:
    """Read-only lookup table of instruments keyed by pair symbol."""

    def __init__(self, assets: Iterable[Asset] = DEFAULT_ASSETS):
        """Initialize the catalog.

        Args:
            assets: Instruments to index. Later duplicates replace earlier ones.
        """
        self._assets: dict[str, Asset] = {}
        for asset in assets:
            self._assets[_normalize(asset.pair)] = asset

    def find(self, pair: Optional[str]) -> Optional[Asset]:
        """Find an asset by exact, case-insensitive pair symbol.

        Args:
            pair: Symbol to look up.

        Returns:
            The asset, or None when the symbol is unknown.
        """
        if not pair:
            return None
        return self._assets.get(_normalize(pair))

    def pairs(self) -> list[str]:
        """All known pair symbols, in catalog order."""
        return [asset.pair for asset in self._assets.values()]

    def __contains__(self, pair: object) -> bool:
        return isinstance(pair, str) and self.find(pair) is not None

    def __len__(self) -> int:
        return len(self._assets)


_DEFAULT_CATALOG = AssetCatalog()


def default_catalog() -> AssetCatalog:
    """Shared catalog built from DEFAULT_ASSETS."""
    return _DEFAULT_CATALOG


def quote_currency(pair: str, catalog: Optional[AssetCatalog] = None) -> str:
    """Quote currency of an instrument.

    Uses the catalog entry when present, else the last three letters of
    a six-letter pair, else USD.
    """
    if catalog is None:
        catalog = _DEFAULT_CATALOG
    asset = catalog.find(pair)
    if asset is not None:
        return asset.quote
    normalized = _normalize(pair)
    if len(normalized) == 6 and normalized.isalpha():
        return normalized[3:]
    return "USD"
