"""Market data providers module."""

from hilljump.providers.market_data_provider import MarketDataProvider
from hilljump.providers.stub_provider import StubMarketDataProvider
from hilljump.providers.yahoo_provider import YahooFinanceProvider


def create_provider(name: str) -> MarketDataProvider:
    """Build a provider by its configured name."""
    if name == "stub":
        return StubMarketDataProvider()
    if name == "yahoo":
        return YahooFinanceProvider()
    raise ValueError(f"Unknown market data provider: {name}")


__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YahooFinanceProvider",
    "create_provider",
]
