"""Market data provider protocol."""

from datetime import date
from typing import Protocol

from hilljump.domain.models import DividendEvent, PricePoint


class MarketDataProvider(Protocol):
    """
    Protocol for historical market data providers.

    Implementations raise ProviderError when the upstream call fails;
    an unknown ticker or empty range returns an empty list.
    """

    name: str

    def get_price_history(self, ticker: str, start: date, end: date) -> list[PricePoint]:
        """Fetch daily closes for `ticker` within [start, end], ascending."""
        ...

    def get_dividends(self, ticker: str, start: date, end: date) -> list[DividendEvent]:
        """Fetch dividend events with ex-date within [start, end], ascending."""
        ...
