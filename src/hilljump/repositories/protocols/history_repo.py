"""Price and dividend history repository protocols."""

from datetime import date
from typing import Protocol, Optional

from hilljump.domain.models import DividendEvent, PricePoint


class PriceRepository(Protocol):
    """Interface for daily close price history."""

    def upsert_many(self, ticker: str, prices: list[PricePoint]) -> int:
        """Insert or replace prices keyed by (ticker, date). Returns rows written."""
        ...

    def list_range(
        self,
        ticker: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[PricePoint]:
        """List prices for a ticker within [start, end], ascending by date."""
        ...

    def latest_date(self, ticker: str) -> Optional[date]:
        """Most recent stored trading date for a ticker."""
        ...


class DividendRepository(Protocol):
    """Interface for dividend history."""

    def upsert_many(self, ticker: str, dividends: list[DividendEvent]) -> int:
        """Insert or replace dividends keyed by (ticker, ex_date). Returns rows written."""
        ...

    def list_range(
        self,
        ticker: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[DividendEvent]:
        """List dividends for a ticker within [start, end], ascending by ex-date."""
        ...
