"""Cache repository protocol for derived DRIP results."""

from datetime import date
from typing import Protocol, Optional

from hilljump.domain.models import DripCacheEntry


class DripCacheRepository(Protocol):
    """Interface for cached DRIP calculations."""

    def upsert(self, entry: DripCacheEntry) -> DripCacheEntry:
        """Insert or replace the entry for (ticker, calculation_date, investor_country)."""
        ...

    def get_latest(
        self,
        tickers: list[str],
        investor_country: str,
    ) -> dict[str, DripCacheEntry]:
        """Most recent entry per ticker; tickers without one are omitted."""
        ...

    def clear(self, investor_country: Optional[str] = None) -> int:
        """Delete cached entries (all countries when None). Returns rows deleted."""
        ...

    def purge_before(self, calculation_date: date) -> int:
        """Delete entries calculated before a date. Returns rows deleted."""
        ...
