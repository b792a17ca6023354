"""View models for batch, ingestion and import summaries."""

from dataclasses import dataclass, field
from typing import Optional

from hilljump.domain.views.drip import DripResult


@dataclass
class ImportSummary:
    """Summary of CSV import operation."""

    imported_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    errors: list[str] = field(default_factory=list)
    tickers: list[str] = field(default_factory=list)


@dataclass
class IngestionSummary:
    """Summary of refreshing one ticker from a market data provider."""

    ticker: str
    prices_stored: int = 0
    dividends_stored: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    """Summary of a DRIP batch recalculation."""

    processed: int = 0
    errors: int = 0
    total: int = 0
    failed_tickers: list[str] = field(default_factory=list)


@dataclass
class CachedDripView:
    """Latest cached DRIP windows for a set of requested tickers."""

    drip_data: dict[str, dict[str, Optional[DripResult]]] = field(default_factory=dict)
    total: int = 0
    missing: list[str] = field(default_factory=list)

    @property
    def cached(self) -> int:
        return len(self.drip_data)
