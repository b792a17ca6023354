"""Market data service: pulls price and dividend history into storage."""

import logging
import time
from datetime import date, timedelta
from typing import Callable, Optional

from hilljump.core.exceptions import AppError
from hilljump.domain.views import IngestionSummary
from hilljump.providers.market_data_provider import MarketDataProvider
from hilljump.repositories.protocols import (
    DividendRepository,
    EtfRepository,
    PriceRepository,
)

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Service for refreshing stored history from a market data provider.

    Tickers are fetched one at a time with a fixed delay between requests to
    stay inside provider rate limits. A failing ticker is logged and reported
    in its summary; it never aborts the run.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        etf_repo: EtfRepository,
        price_repo: PriceRepository,
        dividend_repo: DividendRepository,
        price_history_days: int = 400,
        dividend_history_days: int = 730,
        request_delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._provider = provider
        self._etf_repo = etf_repo
        self._price_repo = price_repo
        self._dividend_repo = dividend_repo
        self._price_history_days = price_history_days
        self._dividend_history_days = dividend_history_days
        self._request_delay = request_delay_seconds
        self._sleep = sleep

    def refresh_ticker(self, ticker: str, as_of: date) -> IngestionSummary:
        """Fetch and store price and dividend history for one ticker."""
        ticker = ticker.strip().upper()
        summary = IngestionSummary(ticker=ticker)
        try:
            prices = self._provider.get_price_history(
                ticker, as_of - timedelta(days=self._price_history_days), as_of
            )
            dividends = self._provider.get_dividends(
                ticker, as_of - timedelta(days=self._dividend_history_days), as_of
            )
            if prices:
                summary.prices_stored = self._price_repo.upsert_many(ticker, prices)
            if dividends:
                summary.dividends_stored = self._dividend_repo.upsert_many(ticker, dividends)
        except AppError as e:
            logger.error("Refreshing %s from %s failed: %s", ticker, self._provider.name, e.message)
            summary.error = e.message
            return summary
        except Exception as e:
            logger.exception("Unexpected error refreshing %s from %s", ticker, self._provider.name)
            summary.error = str(e)
            return summary

        if not prices:
            logger.warning("%s returned no prices for %s", self._provider.name, ticker)
        logger.info(
            "Refreshed %s: %d prices, %d dividends",
            ticker,
            summary.prices_stored,
            summary.dividends_stored,
        )
        return summary

    def refresh_active(
        self,
        as_of: date,
        tickers: Optional[list[str]] = None,
    ) -> list[IngestionSummary]:
        """Refresh every active ETF (or the given tickers), sequentially."""
        if tickers is None:
            tickers = [etf.ticker for etf in self._etf_repo.list_active()]

        logger.info("Refreshing market data for %d tickers", len(tickers))
        summaries: list[IngestionSummary] = []
        for i, ticker in enumerate(tickers):
            if i > 0 and self._request_delay > 0:
                self._sleep(self._request_delay)
            summaries.append(self.refresh_ticker(ticker, as_of))

        failed = [s.ticker for s in summaries if not s.ok]
        if failed:
            logger.warning("Market data refresh failed for: %s", ", ".join(failed))
        return summaries
