"""DRIP service: runs the calculator over stored history and manages the cache."""

import logging
import time
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from hilljump.core.exceptions import AppError, InsufficientDataError, NotFoundError
from hilljump.core.timezone import utc_now
from hilljump.domain.models import DripCacheEntry, DripWindow, Etf
from hilljump.domain.views import BatchSummary, CachedDripView, DripResult
from hilljump.repositories.protocols import (
    DividendRepository,
    DripCacheRepository,
    EtfRepository,
    PriceRepository,
)
from hilljump.services.drip_calculator import drip_windows

logger = logging.getLogger(__name__)

# Extra history loaded ahead of the longest window
_HISTORY_MARGIN_DAYS = 7


class DripService:
    """
    Orchestrates DRIP calculations for tracked ETFs.

    Loads price and dividend history from storage, applies the investor's
    withholding tax, runs every lookback window and stores the results in
    the DRIP cache keyed by (ticker, calculation date, investor country).
    """

    def __init__(
        self,
        etf_repo: EtfRepository,
        price_repo: PriceRepository,
        dividend_repo: DividendRepository,
        cache_repo: DripCacheRepository,
        investor_country: str = "CA",
        foreign_withholding_rate: Decimal = Decimal("0.15"),
        payment_offset_days: int = 0,
        require_dividends: bool = True,
        batch_size: int = 10,
        batch_delay_seconds: float = 0.0,
        cache_ttl_seconds: int = 86400,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._etf_repo = etf_repo
        self._price_repo = price_repo
        self._dividend_repo = dividend_repo
        self._cache_repo = cache_repo
        self._investor_country = investor_country.upper()
        self._foreign_rate = Decimal(str(foreign_withholding_rate))
        self._payment_offset_days = payment_offset_days
        self._require_dividends = require_dividends
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay_seconds
        self._cache_ttl = cache_ttl_seconds
        self._sleep = sleep
        self._clock = clock

    @property
    def investor_country(self) -> str:
        return self._investor_country

    def withholding_rate(self, etf: Etf, investor_country: Optional[str] = None) -> Decimal:
        """
        Tax withheld on distributions from `etf` for an investor's country.

        Cross-border distributions lose the foreign rate; domestic ones none.
        """
        country = (investor_country or self._investor_country).upper()
        if etf.country == country:
            return Decimal("0")
        return self._foreign_rate

    def calculate_for_ticker(
        self,
        ticker: str,
        as_of: date,
        investor_country: Optional[str] = None,
    ) -> dict[str, Optional[DripResult]]:
        """
        Compute all DRIP windows for one ticker from stored history.

        Raises:
            NotFoundError: ticker is not a registered ETF.
            InsufficientDataError: no price history at all for the ticker.
        """
        ticker = ticker.strip().upper()
        etf = self._etf_repo.get(ticker)
        if etf is None:
            raise NotFoundError("ETF", ticker)

        history_start = as_of - timedelta(days=DripWindow.FIFTY_TWO_WEEKS.days + _HISTORY_MARGIN_DAYS)
        prices = self._price_repo.list_range(ticker, history_start, as_of)
        if not prices:
            raise InsufficientDataError(ticker)
        dividends = self._dividend_repo.list_range(ticker, history_start, as_of)

        results = drip_windows(
            prices,
            dividends,
            as_of,
            tax_withholding=self.withholding_rate(etf, investor_country),
            payment_offset_days=self._payment_offset_days,
            require_dividends=self._require_dividends,
        )

        for window, result in results.items():
            if result is not None and result.skipped_dividends:
                logger.warning(
                    "%s %s: %d dividend(s) not reinvested (no price on or after reinvest date)",
                    ticker,
                    window,
                    result.skipped_dividends,
                )
        return results

    def run_batch(
        self,
        as_of: date,
        tickers: Optional[list[str]] = None,
        investor_country: Optional[str] = None,
    ) -> BatchSummary:
        """
        Recalculate and cache DRIP windows for active ETFs (or `tickers`).

        Per-ticker failures are logged and counted; the batch continues.
        """
        country = (investor_country or self._investor_country).upper()
        if tickers is None:
            tickers = [etf.ticker for etf in self._etf_repo.list_active()]
        tickers = [t.strip().upper() for t in tickers]

        summary = BatchSummary(total=len(tickers))
        batches = [
            tickers[i:i + self._batch_size]
            for i in range(0, len(tickers), self._batch_size)
        ]
        logger.info(
            "Starting DRIP calculation for %d tickers in %d batches (as of %s, investor %s)",
            len(tickers),
            len(batches),
            as_of.isoformat(),
            country,
        )

        for batch_index, batch in enumerate(batches):
            if batch_index > 0 and self._batch_delay > 0:
                self._sleep(self._batch_delay)
            logger.info("Processing batch %d/%d (%d tickers)", batch_index + 1, len(batches), len(batch))

            for ticker in batch:
                try:
                    windows = self.calculate_for_ticker(ticker, as_of, country)
                    self._cache_repo.upsert(
                        DripCacheEntry(
                            ticker=ticker,
                            calculation_date=as_of,
                            investor_country=country,
                            windows=windows,
                            created_at=self._clock(),
                        )
                    )
                    summary.processed += 1
                except AppError as e:
                    logger.error("Error calculating DRIP for %s: %s", ticker, e.message)
                    summary.errors += 1
                    summary.failed_tickers.append(ticker)
                except Exception:
                    logger.exception("Unexpected error calculating DRIP for %s", ticker)
                    summary.errors += 1
                    summary.failed_tickers.append(ticker)

        logger.info(
            "DRIP calculation complete: %d processed, %d errors",
            summary.processed,
            summary.errors,
        )
        return summary

    def get_cached(
        self,
        tickers: list[str],
        investor_country: Optional[str] = None,
        max_age_seconds: Optional[int] = None,
    ) -> CachedDripView:
        """
        Latest cached windows per ticker.

        Entries older than `max_age_seconds` (default: the cache TTL) are
        treated as missing so callers can trigger a recalculation.
        """
        country = (investor_country or self._investor_country).upper()
        requested = [t.strip().upper() for t in tickers]
        ttl = self._cache_ttl if max_age_seconds is None else max_age_seconds
        now = self._clock()

        entries = self._cache_repo.get_latest(requested, country)
        view = CachedDripView(total=len(requested))
        for ticker in requested:
            entry = entries.get(ticker)
            if entry is None or self._is_stale(entry, now, ttl):
                view.missing.append(ticker)
                continue
            view.drip_data[ticker] = entry.windows

        logger.info("Found cached DRIP data for %d/%d tickers", view.cached, view.total)
        if view.missing:
            logger.info("Missing DRIP data for: %s", ", ".join(view.missing))
        return view

    def force_recalc(
        self,
        as_of: date,
        investor_country: Optional[str] = None,
    ) -> BatchSummary:
        """Clear the cache (one country or all) and recalculate every active ETF."""
        deleted = self._cache_repo.clear(investor_country)
        logger.info("Cleared %d cached DRIP entries", deleted)
        return self.run_batch(as_of, investor_country=investor_country)

    @staticmethod
    def _is_stale(entry: DripCacheEntry, now: datetime, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0 or entry.created_at is None:
            return False
        return (now - entry.created_at).total_seconds() > ttl_seconds
