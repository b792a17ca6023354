"""
Yahoo Finance market data provider.

Fetches unadjusted daily closes and dividend history through yfinance.
DRIP simulation reinvests at the close actually traded, so closes are
requested with auto_adjust=False.
"""

import logging
import math
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from hilljump.core.exceptions import ProviderError
from hilljump.domain.models import DividendEvent, PricePoint

logger = logging.getLogger(__name__)


def _get_yf():
    import yfinance as yf
    return yf


def _index_date(idx) -> date:
    return idx.date() if hasattr(idx, "date") else idx


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


class YahooFinanceProvider:
    """Historical prices and dividends from Yahoo Finance."""

    name = "yahoo"

    def __init__(self, currency_overrides: Optional[dict[str, str]] = None):
        self._currency_overrides = currency_overrides or {}

    def get_price_history(self, ticker: str, start: date, end: date) -> list[PricePoint]:
        """Fetch daily closes for `ticker` within [start, end]."""
        ticker = ticker.upper()
        yf = _get_yf()
        try:
            hist = yf.Ticker(ticker).history(
                start=start,
                end=end + timedelta(days=1),
                auto_adjust=False,
                actions=False,
            )
        except Exception as e:
            raise ProviderError(self.name, f"price history for {ticker} failed: {e}") from e

        if hist is None or hist.empty or "Close" not in hist.columns:
            logger.info("No price history returned for %s", ticker)
            return []

        result: list[PricePoint] = []
        for idx, close in hist["Close"].items():
            if _is_missing(close):
                continue
            day = _index_date(idx)
            if start <= day <= end:
                result.append(
                    PricePoint(
                        date=day,
                        close_price=Decimal(str(round(float(close), 4))),
                        ticker=ticker,
                    )
                )
        result.sort(key=lambda p: p.date)
        return result

    def get_dividends(self, ticker: str, start: date, end: date) -> list[DividendEvent]:
        """Fetch dividend events for `ticker` with ex-date within [start, end]."""
        ticker = ticker.upper()
        yf = _get_yf()
        try:
            series = yf.Ticker(ticker).dividends
        except Exception as e:
            raise ProviderError(self.name, f"dividends for {ticker} failed: {e}") from e

        if series is None or len(series) == 0:
            return []

        currency = self._currency_for(ticker)
        result: list[DividendEvent] = []
        for idx, amount in series.items():
            if _is_missing(amount):
                continue
            ex_date = _index_date(idx)
            if start <= ex_date <= end:
                result.append(
                    DividendEvent(
                        ex_date=ex_date,
                        amount_per_share=Decimal(str(round(float(amount), 6))),
                        currency=currency,
                        ticker=ticker,
                    )
                )
        result.sort(key=lambda d: d.ex_date)
        return result

    def _currency_for(self, ticker: str) -> str:
        if ticker in self._currency_overrides:
            return self._currency_overrides[ticker]
        return "CAD" if ticker.endswith(".TO") else "USD"
