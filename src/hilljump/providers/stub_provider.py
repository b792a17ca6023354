"""Stub market data provider for offline/testing use."""

import random
from datetime import date, timedelta
from decimal import Decimal

from hilljump.domain.models import DividendEvent, PricePoint


# Deterministic base prices and monthly distributions for common income ETFs
_STUB_PROFILES: dict[str, tuple[Decimal, Decimal]] = {
    "JEPI": (Decimal("57.25"), Decimal("0.38")),
    "JEPQ": (Decimal("53.10"), Decimal("0.45")),
    "QYLD": (Decimal("17.60"), Decimal("0.17")),
    "SCHD": (Decimal("27.40"), Decimal("0.25")),
    "XYLD": (Decimal("40.15"), Decimal("0.33")),
    "MSTY": (Decimal("21.80"), Decimal("1.35")),
    "ZWC.TO": (Decimal("17.95"), Decimal("0.10")),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Prices follow a seeded random walk per ticker; dividends go ex on the
    first weekday of every month.
    """

    name = "stub"

    def __init__(self, seed: int = 42):
        self._seed = seed

    def _profile(self, ticker: str) -> tuple[Decimal, Decimal]:
        if ticker in _STUB_PROFILES:
            return _STUB_PROFILES[ticker]
        rng = random.Random(f"{self._seed}:{ticker}")
        base = Decimal(str(20 + rng.random() * 80)).quantize(Decimal("0.01"))
        return base, (base * Decimal("0.008")).quantize(Decimal("0.0001"))

    def get_price_history(self, ticker: str, start: date, end: date) -> list[PricePoint]:
        """Return a weekday random-walk series between start and end."""
        ticker = ticker.upper()
        base, _ = self._profile(ticker)
        rng = random.Random(f"{self._seed}:{ticker}:prices")
        result: list[PricePoint] = []
        price = base
        current = start
        while current <= end:
            if current.weekday() < 5:
                drift = Decimal(str((rng.random() - 0.5) * 0.02))
                price = max(Decimal("0.01"), (price * (1 + drift)).quantize(Decimal("0.01")))
                result.append(PricePoint(date=current, close_price=price, ticker=ticker))
            current += timedelta(days=1)
        return result

    def get_dividends(self, ticker: str, start: date, end: date) -> list[DividendEvent]:
        """Return one distribution per month, ex on the first weekday."""
        ticker = ticker.upper()
        _, amount = self._profile(ticker)
        currency = "CAD" if ticker.endswith(".TO") else "USD"
        result: list[DividendEvent] = []
        month = date(start.year, start.month, 1)
        while month <= end:
            ex_date = month
            while ex_date.weekday() >= 5:
                ex_date += timedelta(days=1)
            if start <= ex_date <= end:
                result.append(
                    DividendEvent(
                        ex_date=ex_date,
                        amount_per_share=amount,
                        currency=currency,
                        pay_date=ex_date + timedelta(days=3),
                        ticker=ticker,
                    )
                )
            month = date(month.year + month.month // 12, month.month % 12 + 1, 1)
        return result
