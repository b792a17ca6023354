"""Price and dividend history domain models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PricePoint:
    """
    Daily closing price for a ticker.

    One row per ticker per trading day; immutable once recorded.
    """

    date: date
    close_price: Decimal
    ticker: Optional[str] = None


@dataclass(frozen=True)
class DividendEvent:
    """
    Single per-share distribution, keyed by ex-dividend date.

    Immutable once recorded.
    """

    ex_date: date
    amount_per_share: Decimal
    currency: str = "USD"
    pay_date: Optional[date] = None
    ticker: Optional[str] = None
