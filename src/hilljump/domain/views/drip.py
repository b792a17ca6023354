"""View models for DRIP calculation outputs."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any


@dataclass
class ReinvestmentStep:
    """Audit row for a single reinvested dividend."""

    ex_date: date
    reinvest_date: date
    dividend_per_share: Decimal
    reinvest_price: Decimal
    cash_received: Decimal
    shares_added: Decimal
    shares_after: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "exDate": self.ex_date.isoformat(),
            "reinvestDate": self.reinvest_date.isoformat(),
            "dividendPerShare": float(self.dividend_per_share),
            "reinvestPrice": float(self.reinvest_price),
            "cashReceived": float(self.cash_received),
            "sharesAdded": float(self.shares_added),
            "sharesAfter": float(self.shares_after),
        }


@dataclass
class DripResult:
    """
    Outcome of simulating a one-share position with dividends reinvested.

    `skipped_dividends` counts in-window dividends that were not reinvested
    (no price on or after the reinvestment date, or an unusable amount).
    A non-zero count means the figure understates the true DRIP return.

    `start_date` is the window start; `start_price_date` is the first close
    actually found in the window and falls later when history is short.
    """

    window_days: int
    start_date: date
    end_date: date
    start_price_date: date
    end_price_date: date
    start_price: Decimal
    end_price: Decimal
    start_shares: Decimal
    end_shares: Decimal
    total_dividends: Decimal
    growth_percent: Decimal
    skipped_dividends: int = 0
    steps: list[ReinvestmentStep] = field(default_factory=list)

    @property
    def reinvestment_factor(self) -> Decimal:
        """Ratio of ending to starting share count."""
        return self.end_shares / self.start_shares

    @property
    def is_complete(self) -> bool:
        """True when every in-window dividend was reinvested."""
        return self.skipped_dividends == 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation (camelCase, numbers as floats)."""
        return {
            "windowDays": self.window_days,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "startPriceDate": self.start_price_date.isoformat(),
            "endPriceDate": self.end_price_date.isoformat(),
            "startPrice": float(self.start_price),
            "endPrice": float(self.end_price),
            "startShares": float(self.start_shares),
            "endShares": float(self.end_shares),
            "totalDividends": float(self.total_dividends),
            "growthPercent": float(self.growth_percent),
            "reinvestmentFactor": float(self.reinvestment_factor),
            "skippedDividends": self.skipped_dividends,
            "steps": [step.to_dict() for step in self.steps],
        }
