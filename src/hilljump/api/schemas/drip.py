"""Pydantic schemas for DRIP endpoints."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hilljump.domain.models import DripWindow
from hilljump.domain.views import BatchSummary, DripResult


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PricePointIn(CamelModel):
    """Daily close in a calculation request."""

    date: date
    close_price: float


class DividendEventIn(CamelModel):
    """Dividend event in a calculation request."""

    ex_date: date
    amount_per_share: float
    currency: str = "USD"


class DripCalculateRequest(CamelModel):
    """Request schema for an ad-hoc DRIP calculation."""

    ticker: str
    prices: list[PricePointIn]
    dividends: list[DividendEventIn] = Field(default_factory=list)
    window_days: int
    as_of: Optional[date] = None
    tax_withholding: float = Field(default=0.0, ge=0.0, lt=1.0)
    payment_offset_days: int = Field(default=0, ge=0)
    include_last_dividend: bool = False

    @field_validator("window_days")
    @classmethod
    def check_window(cls, value: int) -> int:
        DripWindow.from_days(value)
        return value


class ReinvestmentStepResponse(CamelModel):
    """Response schema for one reinvested dividend."""

    ex_date: date
    reinvest_date: date
    dividend_per_share: float
    reinvest_price: float
    cash_received: float
    shares_added: float
    shares_after: float


class DripResultResponse(CamelModel):
    """Response schema for a DRIP calculation."""

    window_days: int
    start_date: date
    end_date: date
    start_price_date: date
    end_price_date: date
    start_price: float
    end_price: float
    start_shares: float
    end_shares: float
    total_dividends: float
    growth_percent: float
    reinvestment_factor: float
    skipped_dividends: int
    steps: list[ReinvestmentStepResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: Optional[DripResult]) -> Optional["DripResultResponse"]:
        if result is None:
            return None
        return cls.model_validate(result.to_dict())


def windows_response(
    windows: dict[str, Optional[DripResult]],
) -> dict[str, Optional[DripResultResponse]]:
    return {key: DripResultResponse.from_result(value) for key, value in windows.items()}


class DripWindowsResponse(CamelModel):
    """Response schema for all windows of one ticker."""

    ticker: str
    as_of: date
    investor_country: str
    windows: dict[str, Optional[DripResultResponse]]


class CachedDripRequest(CamelModel):
    """Request schema for cached DRIP lookup."""

    tickers: list[str]
    investor_country: Optional[str] = None
    max_age_seconds: Optional[int] = Field(default=None, ge=0)


class CachedDripResponse(CamelModel):
    """Response schema for cached DRIP lookup."""

    drip_data: dict[str, dict[str, Optional[DripResultResponse]]]
    cached: int
    total: int
    missing: list[str]


class RecalculateRequest(CamelModel):
    """Request schema for a DRIP batch recalculation."""

    as_of: Optional[date] = None
    investor_country: Optional[str] = None
    tickers: Optional[list[str]] = None
    force: bool = False


class BatchSummaryResponse(CamelModel):
    """Response schema for a DRIP batch run."""

    processed: int
    errors: int
    total: int
    failed_tickers: list[str]

    @classmethod
    def from_summary(cls, summary: BatchSummary) -> "BatchSummaryResponse":
        return cls(
            processed=summary.processed,
            errors=summary.errors,
            total=summary.total,
            failed_tickers=summary.failed_tickers,
        )
