"""DRIP calculation and cache endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hilljump.api.deps import get_drip_service
from hilljump.api.schemas import (
    BatchSummaryResponse,
    CachedDripRequest,
    CachedDripResponse,
    DripCalculateRequest,
    DripResultResponse,
    DripWindowsResponse,
    RecalculateRequest,
    windows_response,
)
from hilljump.core.timezone import today_eastern
from hilljump.domain.models import DividendEvent, PricePoint
from hilljump.services import DripService, calculate_drip

router = APIRouter(prefix="/drip", tags=["drip"])


@router.post("/calculate", response_model=Optional[DripResultResponse])
def calculate(data: DripCalculateRequest) -> Optional[DripResultResponse]:
    """
    Run the DRIP calculator on caller-supplied history.

    Returns null when the window holds fewer than two prices.
    """
    ticker = data.ticker.strip().upper()
    prices = [
        PricePoint(date=p.date, close_price=Decimal(str(p.close_price)), ticker=ticker)
        for p in data.prices
    ]
    dividends = [
        DividendEvent(
            ex_date=d.ex_date,
            amount_per_share=Decimal(str(d.amount_per_share)),
            currency=d.currency,
            ticker=ticker,
        )
        for d in data.dividends
    ]
    result = calculate_drip(
        prices,
        dividends,
        data.window_days,
        data.as_of or today_eastern(),
        tax_withholding=Decimal(str(data.tax_withholding)),
        payment_offset_days=data.payment_offset_days,
        include_last_dividend=data.include_last_dividend,
    )
    return DripResultResponse.from_result(result)


@router.post("/cached", response_model=CachedDripResponse)
def get_cached(
    data: CachedDripRequest,
    drip: DripService = Depends(get_drip_service),
) -> CachedDripResponse:
    """Latest cached DRIP windows for the requested tickers."""
    view = drip.get_cached(data.tickers, data.investor_country, data.max_age_seconds)
    return CachedDripResponse(
        drip_data={ticker: windows_response(windows) for ticker, windows in view.drip_data.items()},
        cached=view.cached,
        total=view.total,
        missing=view.missing,
    )


@router.post("/recalculate", response_model=BatchSummaryResponse)
def recalculate(
    data: RecalculateRequest,
    drip: DripService = Depends(get_drip_service),
) -> BatchSummaryResponse:
    """Recalculate and cache DRIP windows; `force` clears the cache first."""
    as_of = data.as_of or today_eastern()
    if data.force:
        summary = drip.force_recalc(as_of, data.investor_country)
    else:
        summary = drip.run_batch(as_of, data.tickers, data.investor_country)
    return BatchSummaryResponse.from_summary(summary)


@router.get("/{ticker}", response_model=DripWindowsResponse)
def get_ticker_drip(
    ticker: str,
    as_of: Optional[date] = Query(None, description="As-of date YYYY-MM-DD (default: today, US/Eastern)"),
    investor_country: Optional[str] = Query(None, description="Investor country code (default from settings)"),
    drip: DripService = Depends(get_drip_service),
) -> DripWindowsResponse:
    """Compute all DRIP windows for a registered ETF from stored history."""
    as_of_date = as_of or today_eastern()
    country = (investor_country or drip.investor_country).upper()
    windows = drip.calculate_for_ticker(ticker, as_of_date, country)
    return DripWindowsResponse(
        ticker=ticker.upper(),
        as_of=as_of_date,
        investor_country=country,
        windows=windows_response(windows),
    )
