"""Market data refresh endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hilljump.api.deps import get_etf_service, get_market_data_service
from hilljump.api.schemas import IngestionSummaryResponse
from hilljump.core.timezone import today_eastern
from hilljump.domain.views import IngestionSummary
from hilljump.services import EtfService, MarketDataService

router = APIRouter(prefix="/market-data", tags=["market-data"])


def _to_response(summary: IngestionSummary) -> IngestionSummaryResponse:
    return IngestionSummaryResponse(
        ticker=summary.ticker,
        prices_stored=summary.prices_stored,
        dividends_stored=summary.dividends_stored,
        error=summary.error,
    )


@router.post("/refresh", response_model=list[IngestionSummaryResponse])
def refresh_active(
    as_of: Optional[date] = Query(None, description="Last day to fetch (default: today)"),
    market: MarketDataService = Depends(get_market_data_service),
) -> list[IngestionSummaryResponse]:
    """Refresh price and dividend history for every active ETF."""
    summaries = market.refresh_active(as_of or today_eastern())
    return [_to_response(s) for s in summaries]


@router.post("/{ticker}/refresh", response_model=IngestionSummaryResponse)
def refresh_ticker(
    ticker: str,
    as_of: Optional[date] = Query(None, description="Last day to fetch (default: today)"),
    etfs: EtfService = Depends(get_etf_service),
    market: MarketDataService = Depends(get_market_data_service),
) -> IngestionSummaryResponse:
    """Refresh price and dividend history for one registered ETF."""
    etf = etfs.get(ticker)
    return _to_response(market.refresh_ticker(etf.ticker, as_of or today_eastern()))
