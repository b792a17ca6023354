"""ETF registry endpoints."""

from fastapi import APIRouter, Depends, Query

from hilljump.api.deps import get_etf_service
from hilljump.api.schemas import EtfCreate, EtfListResponse, EtfResponse, EtfUpdate
from hilljump.domain.models import Etf
from hilljump.services import EtfService

router = APIRouter(prefix="/etfs", tags=["etfs"])


def _to_response(etf: Etf) -> EtfResponse:
    return EtfResponse(
        ticker=etf.ticker,
        name=etf.name,
        country=etf.country,
        currency=etf.currency,
        active=etf.active,
        created_at=etf.created_at,
    )


@router.get("/", response_model=EtfListResponse)
def list_etfs(
    active_only: bool = Query(False, description="Only ETFs included in batch runs"),
    service: EtfService = Depends(get_etf_service),
) -> EtfListResponse:
    """List registered ETFs."""
    etfs = service.list_etfs(active_only=active_only)
    return EtfListResponse(etfs=[_to_response(e) for e in etfs], count=len(etfs))


@router.post("/", response_model=EtfResponse, status_code=201)
def register_etf(
    data: EtfCreate,
    service: EtfService = Depends(get_etf_service),
) -> EtfResponse:
    """Register (or update) an ETF."""
    etf = service.register(
        ticker=data.ticker,
        name=data.name,
        country=data.country,
        currency=data.currency,
        active=data.active,
    )
    return _to_response(etf)


@router.get("/{ticker}", response_model=EtfResponse)
def get_etf(
    ticker: str,
    service: EtfService = Depends(get_etf_service),
) -> EtfResponse:
    """Get a single ETF."""
    return _to_response(service.get(ticker))


@router.patch("/{ticker}", response_model=EtfResponse)
def update_etf(
    ticker: str,
    data: EtfUpdate,
    service: EtfService = Depends(get_etf_service),
) -> EtfResponse:
    """Activate or deactivate an ETF."""
    return _to_response(service.set_active(ticker, data.active))
