"""Pydantic schemas for ETF and market data endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from hilljump.api.schemas.drip import CamelModel


class EtfCreate(CamelModel):
    """Request schema for registering an ETF."""

    ticker: str = Field(..., min_length=1, max_length=20)
    name: Optional[str] = None
    country: str = Field(default="US", min_length=2, max_length=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    active: bool = True


class EtfUpdate(CamelModel):
    """Request schema for toggling an ETF."""

    active: bool


class EtfResponse(CamelModel):
    """Response schema for an ETF."""

    ticker: str
    name: Optional[str] = None
    country: str
    currency: str
    active: bool
    created_at: Optional[datetime] = None


class EtfListResponse(CamelModel):
    """Response schema for ETF listing."""

    etfs: list[EtfResponse]
    count: int


class IngestionSummaryResponse(CamelModel):
    """Response schema for a market data refresh of one ticker."""

    ticker: str
    prices_stored: int
    dividends_stored: int
    error: Optional[str] = None
