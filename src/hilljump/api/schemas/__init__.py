"""Pydantic schemas for API request/response."""

from hilljump.api.schemas.drip import (
    PricePointIn,
    DividendEventIn,
    DripCalculateRequest,
    ReinvestmentStepResponse,
    DripResultResponse,
    DripWindowsResponse,
    CachedDripRequest,
    CachedDripResponse,
    RecalculateRequest,
    BatchSummaryResponse,
    windows_response,
)
from hilljump.api.schemas.etf import (
    EtfCreate,
    EtfUpdate,
    EtfResponse,
    EtfListResponse,
    IngestionSummaryResponse,
)

__all__ = [
    "PricePointIn",
    "DividendEventIn",
    "DripCalculateRequest",
    "ReinvestmentStepResponse",
    "DripResultResponse",
    "DripWindowsResponse",
    "CachedDripRequest",
    "CachedDripResponse",
    "RecalculateRequest",
    "BatchSummaryResponse",
    "windows_response",
    "EtfCreate",
    "EtfUpdate",
    "EtfResponse",
    "EtfListResponse",
    "IngestionSummaryResponse",
]
