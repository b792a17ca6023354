"""Domain layer - pure business models with no external dependencies."""

from hilljump.domain.models import (
    DripWindow,
    PricePoint,
    DividendEvent,
    Etf,
    DripCacheEntry,
)
from hilljump.domain.views import DripResult, ReinvestmentStep

__all__ = [
    "DripWindow",
    "PricePoint",
    "DividendEvent",
    "Etf",
    "DripCacheEntry",
    "DripResult",
    "ReinvestmentStep",
]
