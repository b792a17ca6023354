"""Domain models package."""

from hilljump.domain.models.enums import DripWindow
from hilljump.domain.models.market_data import PricePoint, DividendEvent
from hilljump.domain.models.etf import Etf
from hilljump.domain.models.cache import DripCacheEntry

__all__ = [
    "DripWindow",
    "PricePoint",
    "DividendEvent",
    "Etf",
    "DripCacheEntry",
]
