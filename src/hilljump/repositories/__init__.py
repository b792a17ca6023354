"""Repository layer - data access abstractions and implementations."""

from hilljump.repositories.protocols import (
    EtfRepository,
    PriceRepository,
    DividendRepository,
    DripCacheRepository,
)

__all__ = [
    "EtfRepository",
    "PriceRepository",
    "DividendRepository",
    "DripCacheRepository",
]
