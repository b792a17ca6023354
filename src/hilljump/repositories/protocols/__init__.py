"""Repository protocol definitions (interfaces)."""

from hilljump.repositories.protocols.etf_repo import EtfRepository
from hilljump.repositories.protocols.history_repo import PriceRepository, DividendRepository
from hilljump.repositories.protocols.cache_repo import DripCacheRepository

__all__ = [
    "EtfRepository",
    "PriceRepository",
    "DividendRepository",
    "DripCacheRepository",
]
