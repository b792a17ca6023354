"""Service layer - business logic orchestration."""

from hilljump.services.drip_calculator import calculate_drip, drip_windows, simple_price_return
from hilljump.services.etf_service import EtfService
from hilljump.services.market_data_service import MarketDataService
from hilljump.services.drip_service import DripService

__all__ = [
    "calculate_drip",
    "drip_windows",
    "simple_price_return",
    "EtfService",
    "MarketDataService",
    "DripService",
]
