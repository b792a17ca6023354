"""API routers package."""

from hilljump.api.routers.drip import router as drip_router
from hilljump.api.routers.etfs import router as etfs_router
from hilljump.api.routers.market_data import router as market_data_router

__all__ = [
    "drip_router",
    "etfs_router",
    "market_data_router",
]
