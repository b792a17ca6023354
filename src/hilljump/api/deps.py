"""Dependency injection for FastAPI."""

from decimal import Decimal

from fastapi import Depends
from sqlalchemy.orm import Session

from hilljump.config.settings import get_settings
from hilljump.providers import MarketDataProvider, create_provider
from hilljump.repositories.sqlalchemy.database import get_db
from hilljump.repositories.sqlalchemy import (
    SqlAlchemyEtfRepository,
    SqlAlchemyPriceRepository,
    SqlAlchemyDividendRepository,
    SqlAlchemyDripCacheRepository,
)
from hilljump.services import DripService, EtfService, MarketDataService


def get_etf_repo(db: Session = Depends(get_db)) -> SqlAlchemyEtfRepository:
    """Provide EtfRepository instance."""
    return SqlAlchemyEtfRepository(db)


def get_price_repo(db: Session = Depends(get_db)) -> SqlAlchemyPriceRepository:
    """Provide PriceRepository instance."""
    return SqlAlchemyPriceRepository(db)


def get_dividend_repo(db: Session = Depends(get_db)) -> SqlAlchemyDividendRepository:
    """Provide DividendRepository instance."""
    return SqlAlchemyDividendRepository(db)


def get_cache_repo(db: Session = Depends(get_db)) -> SqlAlchemyDripCacheRepository:
    """Provide DripCacheRepository instance."""
    return SqlAlchemyDripCacheRepository(db)


def get_market_provider() -> MarketDataProvider:
    """Provide the configured MarketDataProvider."""
    return create_provider(get_settings().market_data_provider)


def get_etf_service(
    etf_repo: SqlAlchemyEtfRepository = Depends(get_etf_repo),
) -> EtfService:
    """Provide EtfService instance."""
    return EtfService(etf_repo=etf_repo)


def get_market_data_service(
    provider: MarketDataProvider = Depends(get_market_provider),
    etf_repo: SqlAlchemyEtfRepository = Depends(get_etf_repo),
    price_repo: SqlAlchemyPriceRepository = Depends(get_price_repo),
    dividend_repo: SqlAlchemyDividendRepository = Depends(get_dividend_repo),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    settings = get_settings()
    return MarketDataService(
        provider=provider,
        etf_repo=etf_repo,
        price_repo=price_repo,
        dividend_repo=dividend_repo,
        price_history_days=settings.price_history_days,
        dividend_history_days=settings.dividend_history_days,
        request_delay_seconds=settings.provider_request_delay_seconds,
    )


def get_drip_service(
    etf_repo: SqlAlchemyEtfRepository = Depends(get_etf_repo),
    price_repo: SqlAlchemyPriceRepository = Depends(get_price_repo),
    dividend_repo: SqlAlchemyDividendRepository = Depends(get_dividend_repo),
    cache_repo: SqlAlchemyDripCacheRepository = Depends(get_cache_repo),
) -> DripService:
    """Provide DripService instance."""
    settings = get_settings()
    return DripService(
        etf_repo=etf_repo,
        price_repo=price_repo,
        dividend_repo=dividend_repo,
        cache_repo=cache_repo,
        investor_country=settings.investor_country,
        foreign_withholding_rate=Decimal(str(settings.foreign_withholding_rate)),
        payment_offset_days=settings.payment_offset_days,
        require_dividends=settings.require_dividends,
        batch_size=settings.drip_batch_size,
        batch_delay_seconds=settings.drip_batch_delay_seconds,
        cache_ttl_seconds=settings.drip_cache_ttl_seconds,
    )
