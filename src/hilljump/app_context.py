"""Application context for in-process service management.

Provides a centralized way to access all services without HTTP.
Used by the batch scripts to run ingestion and DRIP calculation directly.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from hilljump.config.settings import Settings, set_settings, get_settings
from hilljump.repositories.sqlalchemy.database import (
    init_db_with_path,
    reset_database,
    get_session,
)
from hilljump.repositories.sqlalchemy import (
    SqlAlchemyEtfRepository,
    SqlAlchemyPriceRepository,
    SqlAlchemyDividendRepository,
    SqlAlchemyDripCacheRepository,
)
from hilljump.providers import MarketDataProvider, create_provider
from hilljump.services import DripService, EtfService, MarketDataService
from hilljump.csv import CsvImporter, CsvExporter


class AppContext:
    """
    Application context providing in-process access to all services.

    This is the entry point for scheduled jobs that bypass HTTP/FastAPI.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        """
        Initialize application context.

        Args:
            data_dir: Optional data directory. If not provided, uses default.
            provider: Optional market data provider overriding settings.
        """
        self._data_dir = data_dir
        self._provider = provider
        self._session = None
        self._initialized = False

        # Service instances (lazy initialized)
        self._etf_service: Optional[EtfService] = None
        self._market_data_service: Optional[MarketDataService] = None
        self._drip_service: Optional[DripService] = None
        self._csv_importer: Optional[CsvImporter] = None
        self._csv_exporter: Optional[CsvExporter] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize or reinitialize the application with a data directory.

        Args:
            data_dir: Data directory path. Uses default if not provided.
        """
        if data_dir:
            self._data_dir = data_dir

        settings = get_settings()
        if self._data_dir:
            settings = settings.model_copy(update={"data_dir": self._data_dir})
            set_settings(settings)

        reset_database()
        init_db_with_path(settings.get_data_dir() / "hilljump.db")

        self._session = None
        self._reset_services()
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def data_dir(self) -> Path:
        """Get the current data directory."""
        return get_settings().get_data_dir()

    @property
    def settings(self) -> Settings:
        return get_settings()

    def _get_session(self):
        """Get or create database session."""
        if self._session is None:
            self._session = get_session()
        return self._session

    def _reset_services(self) -> None:
        self._etf_service = None
        self._market_data_service = None
        self._drip_service = None
        self._csv_importer = None
        self._csv_exporter = None

    # Repository accessors
    def _get_etf_repo(self) -> SqlAlchemyEtfRepository:
        return SqlAlchemyEtfRepository(self._get_session())

    def _get_price_repo(self) -> SqlAlchemyPriceRepository:
        return SqlAlchemyPriceRepository(self._get_session())

    def _get_dividend_repo(self) -> SqlAlchemyDividendRepository:
        return SqlAlchemyDividendRepository(self._get_session())

    def _get_cache_repo(self) -> SqlAlchemyDripCacheRepository:
        return SqlAlchemyDripCacheRepository(self._get_session())

    # Service accessors
    @property
    def etfs(self) -> EtfService:
        """Get the EtfService instance."""
        if self._etf_service is None:
            self._etf_service = EtfService(etf_repo=self._get_etf_repo())
        return self._etf_service

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            settings = get_settings()
            provider = self._provider or create_provider(settings.market_data_provider)
            self._market_data_service = MarketDataService(
                provider=provider,
                etf_repo=self._get_etf_repo(),
                price_repo=self._get_price_repo(),
                dividend_repo=self._get_dividend_repo(),
                price_history_days=settings.price_history_days,
                dividend_history_days=settings.dividend_history_days,
                request_delay_seconds=settings.provider_request_delay_seconds,
            )
        return self._market_data_service

    @property
    def drip(self) -> DripService:
        """Get the DripService instance."""
        if self._drip_service is None:
            settings = get_settings()
            self._drip_service = DripService(
                etf_repo=self._get_etf_repo(),
                price_repo=self._get_price_repo(),
                dividend_repo=self._get_dividend_repo(),
                cache_repo=self._get_cache_repo(),
                investor_country=settings.investor_country,
                foreign_withholding_rate=Decimal(str(settings.foreign_withholding_rate)),
                payment_offset_days=settings.payment_offset_days,
                require_dividends=settings.require_dividends,
                batch_size=settings.drip_batch_size,
                batch_delay_seconds=settings.drip_batch_delay_seconds,
                cache_ttl_seconds=settings.drip_cache_ttl_seconds,
            )
        return self._drip_service

    # CSV utilities
    @property
    def csv_importer(self) -> CsvImporter:
        """Get the CsvImporter instance."""
        if self._csv_importer is None:
            self._csv_importer = CsvImporter(
                price_repo=self._get_price_repo(),
                dividend_repo=self._get_dividend_repo(),
            )
        return self._csv_importer

    @property
    def csv_exporter(self) -> CsvExporter:
        """Get the CsvExporter instance."""
        if self._csv_exporter is None:
            self._csv_exporter = CsvExporter(drip_service=self.drip, etf_service=self.etfs)
        return self._csv_exporter

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
