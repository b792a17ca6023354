"""
Pytest configuration and fixtures for HillJump tests.

This module provides:
- In-memory SQLite database fixtures
- Builders for price and dividend history
- Deterministic and failing market data providers
- Service and repository fixtures
- A FastAPI test client bound to the test database
"""

import os
import tempfile
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, event, StaticPool
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from hilljump.main import app
from hilljump.api.deps import get_market_provider
from hilljump.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from hilljump.repositories.sqlalchemy import orm_models  # noqa: F401
from hilljump.repositories.sqlalchemy import (
    SqlAlchemyEtfRepository,
    SqlAlchemyPriceRepository,
    SqlAlchemyDividendRepository,
    SqlAlchemyDripCacheRepository,
)
from hilljump.core.exceptions import ProviderError
from hilljump.providers.stub_provider import StubMarketDataProvider
from hilljump.services import DripService, EtfService, MarketDataService
from hilljump.csv import CsvImporter, CsvExporter
from hilljump.domain.models import DividendEvent, Etf, PricePoint
from hilljump.config.settings import Settings, set_settings, reset_settings


# Friday; every window in these tests ends here unless stated otherwise
AS_OF = date(2025, 8, 29)


# =============================================================================
# HISTORY BUILDERS
# =============================================================================


def weekday_prices(
    start: date,
    end: date,
    price: Decimal = Decimal("100"),
    step: Decimal = Decimal("0"),
    ticker: Optional[str] = None,
) -> list[PricePoint]:
    """Weekday closes from start to end, moving by `step` each trading day."""
    result = []
    current = start
    close = price
    while current <= end:
        if current.weekday() < 5:
            result.append(PricePoint(date=current, close_price=close, ticker=ticker))
            close += step
        current += timedelta(days=1)
    return result


def monthly_dividends(
    start: date,
    end: date,
    amount: Decimal = Decimal("0.50"),
    ticker: Optional[str] = None,
) -> list[DividendEvent]:
    """One dividend going ex on the 10th of each month (rolled to Monday)."""
    result = []
    month = date(start.year, start.month, 1)
    while month <= end:
        ex_date = month.replace(day=10)
        while ex_date.weekday() >= 5:
            ex_date += timedelta(days=1)
        if start <= ex_date <= end:
            result.append(DividendEvent(ex_date=ex_date, amount_per_share=amount, ticker=ticker))
        month = date(month.year + month.month // 12, month.month % 12 + 1, 1)
    return result


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(str(actual)) - Decimal(str(expected)))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def etf_repo(test_session) -> SqlAlchemyEtfRepository:
    return SqlAlchemyEtfRepository(test_session)


@pytest.fixture
def price_repo(test_session) -> SqlAlchemyPriceRepository:
    return SqlAlchemyPriceRepository(test_session)


@pytest.fixture
def dividend_repo(test_session) -> SqlAlchemyDividendRepository:
    return SqlAlchemyDividendRepository(test_session)


@pytest.fixture
def cache_repo(test_session) -> SqlAlchemyDripCacheRepository:
    return SqlAlchemyDripCacheRepository(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Every known ticker closes at a fixed price rising one cent per weekday
    and pays a fixed dividend on the 10th of each month.
    """

    name = "deterministic"

    FIXED_SERIES = {
        "JEPI": (Decimal("55.00"), Decimal("0.40")),
        "SCHD": (Decimal("27.00"), Decimal("0.25")),
        "ZWC.TO": (Decimal("18.00"), Decimal("0.10")),
    }

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def get_price_history(self, ticker: str, start: date, end: date) -> list[PricePoint]:
        self.calls.append(("prices", ticker))
        if ticker not in self.FIXED_SERIES:
            return []
        base, _ = self.FIXED_SERIES[ticker]
        return weekday_prices(start, end, price=base, step=Decimal("0.01"), ticker=ticker)

    def get_dividends(self, ticker: str, start: date, end: date) -> list[DividendEvent]:
        self.calls.append(("dividends", ticker))
        if ticker not in self.FIXED_SERIES:
            return []
        _, amount = self.FIXED_SERIES[ticker]
        return monthly_dividends(start, end, amount=amount, ticker=ticker)


class FailingMarketProvider:
    """Market provider that always fails."""

    name = "failing"

    def get_price_history(self, ticker: str, start: date, end: date) -> list[PricePoint]:
        raise ProviderError(self.name, f"price history for {ticker} failed: network unavailable")

    def get_dividends(self, ticker: str, start: date, end: date) -> list[DividendEvent]:
        raise ProviderError(self.name, f"dividends for {ticker} failed: network unavailable")


class SleepRecorder:
    """Stands in for time.sleep and records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FixedClock:
    """Settable clock returning naive UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    return FailingMarketProvider()


@pytest.fixture
def stub_provider() -> StubMarketDataProvider:
    """Provide the stub provider with a fixed seed."""
    return StubMarketDataProvider(seed=42)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2025, 8, 29, 22, 0, 0))


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def etf_service(etf_repo) -> EtfService:
    return EtfService(etf_repo=etf_repo)


@pytest.fixture
def market_data_service(
    deterministic_provider,
    etf_repo,
    price_repo,
    dividend_repo,
    sleep_recorder,
) -> MarketDataService:
    """Provide MarketDataService backed by the deterministic provider."""
    return MarketDataService(
        provider=deterministic_provider,
        etf_repo=etf_repo,
        price_repo=price_repo,
        dividend_repo=dividend_repo,
        request_delay_seconds=0.5,
        sleep=sleep_recorder,
    )


@pytest.fixture
def drip_service(
    etf_repo,
    price_repo,
    dividend_repo,
    cache_repo,
    sleep_recorder,
    fixed_clock,
) -> DripService:
    """Provide DripService for a Canadian investor with recorded sleeps."""
    return DripService(
        etf_repo=etf_repo,
        price_repo=price_repo,
        dividend_repo=dividend_repo,
        cache_repo=cache_repo,
        investor_country="CA",
        foreign_withholding_rate=Decimal("0.15"),
        batch_size=2,
        batch_delay_seconds=1.0,
        cache_ttl_seconds=3600,
        sleep=sleep_recorder,
        clock=fixed_clock,
    )


@pytest.fixture
def csv_importer(price_repo, dividend_repo) -> CsvImporter:
    return CsvImporter(price_repo=price_repo, dividend_repo=dividend_repo)


@pytest.fixture
def csv_exporter(drip_service, etf_service) -> CsvExporter:
    return CsvExporter(drip_service=drip_service, etf_service=etf_service)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def seeded_etf(etf_repo, price_repo, dividend_repo) -> Callable[..., Etf]:
    """Factory registering an ETF with a year of weekday prices and monthly dividends."""

    def _seed(
        ticker: str = "JEPI",
        country: str = "US",
        price: Decimal = Decimal("50"),
        step: Decimal = Decimal("0.01"),
        dividend: Optional[Decimal] = Decimal("0.40"),
        active: bool = True,
        as_of: date = AS_OF,
    ) -> Etf:
        etf = etf_repo.upsert(Etf(ticker=ticker, name=f"{ticker} Fund", country=country, active=active))
        start = as_of - timedelta(days=400)
        price_repo.upsert_many(ticker, weekday_prices(start, as_of, price=price, step=step))
        if dividend is not None:
            dividend_repo.upsert_many(ticker, monthly_dividends(start, as_of, amount=dividend))
        return etf

    return _seed


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database."""
    set_settings(
        Settings(
            _env_file=None,
            data_dir=tmp_path,
            market_data_provider="stub",
            provider_request_delay_seconds=0,
            drip_batch_delay_seconds=0,
        )
    )
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_provider] = DeterministicMarketProvider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# TEMP FILE FIXTURES
# =============================================================================


@pytest.fixture
def temp_csv_file():
    """Provide a temporary CSV file path that is cleaned up after test."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".csv",
        delete=False,
        encoding="utf-8",
    ) as f:
        tmp_path = f.name

    yield tmp_path

    if os.path.exists(tmp_path):
        os.unlink(tmp_path)


def write_csv(path: str, content: str) -> str:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


# =============================================================================
# DATABASE FAILURE HELPERS
# =============================================================================


@contextmanager
def failing_inserts(orm_class, ticker: str):
    """Make every flush inserting a row of `orm_class` for `ticker` fail."""

    def _fail(mapper, connection, target):
        if target.ticker == ticker:
            raise OperationalError("INSERT", {}, Exception("database is locked"))

    event.listen(orm_class, "before_insert", _fail)
    try:
        yield
    finally:
        event.remove(orm_class, "before_insert", _fail)
