"""
Integration tests for SQLAlchemy repositories with SQLite.

Tests cover:
- ETF repository upsert and activation
- Price and dividend history upserts and range queries
- DRIP cache round-trip, latest lookup, clearing and purging
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from hilljump.domain.models import DividendEvent, DripCacheEntry, Etf, PricePoint
from hilljump.domain.views import DripResult, ReinvestmentStep
from hilljump.repositories.sqlalchemy.orm_models import HistoricalPriceORM
from hilljump.repositories.sqlalchemy import (
    SqlAlchemyDividendRepository,
    SqlAlchemyDripCacheRepository,
    SqlAlchemyEtfRepository,
    SqlAlchemyPriceRepository,
)

from tests.conftest import failing_inserts


def _sample_result() -> DripResult:
    return DripResult(
        window_days=28,
        start_date=date(2025, 6, 2),
        end_date=date(2025, 6, 30),
        start_price_date=date(2025, 6, 2),
        end_price_date=date(2025, 6, 30),
        start_price=Decimal("100"),
        end_price=Decimal("110"),
        start_shares=Decimal("1"),
        end_shares=Decimal("1.019801980198019801980198020"),
        total_dividends=Decimal("2"),
        growth_percent=Decimal("12.17821782178217821782178220"),
        skipped_dividends=1,
        steps=[
            ReinvestmentStep(
                ex_date=date(2025, 6, 10),
                reinvest_date=date(2025, 6, 10),
                dividend_per_share=Decimal("2"),
                reinvest_price=Decimal("101"),
                cash_received=Decimal("2"),
                shares_added=Decimal("0.01980198019801980198019801980"),
                shares_after=Decimal("1.019801980198019801980198020"),
            )
        ],
    )


# =============================================================================
# ETF REPOSITORY TESTS
# =============================================================================


class TestEtfRepository:
    """Tests for SqlAlchemyEtfRepository."""

    def test_upsert_persists(self, etf_repo: SqlAlchemyEtfRepository):
        """
        GIVEN an in-memory SQLite database
        WHEN I upsert an ETF
        THEN it can be retrieved by ticker with a creation time
        """
        etf_repo.upsert(Etf(ticker="JEPI", name="JPMorgan", country="US"))

        etf = etf_repo.get("jepi")

        assert etf is not None
        assert etf.name == "JPMorgan"
        assert etf.created_at is not None

    def test_upsert_keeps_creation_time(self, etf_repo: SqlAlchemyEtfRepository):
        created = etf_repo.upsert(Etf(ticker="JEPI", name="Old"))
        updated = etf_repo.upsert(Etf(ticker="JEPI", name="New", active=False))

        assert updated.name == "New"
        assert updated.active is False
        assert updated.created_at == created.created_at

    def test_list_and_set_active(self, etf_repo: SqlAlchemyEtfRepository):
        etf_repo.upsert(Etf(ticker="SCHD"))
        etf_repo.upsert(Etf(ticker="JEPI"))

        etf_repo.set_active("SCHD", False)

        assert [e.ticker for e in etf_repo.list_all()] == ["JEPI", "SCHD"]
        assert [e.ticker for e in etf_repo.list_active()] == ["JEPI"]
        assert etf_repo.set_active("NOPE", True) is None
        assert etf_repo.get("NOPE") is None


# =============================================================================
# HISTORY REPOSITORY TESTS
# =============================================================================


class TestPriceRepository:
    """Tests for SqlAlchemyPriceRepository."""

    def test_upsert_replaces_existing_close(self, price_repo: SqlAlchemyPriceRepository):
        price_repo.upsert_many("JEPI", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("57.00"))])
        price_repo.upsert_many("JEPI", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("57.25"))])

        prices = price_repo.list_range("JEPI")

        assert len(prices) == 1
        assert prices[0].close_price == Decimal("57.25")
        assert prices[0].ticker == "JEPI"

    def test_list_range_inclusive_and_sorted(self, price_repo: SqlAlchemyPriceRepository):
        """
        GIVEN closes inserted out of order
        WHEN I list a date range
        THEN both bounds are inclusive and results ascend by date
        """
        price_repo.upsert_many("JEPI", [
            PricePoint(date=date(2025, 8, 29), close_price=Decimal("57.5")),
            PricePoint(date=date(2025, 8, 25), close_price=Decimal("56.9")),
            PricePoint(date=date(2025, 8, 27), close_price=Decimal("57.1")),
            PricePoint(date=date(2025, 8, 22), close_price=Decimal("56.5")),
        ])

        prices = price_repo.list_range("JEPI", date(2025, 8, 25), date(2025, 8, 29))

        assert [p.date for p in prices] == [date(2025, 8, 25), date(2025, 8, 27), date(2025, 8, 29)]
        assert price_repo.latest_date("JEPI") == date(2025, 8, 29)
        assert price_repo.latest_date("SCHD") is None

    def test_tickers_are_isolated(self, price_repo: SqlAlchemyPriceRepository):
        price_repo.upsert_many("jepi", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("57"))])
        price_repo.upsert_many("SCHD", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("27"))])

        assert len(price_repo.list_range("JEPI")) == 1
        assert price_repo.list_range("SCHD")[0].close_price == Decimal("27")

    def test_failed_flush_leaves_session_usable(self, price_repo: SqlAlchemyPriceRepository):
        """
        GIVEN a price upsert whose flush fails
        WHEN I upsert another ticker on the same session
        THEN the failed rows are rolled back and the second write succeeds
        """
        with failing_inserts(HistoricalPriceORM, "JEPI"):
            with pytest.raises(OperationalError):
                price_repo.upsert_many("JEPI", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("57"))])

        price_repo.upsert_many("SCHD", [PricePoint(date=date(2025, 8, 28), close_price=Decimal("27"))])

        assert price_repo.list_range("JEPI") == []
        assert len(price_repo.list_range("SCHD")) == 1


class TestDividendRepository:
    """Tests for SqlAlchemyDividendRepository."""

    def test_upsert_and_range(self, dividend_repo: SqlAlchemyDividendRepository):
        written = dividend_repo.upsert_many("ZWC.TO", [
            DividendEvent(ex_date=date(2025, 7, 29), amount_per_share=Decimal("0.10"), currency="CAD",
                          pay_date=date(2025, 8, 7)),
            DividendEvent(ex_date=date(2025, 6, 27), amount_per_share=Decimal("0.10"), currency="CAD"),
        ])

        events = dividend_repo.list_range("ZWC.TO", start=date(2025, 7, 1))

        assert written == 2
        assert len(events) == 1
        assert events[0].pay_date == date(2025, 8, 7)
        assert events[0].currency == "CAD"
        assert events[0].amount_per_share == Decimal("0.10")

    def test_duplicate_ex_dates_in_one_batch(self, dividend_repo: SqlAlchemyDividendRepository):
        written = dividend_repo.upsert_many("JEPI", [
            DividendEvent(ex_date=date(2025, 8, 1), amount_per_share=Decimal("0.38")),
            DividendEvent(ex_date=date(2025, 8, 1), amount_per_share=Decimal("0.40")),
        ])

        assert written == 1
        assert dividend_repo.list_range("JEPI")[0].amount_per_share == Decimal("0.40")


# =============================================================================
# CACHE REPOSITORY TESTS
# =============================================================================


class TestDripCacheRepository:
    """Tests for SqlAlchemyDripCacheRepository."""

    def test_round_trip_preserves_decimals(self, cache_repo: SqlAlchemyDripCacheRepository):
        """
        GIVEN a cache entry with full-precision Decimals and a None window
        WHEN I store and reload it
        THEN the windows are identical
        """
        windows = {"4w": _sample_result(), "52w": None}
        cache_repo.upsert(DripCacheEntry(
            ticker="JEPI",
            calculation_date=date(2025, 6, 30),
            investor_country="CA",
            windows=windows,
        ))

        entry = cache_repo.get_latest(["JEPI"], "ca")["JEPI"]

        assert entry.windows == windows
        assert entry.created_at is not None

    def test_upsert_same_key_replaces(self, cache_repo: SqlAlchemyDripCacheRepository):
        key = dict(ticker="JEPI", calculation_date=date(2025, 6, 30), investor_country="CA")
        cache_repo.upsert(DripCacheEntry(windows={"4w": None}, **key))
        cache_repo.upsert(DripCacheEntry(windows={"4w": _sample_result()}, **key))

        entry = cache_repo.get_latest(["JEPI"], "CA")["JEPI"]

        assert entry.windows["4w"] is not None
        assert cache_repo.clear() == 1

    def test_latest_per_ticker(self, cache_repo: SqlAlchemyDripCacheRepository):
        for day in (date(2025, 6, 27), date(2025, 6, 30)):
            cache_repo.upsert(DripCacheEntry(
                ticker="JEPI",
                calculation_date=day,
                investor_country="CA",
                windows={"4w": None},
                created_at=datetime(2025, 7, 1, 12, 0),
            ))

        latest = cache_repo.get_latest(["JEPI", "SCHD"], "CA")

        assert list(latest) == ["JEPI"]
        assert latest["JEPI"].calculation_date == date(2025, 6, 30)
        assert cache_repo.get_latest([], "CA") == {}

    def test_clear_by_country_and_purge(self, cache_repo: SqlAlchemyDripCacheRepository):
        """
        GIVEN entries for two countries and two dates
        WHEN I clear one country and purge old dates
        THEN only the matching rows are deleted
        """
        for country in ("CA", "US"):
            for day in (date(2025, 6, 27), date(2025, 6, 30)):
                cache_repo.upsert(DripCacheEntry(
                    ticker="JEPI",
                    calculation_date=day,
                    investor_country=country,
                    windows={},
                ))

        assert cache_repo.clear("us") == 2
        assert cache_repo.purge_before(date(2025, 6, 30)) == 1
        remaining = cache_repo.get_latest(["JEPI"], "CA")["JEPI"]
        assert remaining.calculation_date == date(2025, 6, 30)
