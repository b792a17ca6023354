"""SQLAlchemy implementations of price and dividend history repositories."""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from hilljump.domain.models import DividendEvent, PricePoint
from hilljump.repositories.sqlalchemy.database import commit_or_rollback
from hilljump.repositories.sqlalchemy.orm_models import DividendORM, HistoricalPriceORM


class SqlAlchemyPriceRepository:
    """SQLAlchemy-backed daily close repository."""

    def __init__(self, db: Session):
        self._db = db

    def upsert_many(self, ticker: str, prices: list[PricePoint]) -> int:
        """Insert or replace prices keyed by (ticker, date)."""
        ticker = ticker.upper()
        written = 0
        # Last row wins for duplicate dates within one batch
        by_date = {point.date: point for point in prices}
        for point in by_date.values():
            orm_price = self._db.get(HistoricalPriceORM, (ticker, point.date))
            if orm_price:
                orm_price.close_price = point.close_price
            else:
                self._db.add(
                    HistoricalPriceORM(
                        ticker=ticker,
                        date=point.date,
                        close_price=point.close_price,
                    )
                )
            written += 1
        commit_or_rollback(self._db)
        return written

    def list_range(
        self,
        ticker: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[PricePoint]:
        """List prices for a ticker within [start, end], ascending by date."""
        query = self._db.query(HistoricalPriceORM).filter(
            HistoricalPriceORM.ticker == ticker.upper()
        )
        if start is not None:
            query = query.filter(HistoricalPriceORM.date >= start)
        if end is not None:
            query = query.filter(HistoricalPriceORM.date <= end)
        rows = query.order_by(HistoricalPriceORM.date).all()
        return [self._to_domain(r) for r in rows]

    def latest_date(self, ticker: str) -> Optional[date]:
        """Most recent stored trading date for a ticker."""
        return (
            self._db.query(func.max(HistoricalPriceORM.date))
            .filter(HistoricalPriceORM.ticker == ticker.upper())
            .scalar()
        )

    @staticmethod
    def _to_domain(orm: HistoricalPriceORM) -> PricePoint:
        return PricePoint(
            date=orm.date,
            close_price=Decimal(str(orm.close_price)),
            ticker=orm.ticker,
        )


class SqlAlchemyDividendRepository:
    """SQLAlchemy-backed dividend history repository."""

    def __init__(self, db: Session):
        self._db = db

    def upsert_many(self, ticker: str, dividends: list[DividendEvent]) -> int:
        """Insert or replace dividends keyed by (ticker, ex_date)."""
        ticker = ticker.upper()
        written = 0
        by_date = {event.ex_date: event for event in dividends}
        for event in by_date.values():
            orm_div = self._db.get(DividendORM, (ticker, event.ex_date))
            if orm_div:
                orm_div.amount = event.amount_per_share
                orm_div.currency = event.currency
                orm_div.pay_date = event.pay_date
            else:
                self._db.add(
                    DividendORM(
                        ticker=ticker,
                        ex_date=event.ex_date,
                        amount=event.amount_per_share,
                        currency=event.currency,
                        pay_date=event.pay_date,
                    )
                )
            written += 1
        commit_or_rollback(self._db)
        return written

    def list_range(
        self,
        ticker: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[DividendEvent]:
        """List dividends for a ticker within [start, end], ascending by ex-date."""
        query = self._db.query(DividendORM).filter(DividendORM.ticker == ticker.upper())
        if start is not None:
            query = query.filter(DividendORM.ex_date >= start)
        if end is not None:
            query = query.filter(DividendORM.ex_date <= end)
        rows = query.order_by(DividendORM.ex_date).all()
        return [self._to_domain(r) for r in rows]

    @staticmethod
    def _to_domain(orm: DividendORM) -> DividendEvent:
        return DividendEvent(
            ex_date=orm.ex_date,
            amount_per_share=Decimal(str(orm.amount)),
            currency=orm.currency,
            pay_date=orm.pay_date,
            ticker=orm.ticker,
        )
