"""SQLAlchemy implementation of DripCacheRepository."""

import json
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.orm import Session

from hilljump.domain.models import DripCacheEntry
from hilljump.domain.views import DripResult, ReinvestmentStep
from hilljump.repositories.sqlalchemy.database import commit_or_rollback
from hilljump.repositories.sqlalchemy.orm_models import DripCacheORM


class SqlAlchemyDripCacheRepository:
    """SQLAlchemy-backed cache of DRIP windows per ticker."""

    def __init__(self, db: Session):
        self._db = db

    def upsert(self, entry: DripCacheEntry) -> DripCacheEntry:
        """Insert or replace the entry for (ticker, calculation_date, investor_country)."""
        key = (entry.ticker.upper(), entry.calculation_date, entry.investor_country.upper())
        payload = json.dumps(
            {window: _result_to_json(result) for window, result in entry.windows.items()}
        )

        orm_entry = self._db.get(DripCacheORM, key)
        if orm_entry:
            orm_entry.data = payload
            if entry.created_at:
                orm_entry.created_at = entry.created_at
        else:
            orm_entry = DripCacheORM(
                ticker=key[0],
                calculation_date=key[1],
                investor_country=key[2],
                data=payload,
            )
            if entry.created_at:
                orm_entry.created_at = entry.created_at
            self._db.add(orm_entry)

        commit_or_rollback(self._db)
        self._db.refresh(orm_entry)
        return self._to_domain(orm_entry)

    def get_latest(
        self,
        tickers: list[str],
        investor_country: str,
    ) -> dict[str, DripCacheEntry]:
        """Most recent entry per ticker; tickers without one are omitted."""
        if not tickers:
            return {}
        rows = (
            self._db.query(DripCacheORM)
            .filter(
                DripCacheORM.ticker.in_([t.upper() for t in tickers]),
                DripCacheORM.investor_country == investor_country.upper(),
            )
            .order_by(DripCacheORM.calculation_date.desc(), DripCacheORM.created_at.desc())
            .all()
        )
        latest: dict[str, DripCacheEntry] = {}
        for row in rows:
            if row.ticker not in latest:
                latest[row.ticker] = self._to_domain(row)
        return latest

    def clear(self, investor_country: Optional[str] = None) -> int:
        """Delete cached entries (all countries when None)."""
        query = self._db.query(DripCacheORM)
        if investor_country is not None:
            query = query.filter(DripCacheORM.investor_country == investor_country.upper())
        deleted = query.delete(synchronize_session=False)
        commit_or_rollback(self._db)
        return deleted

    def purge_before(self, calculation_date: date) -> int:
        """Delete entries calculated before a date."""
        deleted = (
            self._db.query(DripCacheORM)
            .filter(DripCacheORM.calculation_date < calculation_date)
            .delete(synchronize_session=False)
        )
        commit_or_rollback(self._db)
        return deleted

    @staticmethod
    def _to_domain(orm: DripCacheORM) -> DripCacheEntry:
        """Convert ORM cache row to domain model."""
        raw = json.loads(orm.data)
        return DripCacheEntry(
            ticker=orm.ticker,
            calculation_date=orm.calculation_date,
            investor_country=orm.investor_country,
            windows={window: _result_from_json(value) for window, value in raw.items()},
            created_at=orm.created_at,
        )


# Decimals are stored as strings so cached figures round-trip exactly.

def _result_to_json(result: Optional[DripResult]) -> Optional[dict[str, Any]]:
    if result is None:
        return None
    return {
        "window_days": result.window_days,
        "start_date": result.start_date.isoformat(),
        "end_date": result.end_date.isoformat(),
        "start_price_date": result.start_price_date.isoformat(),
        "end_price_date": result.end_price_date.isoformat(),
        "start_price": str(result.start_price),
        "end_price": str(result.end_price),
        "start_shares": str(result.start_shares),
        "end_shares": str(result.end_shares),
        "total_dividends": str(result.total_dividends),
        "growth_percent": str(result.growth_percent),
        "skipped_dividends": result.skipped_dividends,
        "steps": [
            {
                "ex_date": step.ex_date.isoformat(),
                "reinvest_date": step.reinvest_date.isoformat(),
                "dividend_per_share": str(step.dividend_per_share),
                "reinvest_price": str(step.reinvest_price),
                "cash_received": str(step.cash_received),
                "shares_added": str(step.shares_added),
                "shares_after": str(step.shares_after),
            }
            for step in result.steps
        ],
    }


def _result_from_json(data: Optional[dict[str, Any]]) -> Optional[DripResult]:
    if data is None:
        return None
    return DripResult(
        window_days=int(data["window_days"]),
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        start_price_date=date.fromisoformat(data.get("start_price_date", data["start_date"])),
        end_price_date=date.fromisoformat(data.get("end_price_date", data["end_date"])),
        start_price=Decimal(data["start_price"]),
        end_price=Decimal(data["end_price"]),
        start_shares=Decimal(data["start_shares"]),
        end_shares=Decimal(data["end_shares"]),
        total_dividends=Decimal(data["total_dividends"]),
        growth_percent=Decimal(data["growth_percent"]),
        skipped_dividends=int(data.get("skipped_dividends", 0)),
        steps=[
            ReinvestmentStep(
                ex_date=date.fromisoformat(step["ex_date"]),
                reinvest_date=date.fromisoformat(step["reinvest_date"]),
                dividend_per_share=Decimal(step["dividend_per_share"]),
                reinvest_price=Decimal(step["reinvest_price"]),
                cash_received=Decimal(step["cash_received"]),
                shares_added=Decimal(step["shares_added"]),
                shares_after=Decimal(step["shares_after"]),
            )
            for step in data.get("steps", [])
        ],
    )
