"""SQLAlchemy implementation of EtfRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from hilljump.domain.models import Etf
from hilljump.repositories.sqlalchemy.database import commit_or_rollback
from hilljump.repositories.sqlalchemy.orm_models import EtfORM


class SqlAlchemyEtfRepository:
    """SQLAlchemy-backed ETF metadata repository."""

    def __init__(self, db: Session):
        self._db = db

    def upsert(self, etf: Etf) -> Etf:
        """Insert or update an ETF by ticker."""
        orm_etf = self._db.get(EtfORM, etf.ticker)
        if orm_etf:
            orm_etf.name = etf.name
            orm_etf.country = etf.country
            orm_etf.currency = etf.currency
            orm_etf.active = etf.active
        else:
            orm_etf = EtfORM(
                ticker=etf.ticker,
                name=etf.name,
                country=etf.country,
                currency=etf.currency,
                active=etf.active,
            )
            if etf.created_at:
                orm_etf.created_at = etf.created_at
            self._db.add(orm_etf)

        commit_or_rollback(self._db)
        self._db.refresh(orm_etf)
        return self._to_domain(orm_etf)

    def get(self, ticker: str) -> Optional[Etf]:
        """Retrieve an ETF by ticker."""
        orm_etf = self._db.get(EtfORM, ticker.upper())
        return self._to_domain(orm_etf) if orm_etf else None

    def list_all(self) -> list[Etf]:
        """List all ETFs ordered by ticker."""
        rows = self._db.query(EtfORM).order_by(EtfORM.ticker).all()
        return [self._to_domain(r) for r in rows]

    def list_active(self) -> list[Etf]:
        """List active ETFs ordered by ticker."""
        rows = (
            self._db.query(EtfORM)
            .filter(EtfORM.active.is_(True))
            .order_by(EtfORM.ticker)
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def set_active(self, ticker: str, active: bool) -> Optional[Etf]:
        """Toggle the active flag; returns None for an unknown ticker."""
        orm_etf = self._db.get(EtfORM, ticker.upper())
        if orm_etf is None:
            return None
        orm_etf.active = active
        commit_or_rollback(self._db)
        self._db.refresh(orm_etf)
        return self._to_domain(orm_etf)

    @staticmethod
    def _to_domain(orm: EtfORM) -> Etf:
        """Convert ORM model to domain model."""
        return Etf(
            ticker=orm.ticker,
            name=orm.name,
            country=orm.country,
            currency=orm.currency,
            active=bool(orm.active),
            created_at=orm.created_at,
        )
