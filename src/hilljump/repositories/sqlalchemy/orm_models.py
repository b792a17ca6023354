"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Boolean,
    Text,
    Numeric,
)

from hilljump.core.timezone import utc_now
from hilljump.repositories.sqlalchemy.database import Base


class EtfORM(Base):
    """SQLAlchemy model for Etf."""

    __tablename__ = "etfs"

    ticker = Column(String(20), primary_key=True)
    name = Column(String(255), nullable=True)
    country = Column(String(2), nullable=False, default="US")
    currency = Column(String(3), nullable=False, default="USD")
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)


class HistoricalPriceORM(Base):
    """SQLAlchemy model for a daily close (one row per ticker per trading day)."""

    __tablename__ = "historical_prices"

    ticker = Column(String(20), primary_key=True)
    date = Column(Date, primary_key=True)
    close_price = Column(Numeric(precision=18, scale=4), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)


class DividendORM(Base):
    """SQLAlchemy model for a dividend event (one row per ticker per ex-date)."""

    __tablename__ = "dividends"

    ticker = Column(String(20), primary_key=True)
    ex_date = Column(Date, primary_key=True)
    amount = Column(Numeric(precision=18, scale=6), nullable=False, default=Decimal("0"))
    currency = Column(String(3), nullable=False, default="USD")
    pay_date = Column(Date, nullable=True)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)


class DripCacheORM(Base):
    """SQLAlchemy model for cached DRIP windows (JSON payload)."""

    __tablename__ = "drip_cache"

    ticker = Column(String(20), primary_key=True)
    calculation_date = Column(Date, primary_key=True)
    investor_country = Column(String(2), primary_key=True)
    data = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)
