"""SQLAlchemy repository implementations."""

from hilljump.repositories.sqlalchemy.database import (
    commit_or_rollback,
    get_db,
    init_db,
    init_db_with_path,
    reset_database,
    Base,
)
from hilljump.repositories.sqlalchemy.etf_repo import SqlAlchemyEtfRepository
from hilljump.repositories.sqlalchemy.history_repo import (
    SqlAlchemyPriceRepository,
    SqlAlchemyDividendRepository,
)
from hilljump.repositories.sqlalchemy.cache_repo import SqlAlchemyDripCacheRepository

__all__ = [
    "commit_or_rollback",
    "get_db",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "Base",
    "SqlAlchemyEtfRepository",
    "SqlAlchemyPriceRepository",
    "SqlAlchemyDividendRepository",
    "SqlAlchemyDripCacheRepository",
]
