"""Engine, session and transaction helpers for the history database."""

from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from hilljump.config.settings import get_settings

Base = declarative_base()

# Reconfigured by init_db_with_path / reset_database
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _build_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


def _bind(engine: Engine) -> None:
    global _engine, _SessionLocal
    _engine = engine
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_engine() -> Engine:
    """Engine for the configured database URL, created on first use."""
    if _engine is None:
        _bind(_build_engine(get_settings().get_database_url()))
    return _engine


def get_session_factory() -> sessionmaker:
    if _SessionLocal is None:
        get_engine()
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_session() -> Session:
    """Long-lived session for in-process jobs; the caller closes it."""
    return get_session_factory()()


def commit_or_rollback(db: Session) -> None:
    """
    Commit the session's pending work.

    A failed flush leaves the session unusable until it is rolled back, and
    batch jobs share one session across tickers, so the rollback happens
    here before the error propagates.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db() -> None:
    """Create tables on the configured database."""
    from hilljump.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def init_db_with_path(db_path: Path) -> None:
    """Point the module at a SQLite file and create its tables."""
    from hilljump.repositories.sqlalchemy import orm_models  # noqa: F401

    _bind(_build_engine(f"sqlite:///{db_path}"))
    Base.metadata.create_all(bind=_engine)


def reset_database() -> None:
    """Dispose the engine so the next use reads settings again."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
