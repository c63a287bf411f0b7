"""
Database engine and session management.

DATABASE_URL selects the database; it defaults to a local SQLite file.
Routes get a per-request session through the get_db_session dependency.
"""

import logging
import os
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from creators_os.db_base import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./creators_os.db"

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_database_url() -> str:
    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def build_engine(database_url: Optional[str] = None) -> Engine:
    database_url = database_url or get_database_url()
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db(engine: Optional[Engine] = None) -> None:
    """Create tables that do not exist yet."""
    # Model modules must be imported so their tables are on Base.metadata
    import creators_os.models  # noqa: F401

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("database.initialized", extra={"dialect": engine.dialect.name})


def get_db_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is closed after the request."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()
