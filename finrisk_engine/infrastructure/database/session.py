"""Database engine and session factory"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finrisk_engine.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments for a database URL.

    SQLite (local development) gets a thread-shareable connection and no
    pool sizing; server databases get a pre-pinged, recycled pool.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_recycle": settings.db_pool_recycle_seconds,
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; the caller decides when to commit"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
