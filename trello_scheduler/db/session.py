"""
Database session and engine.

The engine is created on first use so importing the app (or running tests against the
in-memory store) does not need a reachable database or its driver.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from trello_scheduler.config import settings

_engine: Engine | None = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 8,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": 30,
    }


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
        SessionLocal.configure(bind=_engine)
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return SessionLocal
