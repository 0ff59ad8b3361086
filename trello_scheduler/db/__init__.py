from trello_scheduler.db.base import Base
from trello_scheduler.db.session import SessionLocal, get_engine, get_session_factory
from trello_scheduler.db.tables import ALL_TABLE_NAMES, STORE_TABLE_NAMES

__all__ = ["Base", "SessionLocal", "get_engine", "get_session_factory", "ALL_TABLE_NAMES", "STORE_TABLE_NAMES"]
