"""Database package."""
from globalpoll.db.session import engine, SessionLocal, get_db, get_db_context
from globalpoll.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
