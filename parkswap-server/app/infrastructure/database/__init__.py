"""Database infrastructure: declarative base, engine and sessions."""

from .base import Base
from .session import dispose_engine, get_engine, get_session, init_db, session_scope

__all__ = ["Base", "dispose_engine", "get_engine", "get_session", "init_db", "session_scope"]
