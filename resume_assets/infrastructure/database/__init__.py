"""Database infrastructure helpers (engine, sessions, models)."""

from .base import Base
from .session import AsyncSessionFactory, dispose_engine, get_engine, get_session, init_db

__all__ = ["Base", "AsyncSessionFactory", "dispose_engine", "get_engine", "get_session", "init_db"]
