"""SQL persistence: declarative Base, cached engine and the session context manager."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]
