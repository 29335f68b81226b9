"""Schema bootstrap: `python -m tagwallet.db.create_tables`."""
from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def check_connection() -> None:
    """Open one connection; raises SQLAlchemyError when the database is unreachable."""
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


if __name__ == "__main__":
    try:
        check_connection()
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
