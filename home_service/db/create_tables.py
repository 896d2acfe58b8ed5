"""Create or rebuild the users schema; also runnable as a script."""
from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers the users table on Base.metadata


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


def drop_all() -> None:
    Base.metadata.drop_all(bind=get_engine())


def reset_schema() -> None:
    """Drop and recreate every table (destroys data)."""
    drop_all()
    create_all()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the users schema")
    parser.add_argument("--drop-first", action="store_true", help="drop existing tables before creating")
    args = parser.parse_args()
    try:
        if args.drop_first:
            reset_schema()
        else:
            create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
