from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the home_service package importable for local runs without install
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from home_service.core import config as core_config  # noqa: E402
from home_service.db import create_tables, session as db_session  # noqa: E402
from home_service.repositories.memory_repository import InMemoryUserRepository  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("CREATE_SCHEMA_ON_STARTUP", "false")
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    core_config.get_settings.cache_clear()
    db_session.reset_engine()

    create_tables.reset_schema()

    yield db_file

    try:
        create_tables.drop_all()
    except Exception:
        pass
    db_session.reset_engine()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def memory_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def overtaken_unit_of_work(temp_db):
    """
    SQL unit of work where another transaction commits an update to a user
    right after it is loaded, so the later write carries a stale version.
    """
    from contextlib import contextmanager

    from home_service.db.session import get_session
    from home_service.repositories.sql_repository import SQLUserRepository, sql_unit_of_work

    class _OvertakenRepository(SQLUserRepository):
        def find_by_id(self, user_id):
            user = super().find_by_id(user_id)
            if user is not None:
                with sql_unit_of_work() as other:
                    concurrent = other.find_by_id(user_id)
                    concurrent.first_name = "Concurrent"
                    other.save(concurrent)
            return user

    @contextmanager
    def unit_of_work(read_only: bool = False):
        with get_session() as session:
            try:
                yield _OvertakenRepository(session)
                session.commit()
            except Exception:
                session.rollback()
                raise

    return unit_of_work
