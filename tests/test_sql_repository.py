"""
Smoke tests for the SQL user repository against a temporary SQLite database.
"""
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from home_service.db.models import User
from home_service.db.session import get_session
from home_service.domain.errors import ConcurrentModificationError, DuplicateResourceError
from home_service.repositories.sql_repository import SQLUserRepository, sql_unit_of_work
from home_service.schemas.users import UserRequest
from home_service.services.user_service import UserService


def _add(username: str, email: str, **extra) -> int:
    with sql_unit_of_work() as repo:
        user = repo.save(User(username=username, email=email, **extra))
        return user.id


def test_save_assigns_id_timestamps_and_version(temp_db):
    user_id = _add("alice", "alice@example.com", first_name="Alice")

    with sql_unit_of_work(read_only=True) as repo:
        user = repo.find_by_id(user_id)
        assert user is not None
        assert user.version == 0
        assert user.created_at is not None
        assert user.updated_at >= user.created_at
        assert repo.exists_by_id(user_id)
        assert repo.exists_by_username("alice")
        assert repo.exists_by_email("alice@example.com")
        assert not repo.exists_by_email("bob@example.com")
        assert repo.find_by_username("alice").id == user_id


def test_find_all_orders_by_id(temp_db):
    _add("user1", "user1@example.com")
    _add("user2", "user2@example.com")

    with sql_unit_of_work(read_only=True) as repo:
        assert [u.username for u in repo.find_all()] == ["user1", "user2"]


def test_update_bumps_version(temp_db):
    user_id = _add("alice", "alice@example.com")

    with sql_unit_of_work() as repo:
        user = repo.find_by_id(user_id)
        user.last_name = "Liddell"
        repo.save(user)

    with sql_unit_of_work(read_only=True) as repo:
        user = repo.find_by_id(user_id)
        assert user.last_name == "Liddell"
        assert user.version == 1


def test_unique_violation_is_reported_as_duplicate(temp_db):
    _add("alice", "alice@example.com")

    with pytest.raises(DuplicateResourceError, match="Username already exists: alice") as exc_info:
        _add("alice", "other@example.com")
    assert exc_info.value.field == "username"

    with pytest.raises(DuplicateResourceError, match="Email already exists"):
        _add("bob", "alice@example.com")

    with sql_unit_of_work(read_only=True) as repo:
        assert len(repo.find_all()) == 1


def test_other_integrity_errors_propagate(temp_db):
    with pytest.raises(IntegrityError):
        _add(None, "nobody@example.com")  # type: ignore[arg-type]


def test_stale_version_is_rejected(temp_db):
    user_id = _add("alice", "alice@example.com")

    with get_session() as stale_session:
        stale = SQLUserRepository(stale_session).find_by_id(user_id)

        with sql_unit_of_work() as repo:
            fresh = repo.find_by_id(user_id)
            fresh.first_name = "Fresh"
            repo.save(fresh)

        stale.first_name = "Stale"
        with pytest.raises(ConcurrentModificationError):
            SQLUserRepository(stale_session).save(stale)
        stale_session.rollback()

    with sql_unit_of_work(read_only=True) as repo:
        assert repo.find_by_id(user_id).first_name == "Fresh"


def test_delete_by_id(temp_db):
    user_id = _add("alice", "alice@example.com")

    with sql_unit_of_work() as repo:
        repo.delete_by_id(user_id)

    with sql_unit_of_work(read_only=True) as repo:
        assert repo.find_by_id(user_id) is None
        assert not repo.exists_by_id(user_id)


def test_failed_operation_rolls_back(temp_db):
    with pytest.raises(RuntimeError):
        with sql_unit_of_work() as repo:
            repo.save(User(username="ghost", email="ghost@example.com"))
            raise RuntimeError("boom")

    with sql_unit_of_work(read_only=True) as repo:
        assert not repo.exists_by_username("ghost")


def test_service_over_sql_store(temp_db):
    svc = UserService()
    created = svc.create_user(UserRequest(username="johndoe", email="john@example.com", first_name="John", last_name="Doe"))

    updated = svc.update_user(
        created.id,
        UserRequest(username="johndoe", email="john@example.com", first_name="John", last_name="Smith"),
    )

    assert updated.last_name == "Smith"
    assert updated.created_at == created.created_at
    assert [u.username for u in svc.list_users()] == ["johndoe"]


def test_update_racing_on_username_is_reported_as_duplicate(temp_db, monkeypatch):
    svc = UserService()
    svc.create_user(UserRequest(username="johndoe", email="john@example.com"))
    jane = svc.create_user(UserRequest(username="janedoe", email="jane@example.com"))
    # another writer took the name after the pre-check ran
    monkeypatch.setattr(SQLUserRepository, "exists_by_username", lambda self, username: False)

    with pytest.raises(DuplicateResourceError, match="Username already exists: johndoe"):
        svc.update_user(jane.id, UserRequest(username="johndoe", email="jane@example.com"))

    with sql_unit_of_work(read_only=True) as repo:
        assert repo.find_by_id(jane.id).username == "janedoe"


def test_update_racing_on_email_is_reported_as_duplicate(temp_db, monkeypatch):
    svc = UserService()
    svc.create_user(UserRequest(username="johndoe", email="john@example.com"))
    jane = svc.create_user(UserRequest(username="janedoe", email="jane@example.com"))
    monkeypatch.setattr(SQLUserRepository, "exists_by_email", lambda self, email: False)

    with pytest.raises(DuplicateResourceError, match="Email already exists: john@example.com") as exc_info:
        svc.update_user(jane.id, UserRequest(username="janedoe", email="john@example.com"))
    assert exc_info.value.field == "email"


def test_stale_update_through_service_raises_conflict(overtaken_unit_of_work):
    user_id = _add("alice", "alice@example.com", last_name="Liddell")
    svc = UserService(unit_of_work=overtaken_unit_of_work)

    with pytest.raises(ConcurrentModificationError, match=f"User with id {user_id} was modified concurrently"):
        svc.update_user(user_id, UserRequest(username="alice", email="alice@example.com", last_name="Smith"))

    with sql_unit_of_work(read_only=True) as repo:
        user = repo.find_by_id(user_id)
        assert user.first_name == "Concurrent"
        assert user.last_name == "Liddell"
        assert user.version == 1


def test_reset_schema_clears_rows(temp_db):
    from home_service.db import create_tables

    _add("alice", "alice@example.com")

    create_tables.reset_schema()

    with sql_unit_of_work(read_only=True) as repo:
        assert repo.find_all() == []
