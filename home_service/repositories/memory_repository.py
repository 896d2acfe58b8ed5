"""
Dict-backed repository with the same capability set as the SQL one.

Mirrors the store-level guarantees (unique username/email, version check on
update) so the user service can be exercised without a database.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from home_service.db.models import User
from home_service.domain.errors import (
    ConcurrentModificationError,
    email_taken,
    username_taken,
)

_FIELDS = ("id", "username", "email", "first_name", "last_name", "created_at", "updated_at", "version")


def _copy_user(user: User) -> User:
    return User(**{name: getattr(user, name) for name in _FIELDS})


class InMemoryUserRepository:
    """Stores detached User rows keyed by id."""

    def __init__(self) -> None:
        self._rows: dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    # -------------------------- reads --------------------------
    def find_all(self) -> list[User]:
        return [_copy_user(row) for _, row in sorted(self._rows.items())]

    def find_by_id(self, user_id: int) -> Optional[User]:
        row = self._rows.get(user_id)
        return _copy_user(row) if row else None

    def find_by_username(self, username: str) -> Optional[User]:
        for row in self._rows.values():
            if row.username == username:
                return _copy_user(row)
        return None

    def exists_by_username(self, username: str) -> bool:
        return any(row.username == username for row in self._rows.values())

    def exists_by_email(self, email: str) -> bool:
        return any(row.email == email for row in self._rows.values())

    def exists_by_id(self, user_id: int) -> bool:
        return user_id in self._rows

    # -------------------------- writes --------------------------
    def save(self, user: User) -> User:
        for row in self._rows.values():
            if row.id == user.id:
                continue
            if row.username == user.username:
                raise username_taken(user.username)
            if row.email == user.email:
                raise email_taken(user.email)

        now = datetime.now(timezone.utc)
        if user.id is None:
            user.id = self._next_id
            self._next_id += 1
            user.created_at = now
            user.version = 0
        else:
            stored = self._rows.get(user.id)
            if stored is None or stored.version != user.version:
                raise ConcurrentModificationError(
                    f"User with id {user.id} was modified concurrently"
                )
            user.version = stored.version + 1
        user.updated_at = now
        self._rows[user.id] = _copy_user(user)
        return user

    def delete_by_id(self, user_id: int) -> None:
        self._rows.pop(user_id, None)

    @contextmanager
    def unit_of_work(self, read_only: bool = False) -> Iterator["InMemoryUserRepository"]:
        """Serialize operations and restore the previous state on failure."""
        with self._lock:
            snapshot = (copy.copy(self._rows), self._next_id)
            try:
                yield self
            except Exception:
                self._rows, self._next_id = snapshot
                raise
