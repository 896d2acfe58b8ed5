"""Repository protocol consumed by the user service."""
from __future__ import annotations

from typing import ContextManager, Optional, Protocol

from home_service.db.models import User


class UserRepository(Protocol):
    """Narrow data-access interface for User entities."""

    def find_all(self) -> list[User]: ...

    def find_by_id(self, user_id: int) -> Optional[User]: ...

    def find_by_username(self, username: str) -> Optional[User]: ...

    def exists_by_username(self, username: str) -> bool: ...

    def exists_by_email(self, email: str) -> bool: ...

    def exists_by_id(self, user_id: int) -> bool: ...

    def save(self, user: User) -> User: ...

    def delete_by_id(self, user_id: int) -> None: ...


class UnitOfWork(Protocol):
    """
    Opens a transactional scope around a repository.

    The context manager commits on clean exit (or rolls back when read_only)
    and rolls back when the block raises.
    """

    def __call__(self, read_only: bool = False) -> ContextManager[UserRepository]: ...
