"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from home_service.db.models import User
from home_service.db.session import get_session
from home_service.domain.errors import (
    ConcurrentModificationError,
    DuplicateResourceError,
    email_taken,
    username_taken,
)

logger = logging.getLogger("home_service.repositories.sql")

_UNIQUE_MARKERS = ("unique", "duplicate")
# sqlite: "users.username"; postgres: "key (username)", "users_username_key", "ix_users_username"
_UNIQUE_COLUMN = re.compile(r"(?:users\.|key \(|users_|ix_users_)(username|email)\b")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _translate_integrity_error(exc: IntegrityError, username: str, email: str) -> Optional[DuplicateResourceError]:
    """Map a unique-constraint violation to the same error the pre-checks raise."""
    detail = str(getattr(exc, "orig", exc)).lower()
    if not any(marker in detail for marker in _UNIQUE_MARKERS):
        return None
    match = _UNIQUE_COLUMN.search(detail)
    if match is None:
        return None
    if match.group(1) == "username":
        return username_taken(username)
    return email_taken(email)


class SQLUserRepository:
    """CRUD helpers wrapping a SQLAlchemy session owned by the caller."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(self) -> list[User]:
        stmt = select(User).order_by(User.id)
        return list(self.session.execute(stmt).scalars().all())

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        return self.session.execute(stmt).scalar_one_or_none()

    def exists_by_username(self, username: str) -> bool:
        return bool(self.session.execute(select(exists().where(User.username == username))).scalar())

    def exists_by_email(self, email: str) -> bool:
        return bool(self.session.execute(select(exists().where(User.email == email))).scalar())

    def exists_by_id(self, user_id: int) -> bool:
        return bool(self.session.execute(select(exists().where(User.id == user_id))).scalar())

    def save(self, user: User) -> User:
        now = _now()
        if user.id is None:
            user.created_at = now
            self.session.add(user)
        user.updated_at = now
        # a failed flush expires the instance, so keep what the errors need
        user_id, username, email = user.id, user.username, user.email
        try:
            self.session.flush()
        except IntegrityError as exc:
            duplicate = _translate_integrity_error(exc, username, email)
            if duplicate is None:
                raise
            logger.warning("Unique constraint rejected write: %s", duplicate.message)
            raise duplicate from exc
        except StaleDataError as exc:
            raise ConcurrentModificationError(
                f"User with id {user_id} was modified concurrently"
            ) from exc
        self.session.refresh(user)
        return user

    def delete_by_id(self, user_id: int) -> None:
        self.session.execute(delete(User).where(User.id == user_id))
        self.session.flush()


@contextmanager
def sql_unit_of_work(read_only: bool = False) -> Iterator[SQLUserRepository]:
    """One session and one transaction per service operation."""
    with get_session() as session:
        try:
            yield SQLUserRepository(session)
            if read_only:
                session.rollback()
            else:
                session.commit()
        except Exception:
            session.rollback()
            raise
