"""Business-level failures raised by the user service and its repositories."""

from __future__ import annotations


class UserServiceError(Exception):
    """Base class for user workflow exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(UserServiceError):
    """Raised when the referenced user does not exist."""


class DuplicateResourceError(UserServiceError):
    """Raised when a username or email is already taken by another user."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConcurrentModificationError(UserServiceError):
    """Raised when a write is based on a stale version of the record."""


def user_not_found(key: str, value: object) -> ResourceNotFoundError:
    return ResourceNotFoundError(f"User not found with {key}: {value}")


def username_taken(username: str) -> DuplicateResourceError:
    return DuplicateResourceError(f"Username already exists: {username}", field="username")


def email_taken(email: str) -> DuplicateResourceError:
    return DuplicateResourceError(f"Email already exists: {email}", field="email")
