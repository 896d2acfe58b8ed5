"""
Persistence adapters.

Services depend on the UserRepository protocol and receive a repository from
a unit of work; SQL and in-memory stores both implement the same capability set.
"""

from .base import UnitOfWork, UserRepository

__all__ = ["UnitOfWork", "UserRepository"]
