"""User CRUD use cases: uniqueness and existence rules around the repository."""

from __future__ import annotations

import logging

from home_service.db.models import User
from home_service.domain.errors import email_taken, user_not_found, username_taken
from home_service.repositories.base import UnitOfWork
from home_service.repositories.sql_repository import sql_unit_of_work
from home_service.schemas.users import UserRequest, UserResponse

logger = logging.getLogger("home_service.services.users")


class UserService:
    """
    Holds the business rules for users.

    Every operation opens its own unit of work, so the checks and the write of
    a mutation commit or roll back together. Nothing is kept between calls.
    """

    def __init__(self, unit_of_work: UnitOfWork | None = None) -> None:
        self.unit_of_work = unit_of_work or sql_unit_of_work

    def list_users(self) -> list[UserResponse]:
        logger.debug("Fetching all users")
        with self.unit_of_work(read_only=True) as repo:
            return [UserResponse.from_entity(user) for user in repo.find_all()]

    def get_user(self, user_id: int) -> UserResponse:
        logger.debug("Fetching user by id: %s", user_id)
        with self.unit_of_work(read_only=True) as repo:
            user = repo.find_by_id(user_id)
            if user is None:
                raise user_not_found("id", user_id)
            return UserResponse.from_entity(user)

    def get_user_by_username(self, username: str) -> UserResponse:
        logger.debug("Fetching user by username: %s", username)
        with self.unit_of_work(read_only=True) as repo:
            user = repo.find_by_username(username)
            if user is None:
                raise user_not_found("username", username)
            return UserResponse.from_entity(user)

    def create_user(self, request: UserRequest) -> UserResponse:
        logger.debug("Creating new user with username: %s", request.username)
        with self.unit_of_work() as repo:
            if repo.exists_by_username(request.username):
                raise username_taken(request.username)
            if repo.exists_by_email(request.email):
                raise email_taken(request.email)

            user = User(
                username=request.username,
                email=request.email,
                first_name=request.first_name,
                last_name=request.last_name,
            )
            saved = repo.save(user)
            response = UserResponse.from_entity(saved)
        logger.info("User created successfully with id: %s", response.id)
        return response

    def update_user(self, user_id: int, request: UserRequest) -> UserResponse:
        logger.debug("Updating user with id: %s", user_id)
        with self.unit_of_work() as repo:
            user = repo.find_by_id(user_id)
            if user is None:
                raise user_not_found("id", user_id)

            # only re-check values that actually change
            if user.username != request.username and repo.exists_by_username(request.username):
                raise username_taken(request.username)
            if user.email != request.email and repo.exists_by_email(request.email):
                raise email_taken(request.email)

            user.username = request.username
            user.email = request.email
            user.first_name = request.first_name
            user.last_name = request.last_name
            updated = repo.save(user)
            response = UserResponse.from_entity(updated)
        logger.info("User updated successfully with id: %s", response.id)
        return response

    def delete_user(self, user_id: int) -> None:
        logger.debug("Deleting user with id: %s", user_id)
        with self.unit_of_work() as repo:
            if not repo.exists_by_id(user_id):
                raise user_not_found("id", user_id)
            repo.delete_by_id(user_id)
        logger.info("User deleted successfully with id: %s", user_id)
