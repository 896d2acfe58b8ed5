from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status

from home_service.schemas.users import ErrorResponse, UserRequest, UserResponse
from home_service.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["User Management"])
logger = logging.getLogger("home_service.routers.users")

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}
_INVALID = {400: {"model": ErrorResponse, "description": "Invalid input"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Duplicate username or email"}}


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


@router.get("", response_model=list[UserResponse], summary="Get all users")
def list_users(request: Request):
    logger.debug("GET /users - Get all users")
    return _get_user_service(request).list_users()


@router.get("/{user_id}", response_model=UserResponse, responses=_NOT_FOUND, summary="Get user by ID")
def get_user(user_id: int, request: Request):
    logger.debug("GET /users/%s - Get user by ID", user_id)
    return _get_user_service(request).get_user(user_id)


@router.get(
    "/username/{username}",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="Get user by username",
)
def get_user_by_username(username: str, request: Request):
    logger.debug("GET /users/username/%s - Get user by username", username)
    return _get_user_service(request).get_user_by_username(username)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_INVALID, **_CONFLICT},
    summary="Create a new user",
)
def create_user(payload: UserRequest, request: Request):
    logger.debug("POST /users - Create new user with username: %s", payload.username)
    return _get_user_service(request).create_user(payload)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_INVALID, **_NOT_FOUND, **_CONFLICT},
    summary="Update a user",
)
def update_user(user_id: int, payload: UserRequest, request: Request):
    logger.debug("PUT /users/%s - Update user", user_id)
    return _get_user_service(request).update_user(user_id, payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_NOT_FOUND,
    summary="Delete a user",
)
def delete_user(user_id: int, request: Request):
    logger.debug("DELETE /users/%s - Delete user", user_id)
    _get_user_service(request).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
