"""Request/response models exposed over HTTP."""

from .users import ErrorResponse, UserRequest, UserResponse

__all__ = ["ErrorResponse", "UserRequest", "UserResponse"]
