"""Pydantic projections of the User entity."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRequest(_CamelModel):
    """Input for create/update. Structural checks happen here, not in the service."""

    username: str = Field(..., max_length=100, description="Unique username")
    email: EmailStr = Field(..., description="Unique email address")
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("username", "email", mode="before")
    @classmethod
    def _not_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be blank")
        return value


class UserResponse(_CamelModel):
    """Read-only view of a user; the version counter stays internal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, entity) -> "UserResponse":
        return cls.model_validate(entity)


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[dict[str, str]] = None
