"""Pydantic schemas package."""

from users_api.schemas.response import (
    ErrorEnvelope,
    MessageEnvelope,
    UserEnvelope,
    UserListEnvelope,
)
from users_api.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserEnvelope",
    "UserListEnvelope",
    "MessageEnvelope",
    "ErrorEnvelope",
]
