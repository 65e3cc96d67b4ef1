"""Response envelope schemas.

Every response body is wrapped as ``{success, data | message | error}``.
"""

from typing import Literal

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from users_api.schemas.user import UserResponse


class UserEnvelope(BaseModel):
    """Single-user success envelope."""

    success: Literal[True] = True
    data: UserResponse


class UserListEnvelope(BaseModel):
    """User list success envelope."""

    success: Literal[True] = True
    data: list[UserResponse]


class MessageEnvelope(BaseModel):
    """Success envelope carrying only a message."""

    success: Literal[True] = True
    message: str


class ErrorEnvelope(BaseModel):
    """Failure envelope."""

    success: Literal[False] = False
    error: str


def error_response(status_code: int, error: str) -> JSONResponse:
    """Build a JSON failure response with the standard envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(error=error).model_dump(),
    )
