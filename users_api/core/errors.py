"""Domain errors raised by the user service.

The service never answers with HTTP; each error carries the status code and
client-facing message that the route layer turns into an envelope.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import status


class UserServiceError(Exception):
    """Base class for expected user service failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserNotFoundError(UserServiceError):
    """No user matches the given id or email."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, identifier: str, field: str = "ID") -> None:
        super().__init__(f"User with {field} {identifier} not found")
        self.identifier = identifier
        self.field = field


class UserValidationError(UserServiceError):
    """Input is well-formed JSON but violates the user schema."""

    status_code = status.HTTP_400_BAD_REQUEST


class UserAlreadyExistsError(UserServiceError):
    """Another user already owns this email."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, email: str) -> None:
        super().__init__(f"User with email {email} already exists")
        self.email = email


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Flatten pydantic error dicts into one readable message.

    Example:
        ``[{"loc": ("name",), "msg": "Field required"}]`` becomes
        ``"name: Field required"``.
    """
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request data"
