"""User schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

from users_api.models.user import User

NAME_MAX_LENGTH = 255
BIO_MAX_LENGTH = 1000


class UserCreate(BaseModel):
    """User creation request schema."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)

    @field_validator("email", mode="wrap")
    @classmethod
    def keep_email_as_given(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> str:
        """Check the email format but keep the caller's exact spelling."""
        handler(v)
        return v

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize name by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v


class UserUpdate(BaseModel):
    """User update request schema.

    Only ``name`` and ``bio`` can change after creation; any other key
    (``email``, ``id``, timestamps) is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: str | None) -> str:
        """Strip whitespace and refuse an explicit null."""
        if v is None:
            raise ValueError("name cannot be null")
        return v.strip() if isinstance(v, str) else v


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes."""
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserResponse(BaseModel):
    """User response schema, serialized with camelCase keys."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    email: str
    name: str
    bio: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        """Build the response from an ORM row."""
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            bio=user.bio,
            created_at=as_utc(user.created_at).isoformat(),
            updated_at=as_utc(user.updated_at).isoformat(),
        )
