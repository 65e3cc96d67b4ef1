"""User persistence service.

The only component that reads or writes the ``users`` table. Expected
failures are raised as ``UserServiceError`` subclasses; database faults
propagate untouched.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from users_api.core.errors import (
    UserAlreadyExistsError,
    UserNotFoundError,
    UserValidationError,
    describe_validation_errors,
)
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserUpdate, as_utc

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    """CRUD operations on users, bound to one database session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self, email: str | None = None, name: str | None = None) -> list[User]:
        """List users, oldest first.

        Args:
            email: Only return the user with exactly this email
            name: Only return users whose name contains this text (case-insensitive)

        Returns:
            list[User]: Matching users
        """
        query = self.db.query(User)
        if email is not None:
            query = query.filter(User.email == email)
        if name is not None:
            query = query.filter(User.name.ilike(f"%{name}%"))
        return query.order_by(User.created_at.asc()).all()

    def get_by_id(self, user_id: str) -> User:
        """Fetch one user by id.

        Raises:
            UserNotFoundError: If no user has this id, or the id is not a UUID
        """
        try:
            user_uuid = UUID(str(user_id))
        except ValueError:
            raise UserNotFoundError(user_id)

        user = self.db.query(User).filter(User.id == user_uuid).first()
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_by_email(self, email: str) -> User:
        """Fetch one user by email.

        Raises:
            UserNotFoundError: If no user has this email
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            raise UserNotFoundError(email, field="email")
        return user

    def create(self, data: Mapping[str, Any]) -> User:
        """Validate and insert a new user.

        Args:
            data: Raw input with email, name and optional bio

        Returns:
            User: The stored user with id and timestamps populated

        Raises:
            UserValidationError: If the input violates the schema
            UserAlreadyExistsError: If the email is taken
        """
        try:
            user_data = UserCreate.model_validate(data)
        except ValidationError as exc:
            raise UserValidationError(describe_validation_errors(exc.errors()))

        # Best-effort pre-check; the unique constraint on email is what
        # actually guarantees uniqueness under concurrent inserts.
        existing_user = self.db.query(User).filter(User.email == user_data.email).first()
        if existing_user is not None:
            raise UserAlreadyExistsError(user_data.email)

        now = _utcnow()
        new_user = User(
            id=uuid4(),
            email=user_data.email,
            name=user_data.name,
            bio=user_data.bio,
            created_at=now,
            updated_at=now,
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Unique constraint rejected duplicate email {user_data.email}")
            raise UserAlreadyExistsError(user_data.email)
        self.db.refresh(new_user)

        logger.info(
            f"User created: {new_user.name} ({new_user.email})",
            extra={"user_id": str(new_user.id), "email": new_user.email},
        )
        return new_user

    def update(self, user_id: str, data: Mapping[str, Any]) -> User:
        """Apply a partial update to name and/or bio.

        Keys missing from ``data`` are left unchanged; ``updated_at`` always
        moves forward.

        Raises:
            UserValidationError: If the input violates the schema
            UserNotFoundError: If no user has this id
        """
        try:
            changes = UserUpdate.model_validate(data).model_dump(exclude_unset=True)
        except ValidationError as exc:
            raise UserValidationError(describe_validation_errors(exc.errors()))

        user = self.get_by_id(user_id)

        for field, value in changes.items():
            setattr(user, field, value)

        now = _utcnow()
        previous = as_utc(user.updated_at)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        user.updated_at = now

        self.db.commit()
        self.db.refresh(user)

        logger.info(
            f"User updated: {user.name} ({user.email})",
            extra={"user_id": str(user.id), "email": user.email},
        )
        return user

    def delete(self, user_id: str) -> None:
        """Permanently remove a user.

        Raises:
            UserNotFoundError: If no user has this id
        """
        user = self.get_by_id(user_id)
        deleted_id, name, email = str(user.id), user.name, user.email

        self.db.delete(user)
        self.db.commit()

        logger.info(
            f"User deleted: {name} ({email})",
            extra={"user_id": deleted_id, "email": email},
        )
