"""FastAPI dependencies that wire the database into services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from users_api.database import get_db
from users_api.services.user_service import UserService


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    """Build a UserService bound to the request's database session."""
    return UserService(db)
