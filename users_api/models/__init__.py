"""Database models package."""

from users_api.models.user import User

__all__ = ["User"]
