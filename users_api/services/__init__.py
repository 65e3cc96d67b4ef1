"""Service layer package."""

from users_api.services.user_service import UserService

__all__ = ["UserService"]
