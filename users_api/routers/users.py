"""Users router."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from users_api.core.dependencies import get_user_service
from users_api.core.errors import UserServiceError
from users_api.schemas.response import (
    ErrorEnvelope,
    MessageEnvelope,
    UserEnvelope,
    UserListEnvelope,
    error_response,
)
from users_api.schemas.user import UserResponse
from users_api.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope},
    status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope},
    status.HTTP_409_CONFLICT: {"model": ErrorEnvelope},
}


def _to_error_response(exc: UserServiceError) -> JSONResponse:
    """Map a domain error to its HTTP status and envelope."""
    logger.info(f"{type(exc).__name__}: {exc.message}")
    return error_response(exc.status_code, exc.message)


@router.get("", response_model=UserListEnvelope)
def list_users(
    service: Annotated[UserService, Depends(get_user_service)],
    email: Annotated[str | None, Query(description="Exact email match")] = None,
    name: Annotated[str | None, Query(description="Case-insensitive name fragment")] = None,
) -> UserListEnvelope:
    """List all users.

    Args:
        service: User service bound to the request session
        email: Optional exact email filter
        name: Optional name substring filter

    Returns:
        UserListEnvelope: Users wrapped in the success envelope
    """
    users = service.get_all(email=email, name=name)
    return UserListEnvelope(data=[UserResponse.from_model(user) for user in users])


@router.get("/{user_id}", response_model=UserEnvelope, responses=_ERROR_RESPONSES)
def get_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserEnvelope | JSONResponse:
    """Get a specific user by ID.

    Args:
        user_id: User UUID
        service: User service bound to the request session

    Returns:
        UserEnvelope: The user, or a 404 envelope
    """
    try:
        user = service.get_by_id(user_id)
    except UserServiceError as exc:
        return _to_error_response(exc)

    return UserEnvelope(data=UserResponse.from_model(user))


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
def create_user(
    payload: Annotated[dict[str, Any], Body(description="email, name and optional bio")],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserEnvelope | JSONResponse:
    """Create a new user.

    Args:
        payload: User creation data (email, name, bio)
        service: User service bound to the request session

    Returns:
        UserEnvelope: Created user, or a 400/409 envelope
    """
    try:
        user = service.create(payload)
    except UserServiceError as exc:
        return _to_error_response(exc)

    return UserEnvelope(data=UserResponse.from_model(user))


@router.patch("/{user_id}", response_model=UserEnvelope, responses=_ERROR_RESPONSES)
@router.put("/{user_id}", response_model=UserEnvelope, responses=_ERROR_RESPONSES)
def update_user(
    user_id: str,
    payload: Annotated[dict[str, Any], Body(description="name and/or bio")],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserEnvelope | JSONResponse:
    """Update a user's name and/or bio.

    PUT and PATCH behave the same: only the fields present are changed.

    Args:
        user_id: User UUID
        payload: User update data (name, bio)
        service: User service bound to the request session

    Returns:
        UserEnvelope: Updated user, or a 400/404 envelope
    """
    try:
        user = service.update(user_id, payload)
    except UserServiceError as exc:
        return _to_error_response(exc)

    return UserEnvelope(data=UserResponse.from_model(user))


@router.delete("/{user_id}", response_model=MessageEnvelope, responses=_ERROR_RESPONSES)
def delete_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
) -> MessageEnvelope | JSONResponse:
    """Delete a user.

    Args:
        user_id: User UUID
        service: User service bound to the request session

    Returns:
        MessageEnvelope: Confirmation message, or a 404 envelope
    """
    try:
        service.delete(user_id)
    except UserServiceError as exc:
        return _to_error_response(exc)

    return MessageEnvelope(message="User deleted successfully")
