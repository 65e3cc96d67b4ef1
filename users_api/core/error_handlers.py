"""Global exception handlers.

Every failure that escapes a route still gets the ``{success: false, error}``
envelope. Unexpected exceptions are logged in full and reported to the client
only as a generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.core.errors import describe_validation_errors
from users_api.schemas.response import error_response

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_http_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_http_error_handler(app: FastAPI) -> None:
    """Register the framework HTTP error handler (unknown routes, bad methods)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Route not found"
        else:
            message = str(exc.detail)
        response = error_response(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register the request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_errors(exc.errors())
        logger.warning(f"Validation error on {request.url.path}: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all for failures outside the request logging middleware; never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
