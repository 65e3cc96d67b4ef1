"""HTTP middleware applied to every request."""

import json
import logging
import time

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from users_api.schemas.response import error_response

logger = logging.getLogger("users_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured line per request: method, path, status, duration.

    Unhandled exceptions become the generic 500 envelope here, inside the
    CORS layer, so cross-origin clients can still read the error response.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path} "
                f"after {duration_ms}ms: {exc}",
                exc_info=exc,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "duration_ms": duration_ms,
                },
            )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client": request.client.host if request.client else None,
            },
        )
        return response


class PrettyJSONMiddleware(BaseHTTPMiddleware):
    """Indent JSON responses when the request carries a ``pretty`` query parameter."""

    def __init__(self, app, query_param: str = "pretty", indent: int = 2):
        super().__init__(app)
        self.query_param = query_param
        self.indent = indent

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if self.query_param not in request.query_params:
            return response
        if not response.headers.get("content-type", "").startswith("application/json"):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        try:
            pretty = json.dumps(json.loads(body), indent=self.indent, ensure_ascii=False)
        except ValueError:
            pretty = None

        headers = dict(response.headers)
        headers.pop("content-length", None)
        return Response(
            content=pretty if pretty is not None else body,
            status_code=response.status_code,
            headers=headers,
            media_type="application/json",
        )
