import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from users_api.config import Settings, get_settings
from users_api.core.error_handlers import register_error_handlers
from users_api.core.middleware import PrettyJSONMiddleware, RequestLoggingMiddleware
from users_api.core.observability import setup_logging
from users_api.database import Base, create_db_engine, create_session_factory
from users_api.routers import health, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the database engine on startup and dispose it on shutdown."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    engine = create_db_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info(f"{settings.app_name} {settings.app_version} started ({settings.app_env})")

    try:
        yield
    finally:
        engine.dispose()
        logger.info(f"{settings.app_name} shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the application: middleware, error handlers and routers."""
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings

    # Middleware added last runs first: CORS wraps logging, which wraps pretty-printing
    app.add_middleware(PrettyJSONMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    # TODO: narrow CORS_ORIGINS per deployment; "*" is only suitable for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "users_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.app_env == "development",
        loop="asyncio",  # Explicitly use asyncio instead of auto (which tries uvloop)
    )
