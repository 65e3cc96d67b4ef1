"""Database connection and session management."""

import logging
from typing import Any, Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


def create_db_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    echo: bool = False,
) -> Engine:
    """Create a database engine with connection pooling.

    SQLite gets no pool sizing (its pools don't accept it) and is shared
    across the request thread pool; in-memory SQLite is pinned to a single
    connection so every session sees the same database.

    Args:
        database_url: SQLAlchemy connection URL
        pool_size: Number of connections to maintain
        max_overflow: Maximum number of connections beyond pool_size
        echo: Log SQL statements

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    url = make_url(database_url)
    engine_kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = pool_size
        engine_kwargs["max_overflow"] = max_overflow

    logger.info(f"Creating database engine for {url.render_as_string(hide_password=True)}")
    return create_engine(url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


def check_connection(engine: Engine) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning(f"Database connectivity check failed: {exc}")
        return False


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield one session per request from the factory kept on ``app.state``.

    Routes don't take the session directly; ``get_user_service`` depends on
    this and hands the session to ``UserService``. Tests override it to reuse
    their own session.

    Example:
        ```python
        def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
            return UserService(db)
        ```
    """
    session_factory = request.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
