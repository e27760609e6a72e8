"""Database connection and session management."""
from collections.abc import Generator
import logging
from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _build_connect_args(settings: Settings) -> dict:
    url = make_url(settings.database_url)

    # SQLite requires check_same_thread=False for FastAPI
    if url.get_backend_name() == "sqlite":
        return {"check_same_thread": False}

    if settings.use_database_ssl:
        return {"sslmode": "require"}

    return {}


def create_db_engine(settings: Settings) -> Engine:
    """Create the process-wide engine (and its connection pool)."""
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(
        settings.database_url,
        connect_args=_build_connect_args(settings),
        echo=settings.debug,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create missing tables. Safe to call on every start-up."""
    # Import all models so they're registered with Base
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
