"""Engine, session factory and table creation."""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from jobprep.config import settings


class Base(DeclarativeBase):
    """Declarative base for resumes, applications and tests."""


# Built on first use so importing the package never needs DATABASE_URL
_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Shared between FastAPI's worker threads
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 300}


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL not configured")
        _engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False)
    return _session_factory


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request."""
    with session_scope() as db:
        yield db


@contextmanager
def session_scope() -> Iterator[Session]:
    """A session that is always closed; commits are left to the services."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables. Alembic owns schema changes after that."""
    from jobprep.db import tables  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
