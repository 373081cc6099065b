import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(url: str) -> dict:
    """Connection pooling for server databases, thread sharing for SQLite."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


@contextmanager
def session_scope(session_factory=None):
    """
    Unit of work around a single service operation.

    Opens a session from ``session_factory`` (``SessionLocal`` by default),
    rolls back and re-raises on any error, and always closes the session.
    Committing is left to the caller.
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
    except Exception as e:
        db.rollback()
        logger.error(f"Unit of work rolled back: {e}")
        raise
    finally:
        db.close()
