"""Database connection and session management."""

import logging
import os
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

DEFAULT_APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodoro"
DB_FILENAME = "pomodoro.db"


def app_support_dir() -> Path:
    """Data directory; ``POMODORO_HOME`` overrides the default location."""
    override = os.environ.get("POMODORO_HOME")
    return Path(override).expanduser() if override else DEFAULT_APP_SUPPORT_DIR


# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        directory = app_support_dir()
        directory.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{directory / DB_FILENAME}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
        logger.debug("Using database at %s", directory / DB_FILENAME)
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
