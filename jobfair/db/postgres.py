import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
from jobfair.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def _engine_options() -> dict:
    # SQLite (used by the test-suite) has no server-side pool to size
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


engine = create_engine(
    settings.postgres_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **_engine_options()
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Transactional unit of work.
    Everything executed inside the block is committed together, or rolled
    back together if any exception escapes.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


def fetch_all(db: Session, sql: str, params: dict = None) -> list:
    """Run a query on an open session and return rows as dicts."""
    result = db.execute(text(sql), params or {})
    return [dict(row) for row in result.mappings().all()]


def fetch_one(db: Session, sql: str, params: dict = None):
    """Run a query on an open session and return the first row as a dict, or None."""
    row = db.execute(text(sql), params or {}).mappings().first()
    return dict(row) if row is not None else None
