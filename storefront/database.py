import logging
from typing import Any, Dict

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """Engine keyword arguments for the given database url"""
    if database_url.startswith("sqlite"):
        # SQLite connections are shared between the threadpool workers
        return {"connect_args": {"check_same_thread": False}}
    options = {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}
    if database_url.startswith("postgresql"):
        # func.now() timestamps are written in UTC, like SQLite's CURRENT_TIMESTAMP
        options["connect_args"] = {"options": "-c timezone=utc"}
    return options


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **engine_options(settings.database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection() -> bool:
    """Check that the database answers a trivial query"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
    finally:
        db.close()
