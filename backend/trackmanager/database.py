"""Database configuration and session management"""
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging

from trackmanager.config import settings
from trackmanager.errors import StoreError

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> dict:
    if not database_url.startswith("sqlite"):
        return {}
    kwargs = {"connect_args": {"check_same_thread": False}}
    # An in-memory database only lives as long as its single connection
    if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
        kwargs["poolclass"] = StaticPool
    return kwargs


# Create SQLAlchemy engine
engine = create_engine(
    settings.database_url,
    echo=False,
    **_engine_kwargs(settings.database_url)
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db() -> Generator:
    """
    Dependency function to get database session.
    
    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    # Register models on Base.metadata before creating tables
    import trackmanager.models  # noqa: F401
    
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables ready ({engine.url.get_backend_name()})")


def commit_or_rollback(db: Session, action: str) -> None:
    """
    Commit the session, rolling back and raising StoreError on failure
    
    Args:
        db: Database session
        action: What was being committed, for the log and error message
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Failed to {action}")
        raise StoreError(f"Failed to {action}") from e
