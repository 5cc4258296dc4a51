"""
Database Configuration for Cards Against Humanity.

Contains database engine setup, session management, and initialization functions.
"""

import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from config.settings import DATABASE_URL
from .models import Base

# Configure logging
logger = logging.getLogger(__name__)

engine = None
SessionLocal = None


def _build_engine(url: str):
    # Handle Render's PostgreSQL URL format
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)

    if url in ('sqlite://', 'sqlite:///:memory:'):
        # One shared connection, otherwise every session sees an empty database
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith('sqlite'):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=NullPool)

    # PostgreSQL configuration
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def configure_database(url: str = DATABASE_URL):
    """Point the module at a database URL and rebuild the session factory."""
    global engine, SessionLocal
    engine = _build_engine(url)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info(f"Database configured: {engine.url.render_as_string(hide_password=True)}")
    return engine


@contextmanager
def get_db_session():
    """Context manager for database sessions with automatic cleanup."""
    if SessionLocal is None:
        configure_database()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database error: {e}")
        raise
    finally:
        session.close()


def init_database(url: str = None):
    """Initialize the database and create tables."""
    try:
        if url is not None or engine is None:
            configure_database(url or DATABASE_URL)
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
