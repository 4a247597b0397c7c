"""
Database connection settings for the complaint lifecycle engine.
Provides SQLAlchemy session management and connection pooling.
"""

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from complaint_engine.config.logging import get_logger
from complaint_engine.config.settings import get_settings

logger = get_logger(__name__)


@lru_cache()
def get_engine() -> Engine:
    """Build the process-wide engine on first use"""
    settings = get_settings()
    url = settings.get_database_url()

    options = {
        "pool_pre_ping": True,  # Check connection before using it
        "echo": settings.DB_ECHO,
        "connect_args": settings.DB_CONNECT_ARGS,
    }
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,  # Recycle connections after 1 hour
        )

    return create_engine(url, **options)


SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_session_factory() -> sessionmaker:
    """Session factory bound to the configured engine"""
    if SessionLocal.kw.get("bind") is None:
        SessionLocal.configure(bind=get_engine())
    return SessionLocal


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - start timer"""
    conn.info.setdefault('query_start_time', []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - stop timer and log if slow query"""
    total_time = time.time() - conn.info['query_start_time'].pop()

    if total_time > get_settings().DB_SLOW_QUERY_SECONDS:
        logger.warning(
            f"Slow query detected ({total_time:.4f}s): "
            f"{statement[:100]}... with params {parameters}"
        )


def get_db_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup"""
    session = get_session_factory()()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Context manager for database sessions"""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error(f"Database context error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine = None) -> None:
    """Create all complaint engine tables"""
    # Import models so every table is registered on the metadata
    import complaint_engine.models  # noqa: F401
    from complaint_engine.models.base.base_model import Base

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
