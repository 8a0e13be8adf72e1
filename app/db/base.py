"""
Database engine, session factory and declarative base.
"""
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.core.config import Settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the engine for the configured database.

    Args:
        settings: Application settings

    Returns:
        SQLAlchemy engine
    """
    url = settings.database_url

    if url.startswith("sqlite"):
        # In-memory databases must share one connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    if settings.ENV == "production":
        # Production: no pooling for serverless, rely on the database pooler
        return create_engine(
            url,
            poolclass=NullPool,
            pool_pre_ping=True,
        )

    # Development: bounded pool, excess requests wait for a free connection
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign keys off unless each connection asks for them
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for database session.

    The session factory is owned by the application instance, so every
    request acquires its own session and releases it when the response is done.

    Yields:
        Database session
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
