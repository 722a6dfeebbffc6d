"""
Database connection management for the remote store.

Wraps a SQLAlchemy engine and session factory behind class-level state so the
API and the remote store share one connection pool.
"""

import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gated.config import DEFAULT_DATABASE_URL
from gated.db.tables import metadata


class DatabaseConnection:
    """
    Manages the engine and sessions for the remote store.

    Usage:
        # Initialize at app startup
        DatabaseConnection.initialize("postgresql+psycopg://user@host/gated")

        # Use sessions (or a UnitOfWork)
        session = DatabaseConnection.get_session()

        # Close at app shutdown
        DatabaseConnection.close()
    """

    _engine: Engine | None = None
    _session_factory: sessionmaker | None = None
    _initialized: bool = False

    @classmethod
    def initialize(
        cls,
        database_url: str | None = None,
        create_tables: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
    ):
        """
        Initialize the database connection pool.

        Args:
            database_url: SQLAlchemy URL (defaults to DATABASE_URL env var)
            create_tables: Create missing tables after connecting
            pool_size: Base connection pool size (server databases only)
            max_overflow: Additional connections allowed beyond pool_size
            pool_timeout: Seconds to wait for a connection
            pool_recycle: Recycle connections after this many seconds
        """
        if cls._initialized:
            return

        database_url = database_url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

        if database_url.startswith("sqlite"):
            # Remote calls run in worker threads
            engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in database_url or database_url.rstrip("/") in (
                "sqlite:",
                "sqlite+pysqlite:",
            ):
                engine_kwargs["poolclass"] = StaticPool
            cls._engine = create_engine(database_url, **engine_kwargs)
        else:
            cls._engine = create_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=True,  # Verify connections before use
            )

        if create_tables:
            metadata.create_all(cls._engine)

        cls._session_factory = sessionmaker(bind=cls._engine)
        cls._initialized = True

    @classmethod
    def get_engine(cls) -> Engine:
        """Get the SQLAlchemy engine."""
        if not cls._initialized or cls._engine is None:
            raise RuntimeError(
                "Database not initialized. Call DatabaseConnection.initialize() first."
            )
        return cls._engine

    @classmethod
    def close(cls):
        """Dispose of the connection pool."""
        if cls._engine:
            cls._engine.dispose()
            cls._engine = None

        cls._session_factory = None
        cls._initialized = False

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if the database connection is initialized."""
        return cls._initialized

    @classmethod
    def get_session(cls) -> Session:
        """
        Get a new database session.

        The caller is responsible for committing/rolling back and closing the
        session. For automatic lifecycle management, use session() instead.
        """
        if not cls._initialized or cls._session_factory is None:
            raise RuntimeError(
                "Database not initialized. Call DatabaseConnection.initialize() first."
            )

        return cls._session_factory()
