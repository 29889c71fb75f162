"""
Happy Thoughts API — Store Handle and Session Management
==========================================================

What:  The `Database` handle (async engine + session factory), the ORM base
       class, and the FastAPI dependency that hands out one session per request.
How:   The app factory constructs a single `Database` and stores it on
       `app.state.database`; the lifespan handler disposes it on shutdown.
       Nothing here opens a connection at import time.
Who:   Route handlers via `Depends(get_db_session)`, the health check, tests.

Connection Pooling:
    PostgreSQL URLs get a sized QueuePool (DB_POOL_SIZE + DB_MAX_OVERFLOW),
    a checkout timeout (DB_POOL_TIMEOUT) and hourly connection recycling.
    SQLite URLs keep SQLAlchemy's default pool for the dialect.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from happy_thoughts.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, `Database.create_schema`
    and Alembic autogenerate.
    """
    pass


class Database:
    """
    Explicitly constructed handle on the thoughts store.

    Usage:
        database = Database.from_settings(settings)
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        pool_timeout: float = 30.0,
        connect_timeout: Optional[float] = None,
        echo: bool = False,
    ):
        self.url = url
        engine_kwargs: Dict[str, Any] = {
            "pool_pre_ping": pool_pre_ping,
            "echo": echo,
        }
        if connect_timeout is not None:
            # asyncpg and sqlite3 both accept a `timeout` connect argument
            engine_kwargs["connect_args"] = {"timeout": connect_timeout}
        if not self.is_sqlite:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False keeps attributes readable after commit,
        # outside of the session's lazy-load context
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_timeout=settings.db_pool_timeout,
            connect_timeout=settings.db_connect_timeout,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session that commits on success and rolls back on error.

        The session is always closed, returning its connection to the pool
        even when commit or rollback fails.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_schema(self) -> None:
        """Create all tables registered on `Base.metadata` (idempotent)."""
        # Models register themselves with Base on import
        from happy_thoughts.models import thought  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run `SELECT 1`; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            return False
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Called from the lifespan shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a store session per request.

    The `Database` handle is read from `request.app.state.database`, where the
    application factory placed it.

    Example usage in a route:
        @router.get("/thoughts")
        async def list_thoughts(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
