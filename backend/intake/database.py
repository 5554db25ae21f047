"""
Form Intake Service — Database Engine & Schema Bootstrap
=========================================================

What:  Async SQLAlchemy engine, session factory, startup schema initializer
       and the FastAPI session dependency.
How:   One `Database` object is built in the application lifespan, stored on
       `app.state.database` and shared by every request for the lifetime of
       the process. Each request borrows a session (one pooled connection).
Who:   Routes receive sessions through `Depends(get_db_session)`; the
       lifespan calls `init_schema()` on startup and `dispose()` on shutdown.

Connection Pooling:
    pool_size / max_overflow:  from settings (PostgreSQL only)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
    SQLite URLs (used by the test suite) keep SQLAlchemy's default pool.
"""

import logging
import ssl
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional

from fastapi import Request
from sqlalchemy import Table, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from intake.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by the three inquiry models."""
    pass


def _insecure_ssl_context() -> ssl.SSLContext:
    # Encrypted, but the provider's certificate is accepted without verification.
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def engine_options(settings: Settings) -> Dict[str, Any]:
    """
    Build `create_async_engine` keyword arguments for the configured backend.

    SQLite drivers reject the queue-pool sizing arguments and the asyncpg
    `ssl` connect argument, so both are only applied to other backends.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    if settings.db_ssl:
        options["connect_args"] = {"ssl": _insecure_ssl_context()}
    return options


class Database:
    """
    Process-scoped owner of the engine and session factory.

    Lifecycle:
        1. Constructed once at startup (`Database.from_settings`)
        2. `init_schema()` creates any missing inquiry tables
        3. Sessions are handed out per request by `get_db_session`
        4. `dispose()` closes every pooled connection at shutdown
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: returned rows stay readable after commit
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_async_engine(settings.database_url, **engine_options(settings)))

    async def init_schema(self, tables: Optional[Iterable[Table]] = None) -> List[str]:
        """
        Create each inquiry table if it does not exist yet.

        Every table is created in its own transaction. A failure is logged
        and the remaining tables are still attempted; nothing is raised.

        Returns:
            Names of the tables that exist after the call. Informational only.
        """
        if tables is None:
            tables = Base.metadata.sorted_tables

        ensured: List[str] = []
        for table in tables:
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(table.create, checkfirst=True)
            except Exception as e:
                logger.error("Error creating %s table: %s", table.name, e)
                continue
            logger.info("%s table created or already exists", table.name)
            ensured.append(table.name)
        return ensured

    async def ping(self) -> bool:
        """Runs SELECT 1; False when the database cannot be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# ── Dependencies ──────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one session per request.

    The submission service commits or rolls back explicitly, so this only
    guarantees the session is closed and its connection returned to the pool.
    """
    async with get_database(request).session_factory() as session:
        yield session
