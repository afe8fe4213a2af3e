"""SQLAlchemy engine, session factory and transaction scope.

``Database`` is constructed explicitly, opened once at startup and closed
once at shutdown; components receive it by injection instead of importing a
module-level engine.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from knowledge_engine.config import Settings
from knowledge_engine.domain.exceptions import (
    ConflictError,
    InvalidReferenceError,
    StorageError,
)
from knowledge_engine.infrastructure.database.base import Base

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def translate_integrity_error(exc: IntegrityError) -> Exception:
    """Map a driver integrity error to the matching domain error kind."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    message = str(orig).lower()

    if code == _UNIQUE_VIOLATION or "unique" in message or "duplicate" in message:
        return ConflictError("Article", str(orig))
    if code == _FOREIGN_KEY_VIOLATION or "foreign key" in message:
        return InvalidReferenceError("Article", str(orig))
    return StorageError("integrity", str(orig))


class Database:
    """Owns the async engine (and its bounded connection pool) for the process."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._url = _get_async_url(settings.database_url)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open; call open() first")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> None:
        if self._engine is not None:
            return

        options: dict = {"echo": self._settings.db_echo, "future": True}
        if not self._url.startswith("sqlite"):
            options.update(
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_timeout=self._settings.db_pool_timeout,
                pool_pre_ping=True,
            )

        self._engine = create_async_engine(self._url, **options)
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database opened (dialect=%s)", self._engine.dialect.name)

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session wrapped in one transaction.

        Commits when the block exits cleanly; otherwise rolls back and
        re-raises, translating driver errors into domain errors.
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not open; call open() first")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                translated = translate_integrity_error(exc)
                logger.warning("Transaction rolled back: %s", translated)
                raise translated from exc
            except (DBAPIError, SQLAlchemyError) as exc:
                await session.rollback()
                logger.error("Transaction failed: %s", exc)
                raise StorageError("transaction", str(exc)) from exc
            except Exception:
                await session.rollback()
                raise
