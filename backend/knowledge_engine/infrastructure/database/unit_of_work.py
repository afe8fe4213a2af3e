"""SQLAlchemy unit of work: one session, one transaction, all article repositories."""

from contextlib import AbstractAsyncContextManager
from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_engine.application.interfaces import UnitOfWork
from knowledge_engine.infrastructure.database.repositories import (
    SQLAlchemyArticleQueryRepository,
    SQLAlchemyArticleRepository,
    SQLAlchemyRatingRepository,
)
from knowledge_engine.infrastructure.database.session import Database


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Binds the repositories to a session opened from ``Database.session()``.

    Commit, rollback and error translation are delegated to that context
    manager, so leaving this block is leaving the transaction.
    """

    def __init__(self, database: Database, text_config: str = "simple"):
        self._database = database
        self._text_config = text_config
        self._scope: AbstractAsyncContextManager[AsyncSession] | None = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._scope = self._database.session()
        session = await self._scope.__aenter__()
        self.articles = SQLAlchemyArticleRepository(session)
        self.queries = SQLAlchemyArticleQueryRepository(session, self._text_config)
        self.ratings = SQLAlchemyRatingRepository(session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        scope, self._scope = self._scope, None
        if scope is not None:
            await scope.__aexit__(exc_type, exc, tb)
