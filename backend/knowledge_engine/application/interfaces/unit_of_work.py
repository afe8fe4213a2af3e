"""Unit-of-work port: one transaction exposing every article repository."""

from abc import ABC, abstractmethod
from types import TracebackType

from .article_query_repository import ArticleQueryRepository
from .article_repository import ArticleRepository
from .rating_repository import RatingRepository


class UnitOfWork(ABC):
    """Async context manager scoping one transaction.

    Usage:
        async with uow_factory() as uow:
            article = await uow.articles.create(draft, author_id)

    Leaving the block normally commits; an exception rolls everything back.
    """

    articles: ArticleRepository
    queries: ArticleQueryRepository
    ratings: RatingRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        ...

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...
