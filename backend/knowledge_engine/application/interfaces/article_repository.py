"""Abstract repository interfaces (ports): define the contract, not the implementation."""

from abc import ABC, abstractmethod

from knowledge_engine.domain.entities import Article, ArticlePatch, NewArticle


class ArticleRepository(ABC):
    """Port for writing and reassembling the article aggregate.

    Implementations operate on the transaction they were created with, so a
    read issued after a write in the same unit of work sees that write.
    """

    @abstractmethod
    async def get_by_id(self, article_id: int) -> Article | None:
        """Reassemble the full aggregate, or None when the id does not resolve."""
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Article | None:
        ...

    @abstractmethod
    async def create(self, draft: NewArticle, author_id: int) -> Article:
        """Insert the article and all supplied collections, then return the aggregate."""
        ...

    @abstractmethod
    async def update(self, article_id: int, patch: ArticlePatch, editor_id: int) -> Article | None:
        """Apply a partial update. Returns None when the article does not exist."""
        ...

    @abstractmethod
    async def delete(self, article_id: int) -> bool:
        """Hard-delete an article and its owned rows. Returns False if not found."""
        ...

    @abstractmethod
    async def increment_views(self, article_id: int) -> bool:
        ...
