"""Port for read-only article queries: listing, search, popularity and statistics."""

from abc import ABC, abstractmethod

from knowledge_engine.domain.entities import (
    ArticlePage,
    ArticleSummary,
    ArticleTotals,
    ListingCriteria,
)


class ArticleQueryRepository(ABC):

    @abstractmethod
    async def find_all(self, criteria: ListingCriteria) -> ArticlePage:
        """Filtered, sorted, paginated listing of thin article rows."""
        ...

    @abstractmethod
    async def search(self, keyword: str, limit: int) -> list[ArticleSummary]:
        """Published articles ranked by text relevance, best first."""
        ...

    @abstractmethod
    async def get_popular(self, limit: int) -> list[ArticleSummary]:
        ...

    @abstractmethod
    async def get_recent(self, limit: int) -> list[ArticleSummary]:
        ...

    @abstractmethod
    async def get_totals(self) -> ArticleTotals:
        """Counts, views and mean rating across every article regardless of status."""
        ...

    @abstractmethod
    async def get_recently_created(self, limit: int) -> list[ArticleSummary]:
        """Most recently created articles of any status."""
        ...
