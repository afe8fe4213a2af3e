"""Port for per-user ratings and the derived article score."""

from abc import ABC, abstractmethod

from knowledge_engine.domain.entities import RatingSummary


class RatingRepository(ABC):

    @abstractmethod
    async def rate(self, article_id: int, user_id: int, value: int) -> RatingSummary:
        """Insert or replace the user's rating and return the recomputed aggregate.

        Raises EntityNotFoundError when the article does not exist.
        """
        ...

    @abstractmethod
    async def recompute(self, article_id: int) -> RatingSummary:
        """Recalculate the article's mean rating and count from the ratings table."""
        ...
