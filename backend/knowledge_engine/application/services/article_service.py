"""Application service (use case) for Article operations.

Every public method opens exactly one unit of work, so each operation is one
transaction: it commits when the method returns and rolls back when it raises.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from knowledge_engine.application.interfaces import UnitOfWork
from knowledge_engine.application.schemas import ArticleCreate, ArticleListQuery, ArticleUpdate
from knowledge_engine.domain.entities import (
    Article,
    ArticlePage,
    ArticleStats,
    ArticleSummary,
    RatingSummary,
)
from knowledge_engine.domain.exceptions import EntityNotFoundError, InvalidInputError
from knowledge_engine.domain.slug import generate_slug

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]

_DTO = TypeVar("_DTO", bound=BaseModel)

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_SEARCH_LIMIT = 20
DEFAULT_SHORTLIST_LIMIT = 5
STATS_RECENT_LIMIT = 5


def _validate(schema: type[_DTO], data: Any) -> _DTO:
    """Accept either a ready DTO or a plain mapping and validate it into ``schema``."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or schema.__name__
        raise InvalidInputError(field, first["msg"]) from exc


def _require_positive_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidInputError("limit", "must be a positive integer")
    return limit


def _require_sluggable(title: str) -> None:
    if not generate_slug(title):
        raise InvalidInputError("title", "must contain at least one letter or digit")


class ArticleService:
    """Orchestrates article business logic. Depends on the unit-of-work port (DI)."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    # ── Writes ───────────────────────────────────────────────────────

    async def create_article(self, data: ArticleCreate | dict, author_id: int) -> Article:
        payload = _validate(ArticleCreate, data)
        _require_sluggable(payload.title)
        async with self._uow_factory() as uow:
            return await uow.articles.create(payload.to_domain(), author_id)

    async def update_article(
        self, article_id: int, data: ArticleUpdate | dict, editor_id: int
    ) -> Article:
        payload = _validate(ArticleUpdate, data)
        if payload.title is not None:
            _require_sluggable(payload.title)
        async with self._uow_factory() as uow:
            article = await uow.articles.update(article_id, payload.to_domain(), editor_id)
            if article is None:
                raise EntityNotFoundError("Article", article_id)
            return article

    async def delete_article(self, article_id: int) -> bool:
        async with self._uow_factory() as uow:
            deleted = await uow.articles.delete(article_id)
        if not deleted:
            logger.info("Delete requested for missing article %s", article_id)
        return deleted

    async def increment_views(self, article_id: int) -> bool:
        async with self._uow_factory() as uow:
            return await uow.articles.increment_views(article_id)

    async def rate_article(self, article_id: int, user_id: int, rating: int) -> RatingSummary:
        if isinstance(rating, bool) or not isinstance(rating, int) or not (
            MIN_RATING <= rating <= MAX_RATING
        ):
            raise InvalidInputError(
                "rating", f"must be an integer between {MIN_RATING} and {MAX_RATING}"
            )
        async with self._uow_factory() as uow:
            return await uow.ratings.rate(article_id, user_id, rating)

    # ── Reads ────────────────────────────────────────────────────────

    async def get_article(self, article_id: int) -> Article | None:
        async with self._uow_factory() as uow:
            return await uow.articles.get_by_id(article_id)

    async def get_article_by_slug(self, slug: str) -> Article | None:
        if not slug or not slug.strip():
            raise InvalidInputError("slug", "must not be blank")
        async with self._uow_factory() as uow:
            return await uow.articles.get_by_slug(slug.strip())

    async def list_articles(self, filters: ArticleListQuery | dict | None = None) -> ArticlePage:
        criteria = _validate(ArticleListQuery, filters).to_domain()
        async with self._uow_factory() as uow:
            return await uow.queries.find_all(criteria)

    async def search(self, keyword: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[ArticleSummary]:
        if keyword is None or not keyword.strip():
            raise InvalidInputError("keyword", "must not be blank")
        _require_positive_limit(limit)
        async with self._uow_factory() as uow:
            results = await uow.queries.search(keyword.strip(), limit)
        logger.debug("Search %r returned %d result(s)", keyword, len(results))
        return results

    async def get_popular(self, limit: int = DEFAULT_SHORTLIST_LIMIT) -> list[ArticleSummary]:
        _require_positive_limit(limit)
        async with self._uow_factory() as uow:
            return await uow.queries.get_popular(limit)

    async def get_recent(self, limit: int = DEFAULT_SHORTLIST_LIMIT) -> list[ArticleSummary]:
        _require_positive_limit(limit)
        async with self._uow_factory() as uow:
            return await uow.queries.get_recent(limit)

    async def get_stats(self) -> ArticleStats:
        """Totals and the latest articles, fetched concurrently on two sessions."""

        async def totals():
            async with self._uow_factory() as uow:
                return await uow.queries.get_totals()

        async def recent():
            async with self._uow_factory() as uow:
                return await uow.queries.get_recently_created(STATS_RECENT_LIMIT)

        outcomes = await asyncio.gather(totals(), recent(), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        article_totals, latest = outcomes
        return ArticleStats.merge(article_totals, latest)
