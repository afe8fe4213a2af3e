"""Concrete rating repository backed by SQLAlchemy.

``recompute`` is the single writer of ``articles.rating`` and
``articles.rating_count``; every path that touches the ratings table ends
with it.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_engine.application.interfaces import RatingRepository
from knowledge_engine.domain.entities import RatingSummary, round_score
from knowledge_engine.domain.exceptions import EntityNotFoundError
from knowledge_engine.infrastructure.database.models import ArticleModel, RatingModel

logger = logging.getLogger(__name__)


def _dialect_insert(dialect_name: str):
    """INSERT construct that supports ``ON CONFLICT DO UPDATE`` for the bound dialect."""
    if dialect_name == "sqlite":
        return sqlite.insert
    return postgresql.insert


class SQLAlchemyRatingRepository(RatingRepository):
    """Implements the RatingRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def rate(self, article_id: int, user_id: int, value: int) -> RatingSummary:
        # Row lock on the parent article serializes concurrent raters of the
        # same article through the recompute below. SQLite ignores FOR UPDATE
        # and serializes at the first write, which is the upsert.
        locked = await self._session.scalar(
            select(ArticleModel.id).where(ArticleModel.id == article_id).with_for_update()
        )
        if locked is None:
            raise EntityNotFoundError("Article", article_id)

        now = datetime.now(timezone.utc)
        # One statement, so two submissions from the same user cannot both
        # take the insert path and trip the (article_id, user_id) constraint.
        upsert = _dialect_insert(self._session.get_bind().dialect.name)(RatingModel).values(
            article_id=article_id,
            user_id=user_id,
            rating=value,
            created_at=now,
            updated_at=now,
        )
        await self._session.execute(
            upsert.on_conflict_do_update(
                index_elements=[RatingModel.article_id, RatingModel.user_id],
                set_={"rating": value, "updated_at": now},
            )
        )

        summary = await self.recompute(article_id)
        logger.info(
            "User %s rated article %s with %s; aggregate now %s over %s",
            user_id,
            article_id,
            value,
            summary.rating,
            summary.rating_count,
        )
        return summary

    async def recompute(self, article_id: int) -> RatingSummary:
        row = (
            await self._session.execute(
                select(
                    func.avg(RatingModel.rating).label("avg_rating"),
                    func.count(RatingModel.id).label("rating_count"),
                ).where(RatingModel.article_id == article_id)
            )
        ).one()

        summary = RatingSummary(
            rating=round_score(row.avg_rating),
            rating_count=row.rating_count or 0,
        )
        await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id)
            .values(rating=summary.rating, rating_count=summary.rating_count)
            .execution_options(synchronize_session=False)
        )
        return summary
