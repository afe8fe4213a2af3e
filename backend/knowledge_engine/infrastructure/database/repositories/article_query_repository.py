"""Read-only article queries backed by SQLAlchemy: listing, search, popularity, statistics."""

import logging

from sqlalchemy import ColumnElement, Row, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_engine.application.interfaces import ArticleQueryRepository
from knowledge_engine.domain.entities import (
    ArticleListItem,
    ArticlePage,
    ArticlePriority,
    ArticleStatus,
    ArticleSummary,
    ArticleTotals,
    ArticleType,
    ListingCriteria,
    Pagination,
    SortField,
    SortOrder,
    round_score,
)
from knowledge_engine.infrastructure.database.models import (
    ArticleCategoryModel,
    ArticleModel,
    ArticleTagModel,
    CategoryModel,
    UserModel,
)
from knowledge_engine.infrastructure.database.sql_functions import (
    comma_join,
    relevance,
    text_match,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.CREATED_AT: ArticleModel.created_at,
    SortField.UPDATED_AT: ArticleModel.updated_at,
    SortField.TITLE: ArticleModel.title,
    SortField.VIEWS: ArticleModel.views,
    SortField.RATING: ArticleModel.rating,
    # severity order rather than alphabetical
    SortField.PRIORITY: case(
        {p.value: rank for rank, p in enumerate(ArticlePriority)},
        value=ArticleModel.priority,
        else_=0,
    ),
    SortField.TYPE: ArticleModel.type,
}

_SUMMARY_COLUMNS = (
    ArticleModel.id,
    ArticleModel.title,
    ArticleModel.slug,
    ArticleModel.excerpt,
    ArticleModel.status,
    ArticleModel.type,
    ArticleModel.priority,
    ArticleModel.views,
    ArticleModel.rating,
    ArticleModel.rating_count,
    ArticleModel.created_at,
)

_PUBLISHED = ArticleStatus.PUBLISHED.value


class SQLAlchemyArticleQueryRepository(ArticleQueryRepository):
    """Implements the ArticleQueryRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession, text_config: str = "simple"):
        self._session = session
        self._text_config = text_config

    @property
    def _dialect(self) -> str:
        return self._session.get_bind().dialect.name

    # ── Listing ──────────────────────────────────────────────────────

    async def find_all(self, criteria: ListingCriteria) -> ArticlePage:
        conditions = self._listing_conditions(criteria)

        total = await self._session.scalar(
            select(func.count(ArticleModel.id)).where(*conditions)
        ) or 0

        category_names = (
            select(comma_join(self._dialect, CategoryModel.name))
            .select_from(CategoryModel)
            .join(ArticleCategoryModel, ArticleCategoryModel.category_id == CategoryModel.id)
            .where(ArticleCategoryModel.article_id == ArticleModel.id)
            .correlate(ArticleModel)
            .scalar_subquery()
        )

        sort_column = _SORT_COLUMNS[criteria.sort_by]
        if criteria.sort_order == SortOrder.ASC:
            ordering = (sort_column.asc(), ArticleModel.id.asc())
        else:
            ordering = (sort_column.desc(), ArticleModel.id.desc())

        stmt = (
            select(
                *_SUMMARY_COLUMNS,
                ArticleModel.updated_at,
                UserModel.name.label("author_name"),
                UserModel.avatar.label("author_avatar"),
                category_names.label("category_names"),
            )
            .outerjoin(UserModel, UserModel.id == ArticleModel.created_by)
            .where(*conditions)
            .order_by(*ordering)
            .limit(criteria.limit)
            .offset(criteria.offset)
        )
        result = await self._session.execute(stmt)
        data = [self._to_list_item(row) for row in result]

        logger.debug(
            "Listing page %s/%s returned %s of %s articles",
            criteria.page,
            criteria.limit,
            len(data),
            total,
        )
        return ArticlePage(
            data=data,
            pagination=Pagination.build(page=criteria.page, limit=criteria.limit, total=total),
        )

    def _listing_conditions(self, criteria: ListingCriteria) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []

        status = criteria.effective_status
        if status is not None:
            conditions.append(ArticleModel.status == status.value)

        if criteria.search:
            tagged = select(ArticleTagModel.article_id).where(
                ArticleTagModel.tag.icontains(criteria.search, autoescape=True)
            )
            conditions.append(
                or_(
                    text_match(self._dialect, criteria.search, self._text_config),
                    ArticleModel.id.in_(tagged),
                )
            )

        if criteria.category_id is not None:
            conditions.append(
                ArticleModel.id.in_(
                    select(ArticleCategoryModel.article_id).where(
                        ArticleCategoryModel.category_id == criteria.category_id
                    )
                )
            )

        if criteria.type is not None:
            conditions.append(ArticleModel.type == criteria.type.value)
        if criteria.priority is not None:
            conditions.append(ArticleModel.priority == criteria.priority.value)
        if criteria.author_id is not None:
            conditions.append(ArticleModel.created_by == criteria.author_id)

        return conditions

    # ── Search ───────────────────────────────────────────────────────

    async def search(self, keyword: str, limit: int) -> list[ArticleSummary]:
        score = relevance(self._dialect, keyword, self._text_config).label("relevance")
        stmt = (
            select(*_SUMMARY_COLUMNS, score)
            .where(
                ArticleModel.status == _PUBLISHED,
                text_match(self._dialect, keyword, self._text_config),
            )
            .order_by(score.desc(), ArticleModel.created_at.desc(), ArticleModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        hits = [self._to_summary(row, relevance=float(row.relevance)) for row in result]
        logger.debug("Search %r matched %s articles", keyword, len(hits))
        return hits

    # ── Popular / recent ─────────────────────────────────────────────

    async def get_popular(self, limit: int) -> list[ArticleSummary]:
        result = await self._session.execute(
            select(*_SUMMARY_COLUMNS)
            .where(ArticleModel.status == _PUBLISHED)
            .order_by(ArticleModel.views.desc(), ArticleModel.rating.desc(), ArticleModel.id.desc())
            .limit(limit)
        )
        return [self._to_summary(row) for row in result]

    async def get_recent(self, limit: int) -> list[ArticleSummary]:
        result = await self._session.execute(
            select(*_SUMMARY_COLUMNS)
            .where(ArticleModel.status == _PUBLISHED)
            .order_by(ArticleModel.created_at.desc(), ArticleModel.id.desc())
            .limit(limit)
        )
        return [self._to_summary(row) for row in result]

    # ── Statistics ───────────────────────────────────────────────────

    async def get_totals(self) -> ArticleTotals:
        def count_status(status: ArticleStatus) -> ColumnElement:
            return func.sum(case((ArticleModel.status == status.value, 1), else_=0))

        row = (
            await self._session.execute(
                select(
                    func.count(ArticleModel.id).label("total_articles"),
                    count_status(ArticleStatus.PUBLISHED).label("published"),
                    count_status(ArticleStatus.DRAFT).label("draft"),
                    count_status(ArticleStatus.ARCHIVED).label("archived"),
                    func.sum(ArticleModel.views).label("total_views"),
                    func.avg(ArticleModel.rating).label("avg_rating"),
                )
            )
        ).one()
        # SUM/AVG over an empty table yield NULL
        return ArticleTotals(
            total_articles=row.total_articles or 0,
            published=int(row.published or 0),
            draft=int(row.draft or 0),
            archived=int(row.archived or 0),
            total_views=int(row.total_views or 0),
            avg_rating=round_score(row.avg_rating),
        )

    async def get_recently_created(self, limit: int) -> list[ArticleSummary]:
        result = await self._session.execute(
            select(*_SUMMARY_COLUMNS)
            .order_by(ArticleModel.created_at.desc(), ArticleModel.id.desc())
            .limit(limit)
        )
        return [self._to_summary(row) for row in result]

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _to_summary(row: Row, relevance: float | None = None) -> ArticleSummary:
        return ArticleSummary(
            id=row.id,
            title=row.title,
            slug=row.slug,
            excerpt=row.excerpt,
            status=ArticleStatus(row.status),
            type=ArticleType(row.type),
            priority=ArticlePriority(row.priority),
            views=row.views,
            rating=round_score(row.rating),
            rating_count=row.rating_count,
            created_at=row.created_at,
            relevance=relevance,
        )

    @staticmethod
    def _to_list_item(row: Row) -> ArticleListItem:
        return ArticleListItem(
            id=row.id,
            title=row.title,
            slug=row.slug,
            excerpt=row.excerpt,
            status=ArticleStatus(row.status),
            type=ArticleType(row.type),
            priority=ArticlePriority(row.priority),
            views=row.views,
            rating=round_score(row.rating),
            rating_count=row.rating_count,
            created_at=row.created_at,
            updated_at=row.updated_at,
            author_name=row.author_name,
            author_avatar=row.author_avatar,
            category_names=row.category_names,
        )
