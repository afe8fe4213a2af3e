"""Read-side value objects: listing criteria, thin rows, pages, ratings and statistics."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from .article import ArticlePriority, ArticleStatus, ArticleType

_TWO_PLACES = Decimal("0.01")


def round_score(value: object) -> Decimal:
    """Normalise a driver numeric (float, Decimal, int or None) to a two-decimal score."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


class SortField(str, Enum):
    """Columns a listing may be ordered by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    VIEWS = "views"
    RATING = "rating"
    PRIORITY = "priority"
    TYPE = "type"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ListingCriteria:
    """Filters for the general article listing.

    When ``include_all`` is False only published articles are visible and
    ``status`` is ignored.
    """

    page: int = 1
    limit: int = 10
    search: str | None = None
    category_id: int | None = None
    type: ArticleType | None = None
    priority: ArticlePriority | None = None
    status: ArticleStatus | None = None
    author_id: int | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    include_all: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def effective_status(self) -> ArticleStatus | None:
        if not self.include_all:
            return ArticleStatus.PUBLISHED
        return self.status


@dataclass
class ArticleSummary:
    """Compact projection used by search, popular, recent and dashboard lists."""

    id: int
    title: str
    slug: str
    excerpt: str = ""
    status: ArticleStatus | None = None
    type: ArticleType | None = None
    priority: ArticlePriority | None = None
    views: int = 0
    rating: Decimal = Decimal("0")
    rating_count: int = 0
    created_at: datetime | None = None
    relevance: float | None = None


@dataclass
class ArticleListItem:
    """One thin row of the paginated listing (no steps, tags or images)."""

    id: int
    title: str
    slug: str
    excerpt: str
    status: ArticleStatus
    type: ArticleType
    priority: ArticlePriority
    views: int
    rating: Decimal
    rating_count: int
    created_at: datetime
    updated_at: datetime
    author_name: str | None = None
    author_avatar: str | None = None
    category_names: str | None = None


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


@dataclass
class ArticlePage:
    data: list[ArticleListItem]
    pagination: Pagination


@dataclass
class RatingSummary:
    """Recomputed aggregate after a rating submission; ``rating`` has two decimal places."""

    rating: Decimal
    rating_count: int


@dataclass
class ArticleTotals:
    total_articles: int = 0
    published: int = 0
    draft: int = 0
    archived: int = 0
    total_views: int = 0
    avg_rating: Decimal = Decimal("0.00")


@dataclass
class ArticleStats:
    """Dashboard statistics across all articles regardless of status."""

    total_articles: int
    published: int
    draft: int
    archived: int
    total_views: int
    avg_rating: Decimal
    recent: list[ArticleSummary] = field(default_factory=list)

    @classmethod
    def merge(cls, totals: ArticleTotals, recent: list[ArticleSummary]) -> "ArticleStats":
        return cls(
            total_articles=totals.total_articles,
            published=totals.published,
            draft=totals.draft,
            archived=totals.archived,
            total_views=totals.total_views,
            avg_rating=totals.avg_rating,
            recent=recent,
        )
