from .article import (
    Article,
    ArticlePatch,
    ArticlePriority,
    ArticleStatus,
    ArticleType,
    Attachment,
    AttachmentDraft,
    AuthorInfo,
    CategoryRef,
    Image,
    ImageDraft,
    NewArticle,
    RelatedArticleRef,
    Step,
    StepDraft,
)
from .listing import (
    ArticleListItem,
    ArticlePage,
    ArticleStats,
    ArticleSummary,
    ArticleTotals,
    ListingCriteria,
    Pagination,
    RatingSummary,
    SortField,
    SortOrder,
    round_score,
)

__all__ = [
    "Article",
    "ArticlePatch",
    "ArticlePriority",
    "ArticleStatus",
    "ArticleType",
    "Attachment",
    "AttachmentDraft",
    "AuthorInfo",
    "CategoryRef",
    "Image",
    "ImageDraft",
    "NewArticle",
    "RelatedArticleRef",
    "Step",
    "StepDraft",
    "ArticleListItem",
    "ArticlePage",
    "ArticleStats",
    "ArticleSummary",
    "ArticleTotals",
    "ListingCriteria",
    "Pagination",
    "RatingSummary",
    "SortField",
    "SortOrder",
    "round_score",
]
