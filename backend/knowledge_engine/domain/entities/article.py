"""Domain entities for the article aggregate: pure Python, no framework dependencies."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ArticleStatus(str, Enum):
    """Publication lifecycle of an article."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ArticleType(str, Enum):
    TROUBLESHOOTING = "troubleshooting"
    GUIDE = "guide"
    REFERENCE = "reference"
    FAQ = "faq"


class ArticlePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class AuthorInfo:
    """Display fields joined from the user directory."""

    id: int
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    department: str | None = None


@dataclass
class CategoryRef:
    id: int
    name: str
    slug: str
    icon: str | None = None
    color: str | None = None


@dataclass
class Step:
    """One ordered resolution step of an article."""

    title: str
    description: str
    order: int


@dataclass
class Image:
    url: str
    caption: str | None = None
    alt_text: str | None = None
    order: int = 0
    id: int | None = None


@dataclass
class Attachment:
    name: str
    url: str
    mime_type: str | None = None
    size: int | None = None
    id: int | None = None


@dataclass
class RelatedArticleRef:
    id: int
    title: str
    slug: str
    excerpt: str


@dataclass
class Article:
    """The full article aggregate: primary record plus every owned and related collection.

    ``rating`` and ``rating_count`` are derived from the ratings table and are
    only ever written by the rating recompute routine.
    """

    id: int
    title: str
    slug: str
    content: str
    excerpt: str
    status: ArticleStatus
    type: ArticleType
    priority: ArticlePriority
    views: int
    rating: Decimal
    rating_count: int
    created_by: int | None
    updated_by: int | None
    created_at: datetime
    updated_at: datetime
    author: AuthorInfo | None = None
    updater_name: str | None = None
    categories: list[CategoryRef] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    systems: list[str] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    related_articles: list[RelatedArticleRef] = field(default_factory=list)


# ── Write-side values ────────────────────────────────────────────────


@dataclass
class StepDraft:
    """A step as supplied by the caller; ``order`` defaults to its position."""

    title: str
    description: str
    order: int | None = None


@dataclass
class ImageDraft:
    """Stored-file descriptor for an image produced by the upload layer."""

    url: str
    caption: str | None = None
    alt_text: str | None = None
    order: int | None = None


@dataclass
class AttachmentDraft:
    """Stored-file descriptor for an attachment produced by the upload layer."""

    name: str
    url: str
    mime_type: str | None = None
    size: int | None = None


@dataclass
class NewArticle:
    """Everything needed to create an article aggregate in one transaction."""

    title: str
    content: str
    excerpt: str = ""
    status: ArticleStatus = ArticleStatus.DRAFT
    type: ArticleType = ArticleType.GUIDE
    priority: ArticlePriority = ArticlePriority.MEDIUM
    category_ids: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    systems: list[str] = field(default_factory=list)
    steps: list[StepDraft] = field(default_factory=list)
    images: list[ImageDraft] = field(default_factory=list)
    attachments: list[AttachmentDraft] = field(default_factory=list)


@dataclass
class ArticlePatch:
    """Partial update of an article.

    Scalars: ``None`` means "leave unchanged".
    Collections are tri-state: ``None`` leaves the rows untouched, ``[]``
    clears them, a non-empty list replaces them.
    """

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    status: ArticleStatus | None = None
    type: ArticleType | None = None
    priority: ArticlePriority | None = None
    category_ids: list[int] | None = None
    tags: list[str] | None = None
    systems: list[str] | None = None
    steps: list[StepDraft] | None = None
    images: list[ImageDraft] | None = None
    attachments: list[AttachmentDraft] | None = None

    def scalar_changes(self) -> dict[str, object]:
        """Return only the scalar columns the caller actually supplied."""
        changes: dict[str, object] = {}
        for name in ("title", "content", "excerpt", "status", "type", "priority"):
            value = getattr(self, name)
            if value is not None:
                changes[name] = value.value if isinstance(value, Enum) else value
        return changes

    @property
    def is_empty(self) -> bool:
        return not self.scalar_changes() and all(
            getattr(self, name) is None
            for name in ("category_ids", "tags", "systems", "steps", "images", "attachments")
        )
