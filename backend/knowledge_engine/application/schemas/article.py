"""Pydantic DTOs (Data Transfer Objects) for the Article feature."""

from pydantic import BaseModel, Field, field_validator

from knowledge_engine.domain.entities import (
    ArticlePatch,
    ArticlePriority,
    ArticleStatus,
    ArticleType,
    AttachmentDraft,
    ImageDraft,
    ListingCriteria,
    NewArticle,
    SortField,
    SortOrder,
    StepDraft,
)


class StepInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    order: int | None = Field(None, ge=0)

    def to_domain(self) -> StepDraft:
        return StepDraft(title=self.title, description=self.description, order=self.order)


class ImageInput(BaseModel):
    """Stored-file descriptor for an image, as produced by the upload layer."""

    url: str = Field(..., min_length=1, max_length=500)
    caption: str | None = Field(None, max_length=255)
    alt_text: str | None = Field(None, max_length=255)
    order: int | None = Field(None, ge=0)

    def to_domain(self) -> ImageDraft:
        return ImageDraft(url=self.url, caption=self.caption, alt_text=self.alt_text, order=self.order)


class AttachmentInput(BaseModel):
    """Stored-file descriptor for an attachment, as produced by the upload layer."""

    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=500)
    mime_type: str | None = Field(None, max_length=100)
    size: int | None = Field(None, ge=0)

    def to_domain(self) -> AttachmentDraft:
        return AttachmentDraft(name=self.name, url=self.url, mime_type=self.mime_type, size=self.size)


class ArticleCreate(BaseModel):
    """Schema for creating a new article together with its collections."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Printer Not Detected"])
    content: str = Field(..., min_length=1)
    excerpt: str = ""
    status: ArticleStatus = ArticleStatus.DRAFT
    type: ArticleType = ArticleType.GUIDE
    priority: ArticlePriority = ArticlePriority.MEDIUM
    category_ids: list[int] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    systems: list[str] = Field(default_factory=list)
    steps: list[StepInput] = Field(default_factory=list)
    images: list[ImageInput] = Field(default_factory=list)
    attachments: list[AttachmentInput] = Field(default_factory=list)

    def to_domain(self) -> NewArticle:
        return NewArticle(
            title=self.title,
            content=self.content,
            excerpt=self.excerpt,
            status=self.status,
            type=self.type,
            priority=self.priority,
            category_ids=list(self.category_ids),
            tags=list(self.tags),
            systems=list(self.systems),
            steps=[s.to_domain() for s in self.steps],
            images=[i.to_domain() for i in self.images],
            attachments=[a.to_domain() for a in self.attachments],
        )


class ArticleUpdate(BaseModel):
    """Schema for a partial update; every field optional.

    Omitting a collection leaves it untouched; sending ``[]`` clears it.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    excerpt: str | None = None
    status: ArticleStatus | None = None
    type: ArticleType | None = None
    priority: ArticlePriority | None = None
    category_ids: list[int] | None = None
    tags: list[str] | None = None
    systems: list[str] | None = None
    steps: list[StepInput] | None = None
    images: list[ImageInput] | None = None
    attachments: list[AttachmentInput] | None = None

    def to_domain(self) -> ArticlePatch:
        def convert(items):
            return None if items is None else [item.to_domain() for item in items]

        return ArticlePatch(
            title=self.title,
            content=self.content,
            excerpt=self.excerpt,
            status=self.status,
            type=self.type,
            priority=self.priority,
            category_ids=None if self.category_ids is None else list(self.category_ids),
            tags=None if self.tags is None else list(self.tags),
            systems=None if self.systems is None else list(self.systems),
            steps=convert(self.steps),
            images=convert(self.images),
            attachments=convert(self.attachments),
        )


class ArticleListQuery(BaseModel):
    """Listing filters. ``include_all`` is only set for privileged callers."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: str | None = None
    category_id: int | None = None
    type: ArticleType | None = None
    priority: ArticlePriority | None = None
    status: ArticleStatus | None = None
    author_id: int | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    include_all: bool = False

    @field_validator("sort_order", mode="before")
    @classmethod
    def _lowercase_sort_order(cls, value):
        return value.lower() if isinstance(value, str) else value

    def to_domain(self) -> ListingCriteria:
        search = self.search.strip() if self.search else None
        return ListingCriteria(
            page=self.page,
            limit=self.limit,
            search=search or None,
            category_id=self.category_id,
            type=self.type,
            priority=self.priority,
            status=self.status,
            author_id=self.author_id,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            include_all=self.include_all,
        )

