"""Concrete article aggregate repository backed by SQLAlchemy.

Writes span the primary ``articles`` row and its owned collections; reads
reassemble them into one ``Article``. Every statement runs on the session the
repository was built with, so the caller's unit of work decides the
transaction boundary.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Row, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from knowledge_engine.application.interfaces import ArticleRepository
from knowledge_engine.domain.entities import (
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
    round_score,
)
from knowledge_engine.domain.slug import generate_slug
from knowledge_engine.infrastructure.database.base import Base
from knowledge_engine.infrastructure.database.models import (
    ArticleCategoryModel,
    ArticleImageModel,
    ArticleModel,
    ArticleStepModel,
    ArticleSystemModel,
    ArticleTagModel,
    AttachmentModel,
    CategoryModel,
    RelatedArticleModel,
    UserModel,
)

logger = logging.getLogger(__name__)


# ── Owned collection row builders ────────────────────────────────────


def _category_rows(article_id: int, category_ids: Sequence[int]) -> list[dict[str, Any]]:
    # (article_id, category_id) is unique, so repeated ids collapse to one row
    return [
        {"article_id": article_id, "category_id": category_id}
        for category_id in dict.fromkeys(category_ids)
    ]


def _tag_rows(article_id: int, tags: Sequence[str]) -> list[dict[str, Any]]:
    return [{"article_id": article_id, "tag": tag} for tag in tags]


def _system_rows(article_id: int, systems: Sequence[str]) -> list[dict[str, Any]]:
    return [{"article_id": article_id, "system": system} for system in systems]


def _step_rows(article_id: int, steps: Sequence[StepDraft]) -> list[dict[str, Any]]:
    return [
        {
            "article_id": article_id,
            "title": step.title,
            "description": step.description,
            "sort_order": step.order if step.order is not None else position,
        }
        for position, step in enumerate(steps, start=1)
    ]


def _image_rows(article_id: int, images: Sequence[ImageDraft]) -> list[dict[str, Any]]:
    return [
        {
            "article_id": article_id,
            "url": image.url,
            "caption": image.caption,
            "alt_text": image.alt_text,
            "sort_order": image.order if image.order is not None else position,
        }
        for position, image in enumerate(images, start=1)
    ]


def _attachment_rows(article_id: int, attachments: Sequence[AttachmentDraft]) -> list[dict[str, Any]]:
    return [
        {
            "article_id": article_id,
            "name": attachment.name,
            "url": attachment.url,
            "mime_type": attachment.mime_type,
            "size": attachment.size,
        }
        for attachment in attachments
    ]


# Attribute name on NewArticle / ArticlePatch → (table, row builder)
_COLLECTIONS: tuple[tuple[str, type[Base], Callable[[int, Sequence], list[dict[str, Any]]]], ...] = (
    ("category_ids", ArticleCategoryModel, _category_rows),
    ("tags", ArticleTagModel, _tag_rows),
    ("systems", ArticleSystemModel, _system_rows),
    ("steps", ArticleStepModel, _step_rows),
    ("images", ArticleImageModel, _image_rows),
    ("attachments", AttachmentModel, _attachment_rows),
)


class SQLAlchemyArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    # ── Reads ────────────────────────────────────────────────────────

    async def get_by_id(self, article_id: int) -> Article | None:
        author = aliased(UserModel)
        editor = aliased(UserModel)
        stmt = (
            select(
                ArticleModel,
                author.name.label("author_name"),
                author.email.label("author_email"),
                author.avatar.label("author_avatar"),
                author.department.label("author_department"),
                editor.name.label("updater_name"),
            )
            .outerjoin(author, author.id == ArticleModel.created_by)
            .outerjoin(editor, editor.id == ArticleModel.updated_by)
            .where(ArticleModel.id == article_id)
            .execution_options(populate_existing=True)
        )
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None

        article = self._to_entity(row)
        article.categories = await self._load_categories(article_id)
        article.tags = await self._load_strings(ArticleTagModel.tag, ArticleTagModel, article_id)
        article.systems = await self._load_strings(ArticleSystemModel.system, ArticleSystemModel, article_id)
        article.steps = await self._load_steps(article_id)
        article.images = await self._load_images(article_id)
        article.attachments = await self._load_attachments(article_id)
        article.related_articles = await self._load_related(article_id)
        return article

    async def get_by_slug(self, slug: str) -> Article | None:
        article_id = await self._session.scalar(
            select(ArticleModel.id).where(ArticleModel.slug == slug)
        )
        if article_id is None:
            return None
        return await self.get_by_id(article_id)

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, draft: NewArticle, author_id: int) -> Article:
        now = datetime.now(timezone.utc)
        model = ArticleModel(
            title=draft.title,
            slug=generate_slug(draft.title),
            content=draft.content,
            excerpt=draft.excerpt or "",
            status=draft.status.value,
            type=draft.type.value,
            priority=draft.priority.value,
            created_by=author_id,
            created_at=now,
            updated_at=now,
        )
        self._session.add(model)
        await self._session.flush()

        for name, table, build_rows in _COLLECTIONS:
            values = getattr(draft, name)
            if values:
                await self._insert_rows(table, build_rows(model.id, values))

        logger.info("Created article %s (slug=%s) by user %s", model.id, model.slug, author_id)
        return await self.get_by_id(model.id)

    async def update(self, article_id: int, patch: ArticlePatch, editor_id: int) -> Article | None:
        exists = await self._session.scalar(
            select(ArticleModel.id).where(ArticleModel.id == article_id).with_for_update()
        )
        if exists is None:
            return None

        if patch.is_empty:
            logger.debug("Empty patch for article %s; nothing to write", article_id)
            return await self.get_by_id(article_id)

        changes = patch.scalar_changes()
        if changes:
            if "title" in changes:
                changes["slug"] = generate_slug(changes["title"])
            changes["updated_by"] = editor_id
            changes["updated_at"] = datetime.now(timezone.utc)
            await self._session.execute(
                update(ArticleModel)
                .where(ArticleModel.id == article_id)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )

        replaced: list[str] = []
        for name, table, build_rows in _COLLECTIONS:
            values = getattr(patch, name)
            if values is None:
                continue
            await self._session.execute(
                delete(table)
                .where(table.article_id == article_id)
                .execution_options(synchronize_session=False)
            )
            if values:
                await self._insert_rows(table, build_rows(article_id, values))
            replaced.append(name)

        logger.info(
            "Updated article %s by user %s (fields=%s, collections=%s)",
            article_id,
            editor_id,
            sorted(changes) or "-",
            replaced or "-",
        )
        return await self.get_by_id(article_id)

    async def delete(self, article_id: int) -> bool:
        # Owned rows go with the article through ON DELETE CASCADE
        result = await self._session.execute(
            delete(ArticleModel)
            .where(ArticleModel.id == article_id)
            .execution_options(synchronize_session=False)
        )
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted article %s", article_id)
        return deleted

    async def increment_views(self, article_id: int) -> bool:
        result = await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id)
            .values(views=ArticleModel.views + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    # ── Helpers ──────────────────────────────────────────────────────

    async def _insert_rows(self, table: type[Base], rows: list[dict[str, Any]]) -> None:
        if rows:
            await self._session.execute(insert(table), rows)

    async def _load_categories(self, article_id: int) -> list[CategoryRef]:
        result = await self._session.execute(
            select(
                CategoryModel.id,
                CategoryModel.name,
                CategoryModel.slug,
                CategoryModel.icon,
                CategoryModel.color,
            )
            .join(ArticleCategoryModel, ArticleCategoryModel.category_id == CategoryModel.id)
            .where(
                ArticleCategoryModel.article_id == article_id,
                CategoryModel.is_active.is_(True),
            )
            .order_by(ArticleCategoryModel.id)
        )
        return [
            CategoryRef(id=r.id, name=r.name, slug=r.slug, icon=r.icon, color=r.color)
            for r in result
        ]

    async def _load_strings(self, column, table: type[Base], article_id: int) -> list[str]:
        result = await self._session.execute(
            select(column).where(table.article_id == article_id).order_by(table.id)
        )
        return list(result.scalars().all())

    async def _load_steps(self, article_id: int) -> list[Step]:
        result = await self._session.execute(
            select(
                ArticleStepModel.title,
                ArticleStepModel.description,
                ArticleStepModel.sort_order,
            )
            .where(ArticleStepModel.article_id == article_id)
            .order_by(ArticleStepModel.sort_order, ArticleStepModel.id)
        )
        return [
            Step(title=r.title, description=r.description, order=r.sort_order)
            for r in result
        ]

    async def _load_images(self, article_id: int) -> list[Image]:
        result = await self._session.execute(
            select(
                ArticleImageModel.id,
                ArticleImageModel.url,
                ArticleImageModel.caption,
                ArticleImageModel.alt_text,
                ArticleImageModel.sort_order,
            )
            .where(ArticleImageModel.article_id == article_id)
            .order_by(ArticleImageModel.sort_order, ArticleImageModel.id)
        )
        return [
            Image(id=r.id, url=r.url, caption=r.caption, alt_text=r.alt_text, order=r.sort_order)
            for r in result
        ]

    async def _load_attachments(self, article_id: int) -> list[Attachment]:
        result = await self._session.execute(
            select(
                AttachmentModel.id,
                AttachmentModel.name,
                AttachmentModel.url,
                AttachmentModel.mime_type,
                AttachmentModel.size,
            )
            .where(AttachmentModel.article_id == article_id)
            .order_by(AttachmentModel.id)
        )
        return [
            Attachment(id=r.id, name=r.name, url=r.url, mime_type=r.mime_type, size=r.size)
            for r in result
        ]

    async def _load_related(self, article_id: int) -> list[RelatedArticleRef]:
        result = await self._session.execute(
            select(ArticleModel.id, ArticleModel.title, ArticleModel.slug, ArticleModel.excerpt)
            .join(RelatedArticleModel, RelatedArticleModel.related_article_id == ArticleModel.id)
            .where(
                RelatedArticleModel.article_id == article_id,
                ArticleModel.status == ArticleStatus.PUBLISHED.value,
            )
            .order_by(ArticleModel.id)
        )
        return [
            RelatedArticleRef(id=r.id, title=r.title, slug=r.slug, excerpt=r.excerpt)
            for r in result
        ]

    def _to_entity(self, row: Row) -> Article:
        """Map the primary row (article + joined user columns) → domain entity."""
        model: ArticleModel = row[0]
        author = None
        if model.created_by is not None:
            author = AuthorInfo(
                id=model.created_by,
                name=row.author_name,
                email=row.author_email,
                avatar=row.author_avatar,
                department=row.author_department,
            )
        return Article(
            id=model.id,
            title=model.title,
            slug=model.slug,
            content=model.content,
            excerpt=model.excerpt,
            status=ArticleStatus(model.status),
            type=ArticleType(model.type),
            priority=ArticlePriority(model.priority),
            views=model.views,
            rating=round_score(model.rating),
            rating_count=model.rating_count,
            created_by=model.created_by,
            updated_by=model.updated_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
            author=author,
            updater_name=row.updater_name,
        )
