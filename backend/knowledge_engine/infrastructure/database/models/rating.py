"""SQLAlchemy ORM model for per-user article ratings."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_engine.infrastructure.database.base import Base


class RatingModel(Base):
    """One row per (article, user) pair."""

    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    article_id: Mapped[int] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("article_id", "user_id", name="uq_ratings_article_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="range"),
    )

    def __repr__(self) -> str:
        return (
            f"<RatingModel(article_id={self.article_id}, "
            f"user_id={self.user_id}, rating={self.rating})>"
        )
