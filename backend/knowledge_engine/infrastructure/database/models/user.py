"""SQLAlchemy ORM model for the user directory.

The engine only reads this table for author/editor display fields;
accounts are managed elsewhere.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_engine.infrastructure.database.base import Base


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email='{self.email}')>"
