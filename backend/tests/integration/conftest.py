"""Shared fixtures: a throwaway SQLite file database with seeded users and categories."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from knowledge_engine.application.services import ArticleService
from knowledge_engine.config import Settings
from knowledge_engine.infrastructure.database import Database, SQLAlchemyUnitOfWork
from knowledge_engine.infrastructure.database.models import CategoryModel, UserModel

AUTHOR_ID = 1
EDITOR_ID = 2
READER_ID = 3

HARDWARE = 1
NETWORK = 2
RETIRED = 3


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncIterator[Database]:
    settings = Settings(_env_file=None, database_url=f"sqlite:///{tmp_path / 'kb.db'}")
    db = Database(settings)
    db.open()
    await db.create_schema()

    async with db.session() as session:
        session.add_all(
            [
                UserModel(id=AUTHOR_ID, name="Ana Author", email="ana@example.com", avatar="ana.png", department="IT"),
                UserModel(id=EDITOR_ID, name="Eddie Editor", email="eddie@example.com", role="admin"),
                UserModel(id=READER_ID, name="Rita Reader", email="rita@example.com"),
            ]
        )
        session.add_all(
            [
                CategoryModel(id=HARDWARE, name="Hardware", slug="hardware"),
                CategoryModel(id=NETWORK, name="Network", slug="network"),
                CategoryModel(id=RETIRED, name="Retired", slug="retired", is_active=False),
            ]
        )

    yield db
    await db.close()


@pytest.fixture
def service(database: Database) -> ArticleService:
    return ArticleService(lambda: SQLAlchemyUnitOfWork(database))


async def count_rows(database: Database, model, **filters) -> int:
    """Count rows of ``model`` matching simple equality filters."""
    async with database.session() as session:
        stmt = select(func.count()).select_from(model)
        for column, value in filters.items():
            stmt = stmt.where(getattr(model, column) == value)
        return await session.scalar(stmt)
