"""Engine lifecycle: open the database, hand out the article service, close the pool."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from knowledge_engine.application.services import ArticleService
from knowledge_engine.config import Settings, get_settings
from knowledge_engine.infrastructure.database import Database, SQLAlchemyUnitOfWork
from knowledge_engine.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


async def _ensure_database_exists(settings: Settings) -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Connects to the default ``postgres`` maintenance database, checks for the
    target database name, and issues ``CREATE DATABASE`` when missing.
    """
    if not settings.database_url.startswith(("postgresql://", "postgres://")):
        return

    import asyncpg

    parsed = urlparse(settings.database_url)
    db_name = parsed.path.lstrip("/")
    if not db_name:
        return

    maintenance_url = settings.database_url.rsplit("/", 1)[0] + "/postgres"

    try:
        conn = await asyncpg.connect(maintenance_url)
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
            else:
                logger.debug("Database '%s' already exists", db_name)
        finally:
            await conn.close()
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


@asynccontextmanager
async def engine_lifespan(settings: Settings | None = None) -> AsyncIterator[ArticleService]:
    """Open the shared database, optionally create the schema, yield the service.

    Usage:
        async with engine_lifespan() as articles:
            page = await articles.list_articles({"page": 1})
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if settings.auto_create_schema:
        await _ensure_database_exists(settings)

    database = Database(settings)
    database.open()
    try:
        if settings.auto_create_schema:
            await database.create_schema()
            logger.info("Schema ensured")

        service = ArticleService(
            lambda: SQLAlchemyUnitOfWork(database, settings.search_text_config)
        )
        logger.info("%s v%s ready (env=%s)", settings.app_title, settings.app_version, settings.app_env)
        yield service
    finally:
        await database.close()
