"""Integration tests for rating submission and the derived article score."""

import asyncio
import itertools
from decimal import Decimal

import pytest
import pytest_asyncio

from knowledge_engine.application.services import ArticleService
from knowledge_engine.domain.entities import RatingSummary
from knowledge_engine.domain.exceptions import EntityNotFoundError, InvalidInputError
from knowledge_engine.infrastructure.database.models import RatingModel

from conftest import AUTHOR_ID, EDITOR_ID, READER_ID, count_rows


@pytest_asyncio.fixture
async def article_id(service: ArticleService) -> int:
    article = await service.create_article(
        {"title": "Rated article", "content": "Body", "status": "published"}, author_id=AUTHOR_ID
    )
    return article.id


@pytest.mark.asyncio
async def test_two_raters_then_re_rate(service: ArticleService, article_id: int):
    await service.rate_article(article_id, AUTHOR_ID, 5)
    summary = await service.rate_article(article_id, EDITOR_ID, 3)
    assert summary == RatingSummary(rating=Decimal("4.00"), rating_count=2)

    summary = await service.rate_article(article_id, AUTHOR_ID, 1)
    assert summary == RatingSummary(rating=Decimal("2.00"), rating_count=2)

    article = await service.get_article(article_id)
    assert article.rating == Decimal("2.00")
    assert article.rating_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("order", list(itertools.permutations([(AUTHOR_ID, 5), (EDITOR_ID, 4), (READER_ID, 4)])))
async def test_rating_converges_regardless_of_order(service: ArticleService, article_id: int, order):
    for user_id, value in order:
        summary = await service.rate_article(article_id, user_id, value)

    assert summary == RatingSummary(rating=Decimal("4.33"), rating_count=3)


@pytest.mark.asyncio
async def test_re_rating_replaces_row(service: ArticleService, database, article_id: int):
    await service.rate_article(article_id, READER_ID, 2)
    await service.rate_article(article_id, READER_ID, 5)

    assert await count_rows(database, RatingModel, article_id=article_id) == 1
    assert (await service.get_article(article_id)).rating == Decimal("5.00")


@pytest.mark.asyncio
async def test_rating_missing_article_raises(service: ArticleService):
    with pytest.raises(EntityNotFoundError):
        await service.rate_article(999, READER_ID, 3)


@pytest.mark.asyncio
async def test_out_of_range_rating_leaves_aggregate_untouched(service: ArticleService, article_id: int):
    await service.rate_article(article_id, READER_ID, 3)

    with pytest.raises(InvalidInputError):
        await service.rate_article(article_id, AUTHOR_ID, 6)

    article = await service.get_article(article_id)
    assert (article.rating, article.rating_count) == (Decimal("3.00"), 1)


@pytest.mark.asyncio
async def test_simultaneous_ratings_from_one_user_keep_one_row(service: ArticleService, database, article_id: int):
    outcomes = await asyncio.gather(
        service.rate_article(article_id, READER_ID, 2),
        service.rate_article(article_id, READER_ID, 5),
    )

    assert [summary.rating_count for summary in outcomes] == [1, 1]
    assert await count_rows(database, RatingModel, article_id=article_id) == 1
    article = await service.get_article(article_id)
    assert article.rating_count == 1
    assert article.rating in (Decimal("2.00"), Decimal("5.00"))


@pytest.mark.asyncio
async def test_simultaneous_ratings_from_different_users_all_count(service: ArticleService, article_id: int):
    await asyncio.gather(
        service.rate_article(article_id, AUTHOR_ID, 1),
        service.rate_article(article_id, EDITOR_ID, 3),
        service.rate_article(article_id, READER_ID, 5),
    )

    article = await service.get_article(article_id)
    assert (article.rating, article.rating_count) == (Decimal("3.00"), 3)
