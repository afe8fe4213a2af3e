"""Integration tests for listing, search, popular/recent shortlists and dashboard stats."""

import math
from decimal import Decimal

import pytest

from knowledge_engine.application.services import ArticleService
from knowledge_engine.domain.entities import ArticleStatus

from conftest import AUTHOR_ID, EDITOR_ID, HARDWARE, NETWORK


async def _publish(service: ArticleService, title: str, author_id: int = AUTHOR_ID, **fields):
    payload = {"title": title, "content": f"Body of {title}", "status": "published"}
    payload.update(fields)
    return await service.create_article(payload, author_id=author_id)


@pytest.mark.asyncio
async def test_draft_becomes_visible_once_published(service: ArticleService):
    draft = await service.create_article(
        {"title": "Printer Not Detected", "content": "Check the USB cable."}, author_id=AUTHOR_ID
    )

    page = await service.list_articles({})
    assert draft.id not in [row.id for row in page.data]

    await service.update_article(draft.id, {"status": "published"}, editor_id=EDITOR_ID)

    page = await service.list_articles({})
    assert draft.id in [row.id for row in page.data]


@pytest.mark.asyncio
async def test_unprivileged_listing_ignores_status_filter(service: ArticleService):
    await _publish(service, "Visible")
    await service.create_article({"title": "Hidden draft", "content": "x"}, author_id=AUTHOR_ID)
    await service.create_article({"title": "Hidden archive", "content": "x", "status": "archived"}, author_id=AUTHOR_ID)

    for status in (None, "draft", "archived"):
        page = await service.list_articles({"status": status, "limit": 100})
        assert {row.status for row in page.data} == {ArticleStatus.PUBLISHED}
        assert page.pagination.total == 1


@pytest.mark.asyncio
async def test_privileged_listing_honours_status_filter(service: ArticleService):
    await _publish(service, "Visible")
    await service.create_article({"title": "Hidden draft", "content": "x"}, author_id=AUTHOR_ID)

    everything = await service.list_articles({"include_all": True})
    drafts = await service.list_articles({"include_all": True, "status": "draft"})

    assert everything.pagination.total == 2
    assert [row.title for row in drafts.data] == ["Hidden draft"]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 3, 4, 10])
async def test_pagination_is_consistent(service: ArticleService, limit: int):
    for i in range(7):
        await _publish(service, f"Network guide {i}", category_ids=[NETWORK])
    await _publish(service, "Unrelated hardware note", category_ids=[HARDWARE])

    filters = {"category_id": NETWORK, "limit": limit}
    first = await service.list_articles({**filters, "page": 1})
    total, pages = first.pagination.total, first.pagination.pages

    seen = []
    for page_no in range(1, pages + 2):
        page = await service.list_articles({**filters, "page": page_no})
        seen.extend(row.id for row in page.data)

    assert total == 7
    assert pages == math.ceil(total / limit)
    assert len(seen) == total
    assert len(set(seen)) == total


@pytest.mark.asyncio
async def test_listing_rows_carry_author_and_category_names(service: ArticleService):
    await _publish(service, "Wired dock", category_ids=[HARDWARE, NETWORK])

    row = (await service.list_articles({})).data[0]

    assert row.author_name == "Ana Author"
    assert row.author_avatar == "ana.png"
    assert sorted(row.category_names.split(",")) == ["Hardware", "Network"]


@pytest.mark.asyncio
async def test_listing_filters_combine(service: ArticleService):
    await _publish(service, "Guide low", type="guide", priority="low")
    await _publish(service, "FAQ low", type="faq", priority="low")
    await _publish(service, "FAQ high", type="faq", priority="high", author_id=EDITOR_ID)

    faq = await service.list_articles({"type": "faq"})
    faq_low = await service.list_articles({"type": "faq", "priority": "low"})
    mine = await service.list_articles({"author_id": EDITOR_ID})

    assert {row.title for row in faq.data} == {"FAQ low", "FAQ high"}
    assert [row.title for row in faq_low.data] == ["FAQ low"]
    assert [row.title for row in mine.data] == ["FAQ high"]


@pytest.mark.asyncio
async def test_listing_search_matches_text_or_tag(service: ArticleService):
    await _publish(service, "Toner smudges", content="Replace the drum")
    await _publish(service, "Paper jam", tags=["Toner"])
    await _publish(service, "VPN timeout")

    page = await service.list_articles({"search": "toner"})

    assert {row.title for row in page.data} == {"Toner smudges", "Paper jam"}


@pytest.mark.asyncio
async def test_listing_sort_by_priority_uses_severity(service: ArticleService):
    for priority in ("medium", "critical", "low", "high"):
        await _publish(service, f"Issue {priority}", priority=priority)

    asc = await service.list_articles({"sort_by": "priority", "sort_order": "ASC"})
    desc = await service.list_articles({"sort_by": "priority", "sort_order": "desc"})

    assert [row.priority.value for row in asc.data] == ["low", "medium", "high", "critical"]
    assert [row.priority.value for row in desc.data] == ["critical", "high", "medium", "low"]


@pytest.mark.asyncio
async def test_search_scenario_respects_publication(service: ArticleService):
    published = await _publish(service, "Printer offline after update")
    await service.create_article({"title": "Printer draft notes", "content": "printer"}, author_id=AUTHOR_ID)

    results = await service.search("printer", 20)

    assert [r.id for r in results] == [published.id]
    assert results[0].relevance > 0


@pytest.mark.asyncio
async def test_search_ranks_title_hits_above_content_hits(service: ArticleService):
    body_only = await _publish(service, "Spooler restart", content="If the printer hangs, restart it.")
    in_title = await _publish(service, "Printer hangs", content="Restart it.")

    results = await service.search("printer")

    assert [r.id for r in results] == [in_title.id, body_only.id]
    assert results[0].relevance > results[1].relevance


@pytest.mark.asyncio
async def test_search_without_match_is_empty(service: ArticleService):
    await _publish(service, "Printer offline")
    assert await service.search("bluetooth") == []


@pytest.mark.asyncio
async def test_search_honours_limit(service: ArticleService):
    for i in range(4):
        await _publish(service, f"Printer issue {i}")
    assert len(await service.search("printer", 2)) == 2


@pytest.mark.asyncio
async def test_popular_orders_by_views_then_rating(service: ArticleService):
    quiet = await _publish(service, "Quiet")
    busy = await _publish(service, "Busy")
    liked = await _publish(service, "Liked")
    await service.create_article({"title": "Busy draft", "content": "x"}, author_id=AUTHOR_ID)

    for _ in range(3):
        await service.increment_views(busy.id)
    await service.increment_views(liked.id)
    await service.increment_views(quiet.id)
    await service.rate_article(liked.id, AUTHOR_ID, 5)

    popular = await service.get_popular()

    assert [a.id for a in popular] == [busy.id, liked.id, quiet.id]


@pytest.mark.asyncio
async def test_recent_lists_newest_published_first(service: ArticleService):
    created = [await _publish(service, f"Note {i}") for i in range(7)]
    await service.create_article({"title": "Unpublished", "content": "x"}, author_id=AUTHOR_ID)

    recent = await service.get_recent()

    assert [a.id for a in recent] == [a.id for a in reversed(created)][:5]


@pytest.mark.asyncio
async def test_stats_cover_every_status(service: ArticleService):
    first = await _publish(service, "Published one")
    await _publish(service, "Published two")
    await service.create_article({"title": "A draft", "content": "x"}, author_id=AUTHOR_ID)
    archived = await service.create_article(
        {"title": "Old", "content": "x", "status": "archived"}, author_id=AUTHOR_ID
    )
    await service.increment_views(first.id)
    await service.increment_views(archived.id)
    await service.rate_article(first.id, AUTHOR_ID, 4)

    stats = await service.get_stats()

    assert stats.total_articles == 4
    assert (stats.published, stats.draft, stats.archived) == (2, 1, 1)
    assert stats.total_views == 2
    assert stats.avg_rating == Decimal("1.00")
    assert [a.id for a in stats.recent][0] == archived.id
    assert len(stats.recent) == 4


@pytest.mark.asyncio
async def test_stats_on_empty_store(service: ArticleService):
    stats = await service.get_stats()

    assert stats.total_articles == 0
    assert stats.total_views == 0
    assert stats.avg_rating == Decimal("0.00")
    assert stats.recent == []
