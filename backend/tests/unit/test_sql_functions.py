"""Unit tests for the dialect-aware relevance and aggregation expressions."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite

from knowledge_engine.infrastructure.database.models import ArticleModel, CategoryModel
from knowledge_engine.infrastructure.database.sql_functions import (
    comma_join,
    relevance,
    search_terms,
    text_match,
)


def _compile(statement, dialect) -> str:
    return str(statement.compile(dialect=dialect)).lower()


def test_search_terms_lowercases_and_deduplicates():
    assert search_terms("VPN  vpn Timeout") == ["vpn", "timeout"]
    assert search_terms("   ") == []


def test_postgresql_relevance_uses_weighted_text_search():
    sql = _compile(select(relevance("postgresql", "printer", "english")), postgresql.dialect())
    assert "ts_rank" in sql
    assert "plainto_tsquery" in sql
    assert "setweight" in sql
    assert "regconfig" in sql
    for weight in ("'a'", "'b'", "'c'"):
        assert weight in sql


def test_postgresql_text_match_uses_match_operator():
    sql = _compile(select(ArticleModel.id).where(text_match("postgresql", "printer")), postgresql.dialect())
    assert "@@" in sql


def test_fallback_relevance_scores_each_term_per_column():
    sql = _compile(select(relevance("sqlite", "printer offline")), sqlite.dialect())
    assert "ts_rank" not in sql
    assert sql.count("case when") == 6
    assert "lower(articles.title)" in sql


def test_comma_join_per_dialect():
    assert "string_agg" in _compile(select(comma_join("postgresql", CategoryModel.name)), postgresql.dialect())
    assert "group_concat" in _compile(select(comma_join("sqlite", CategoryModel.name)), sqlite.dialect())
