"""Dialect-aware SQL expressions for full-text relevance and string aggregation.

PostgreSQL gets real text search (``to_tsvector`` / ``plainto_tsquery`` /
``ts_rank``) with title, excerpt and content weighted A, B and C. Every other
dialect (SQLite in tests, MySQL) falls back to a portable score: for each
search term, a case-insensitive substring hit in the title scores 3, in the
excerpt 2 and in the content 1.
"""

from sqlalchemy import ColumnElement, Float, String, case, cast, distinct, func, literal, literal_column
from sqlalchemy.dialects.postgresql import REGCONFIG

from knowledge_engine.infrastructure.database.models import ArticleModel

_FALLBACK_WEIGHTS = (
    (ArticleModel.title, 3),
    (ArticleModel.excerpt, 2),
    (ArticleModel.content, 1),
)


def search_terms(keyword: str) -> list[str]:
    """Split a keyword into lowercase terms, dropping duplicates but keeping order."""
    seen: list[str] = []
    for term in keyword.lower().split():
        if term not in seen:
            seen.append(term)
    return seen


def _regconfig(text_config: str) -> ColumnElement:
    return cast(literal(text_config), REGCONFIG)


def _ts_document(text_config: str) -> ColumnElement:
    def weighted(column: ColumnElement, weight: str) -> ColumnElement:
        return func.setweight(
            func.to_tsvector(_regconfig(text_config), func.coalesce(column, "")),
            literal_column(f"'{weight}'"),
        )

    return (
        weighted(ArticleModel.title, "A")
        .op("||")(weighted(ArticleModel.excerpt, "B"))
        .op("||")(weighted(ArticleModel.content, "C"))
    )


def _ts_query(text_config: str, keyword: str) -> ColumnElement:
    return func.plainto_tsquery(_regconfig(text_config), keyword)


def _fallback_score(keyword: str) -> ColumnElement:
    parts = [
        case((func.lower(column, type_=String()).contains(term, autoescape=True), weight), else_=0)
        for term in search_terms(keyword)
        for column, weight in _FALLBACK_WEIGHTS
    ]
    if not parts:
        return literal(0)
    score = parts[0]
    for part in parts[1:]:
        score = score + part
    return score


def relevance(dialect_name: str, keyword: str, text_config: str = "simple") -> ColumnElement:
    """Score how well an article's title, excerpt and content match ``keyword``."""
    if dialect_name == "postgresql":
        return func.ts_rank(_ts_document(text_config), _ts_query(text_config, keyword))
    return cast(_fallback_score(keyword), Float)


def text_match(dialect_name: str, keyword: str, text_config: str = "simple") -> ColumnElement[bool]:
    """Predicate that is true when ``relevance`` would be positive."""
    if dialect_name == "postgresql":
        return _ts_document(text_config).op("@@", is_comparison=True)(_ts_query(text_config, keyword))
    return _fallback_score(keyword) > 0


def comma_join(dialect_name: str, column: ColumnElement) -> ColumnElement:
    """Aggregate distinct values of ``column`` into one comma-separated string."""
    if dialect_name == "postgresql":
        return func.string_agg(distinct(column), literal(","))
    # SQLite and MySQL both separate group_concat values with a comma by default
    return func.group_concat(distinct(column))
