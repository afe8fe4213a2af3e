from .article_repository import SQLAlchemyArticleRepository
from .article_query_repository import SQLAlchemyArticleQueryRepository
from .rating_repository import SQLAlchemyRatingRepository

__all__ = [
    "SQLAlchemyArticleRepository",
    "SQLAlchemyArticleQueryRepository",
    "SQLAlchemyRatingRepository",
]
