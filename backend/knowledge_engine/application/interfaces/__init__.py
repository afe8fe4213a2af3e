from .article_repository import ArticleRepository
from .article_query_repository import ArticleQueryRepository
from .rating_repository import RatingRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "ArticleRepository",
    "ArticleQueryRepository",
    "RatingRepository",
    "UnitOfWork",
]
