from .article_service import ArticleService, UnitOfWorkFactory

__all__ = [
    "ArticleService",
    "UnitOfWorkFactory",
]
