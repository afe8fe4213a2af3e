from .base import Base
from .session import Database, translate_integrity_error
from .unit_of_work import SQLAlchemyUnitOfWork
from .models import ArticleModel, RatingModel

__all__ = [
    "Base",
    "Database",
    "translate_integrity_error",
    "SQLAlchemyUnitOfWork",
    "ArticleModel",
    "RatingModel",
]
