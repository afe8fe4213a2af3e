from .user import UserModel
from .article import (
    ArticleModel,
    ArticleTagModel,
    ArticleSystemModel,
    ArticleStepModel,
    ArticleImageModel,
    AttachmentModel,
    RelatedArticleModel,
)
from .category import CategoryModel, ArticleCategoryModel
from .rating import RatingModel

__all__ = [
    "UserModel",
    "ArticleModel",
    "ArticleTagModel",
    "ArticleSystemModel",
    "ArticleStepModel",
    "ArticleImageModel",
    "AttachmentModel",
    "RelatedArticleModel",
    "CategoryModel",
    "ArticleCategoryModel",
    "RatingModel",
]
