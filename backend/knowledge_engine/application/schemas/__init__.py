from .article import (
    ArticleCreate,
    ArticleUpdate,
    ArticleListQuery,
    StepInput,
    ImageInput,
    AttachmentInput,
)

__all__ = [
    "ArticleCreate",
    "ArticleUpdate",
    "ArticleListQuery",
    "StepInput",
    "ImageInput",
    "AttachmentInput",
]
