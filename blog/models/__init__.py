# Import all models to register them with SQLModel
from blog.models.article import (
    Article,
    ArticleCreate,
    ArticleUpdate,
    ArticleRead,
    ArticleList,
    ArticleStats,
    Category,
)

__all__ = [
    "Article",
    "ArticleCreate",
    "ArticleUpdate",
    "ArticleRead",
    "ArticleList",
    "ArticleStats",
    "Category",
]
