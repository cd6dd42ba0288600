import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from blog.db.session import get_session
from blog.models.article import ArticleCreate, ArticleList, ArticleRead, ArticleStats, ArticleUpdate, Category
from blog.routers.admin import require_admin
from blog.services.article import ArticleService

logger = logging.getLogger(__name__)

router = APIRouter()

ARTICLE_NOT_FOUND = "Article not found"


def get_article_service(session: Session = Depends(get_session)) -> ArticleService:
    return ArticleService(session)


@router.get("", response_model=ArticleList)
def read_articles(
    published: Optional[bool] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    service: ArticleService = Depends(get_article_service),
):
    """List articles with optional published/category/search filters, newest first."""
    result = service.list_articles(
        published=published, category=category, search=search, page=page, limit=limit
    )
    logger.info(
        "Listed articles page=%s limit=%s published=%s category=%s search=%r -> %s total",
        page, limit, published, category, search, result.total,
    )
    return result


@router.get("/stats", response_model=ArticleStats)
def read_article_stats(service: ArticleService = Depends(get_article_service)):
    stats = service.get_stats()
    logger.info("Article stats: %s total, %s published", stats.total, stats.published)
    return stats


@router.get("/published", response_model=List[ArticleRead])
def read_published_articles(service: ArticleService = Depends(get_article_service)):
    return service.list_published()


@router.get("/category/{category}", response_model=List[ArticleRead])
def read_articles_by_category(category: Category, service: ArticleService = Depends(get_article_service)):
    return service.list_by_category(category)


@router.get("/{article_id}", response_model=ArticleRead)
def read_article(article_id: str, service: ArticleService = Depends(get_article_service)):
    article = service.get_article(article_id)
    if not article:
        logger.info("Article %s not found", article_id)
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article


@router.post("", response_model=ArticleRead, status_code=status.HTTP_201_CREATED)
def create_article(
    article_in: ArticleCreate,
    admin: dict = Depends(require_admin),
    service: ArticleService = Depends(get_article_service),
):
    article = service.create_article(article_in)
    logger.info("Created article %s (published=%s)", article.id, article.published)
    return article


@router.put("/{article_id}", response_model=ArticleRead)
def update_article(
    article_id: str,
    article_in: ArticleUpdate,
    admin: dict = Depends(require_admin),
    service: ArticleService = Depends(get_article_service),
):
    article = service.update_article(article_id, article_in)
    if not article:
        logger.info("Article %s not found for update", article_id)
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)

    logger.info("Updated article %s fields=%s", article_id, sorted(article_in.model_fields_set))
    return article


@router.delete("/{article_id}")
def delete_article(
    article_id: str,
    admin: dict = Depends(require_admin),
    service: ArticleService = Depends(get_article_service),
):
    if not service.delete_article(article_id):
        logger.info("Article %s not found for deletion", article_id)
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)

    logger.info("Deleted article %s", article_id)
    return {"message": "Article deleted successfully"}
