import math
import re
from typing import List, Optional
from sqlalchemy import false, func, or_
from sqlmodel import Session, select

from blog.models.article import (
    Article,
    ArticleCreate,
    ArticleList,
    ArticleRead,
    ArticleStats,
    ArticleUpdate,
    Category,
    TAG_SEPARATOR,
    build_tag_index,
    utcnow,
)

WORDS_PER_MINUTE = 200
ALL_CATEGORIES = "All"

_ARTICLE_ID_RE = re.compile(r"[0-9a-f]{32}")


def calculate_reading_time(content: str) -> int:
    """Minutes to read ``content`` at 200 words per minute, rounded up."""
    return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


def _like_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _newest_first():
    return (Article.published_date.desc().nulls_last(), Article.created_date.desc())


class ArticleService:
    def __init__(self, session: Session):
        self.session = session

    def _get(self, article_id: str) -> Optional[Article]:
        # Ids we never issue cannot exist, so a malformed one is just "not found"
        if not isinstance(article_id, str) or not _ARTICLE_ID_RE.fullmatch(article_id):
            return None
        return self.session.get(Article, article_id)

    def _filters(self, published: Optional[bool], category: Optional[str], search: Optional[str]) -> list:
        conditions = []

        if published is not None:
            conditions.append(Article.published == published)

        if category and category != ALL_CATEGORIES:
            try:
                conditions.append(Article.category == Category(category))
            except ValueError:
                conditions.append(false())

        if search:
            pattern = f"%{_like_escape(search)}%"
            matches = [
                Article.title.ilike(pattern, escape="\\"),
                Article.subtitle.ilike(pattern, escape="\\"),
            ]
            # A term without the separator can only match inside a single tag
            if TAG_SEPARATOR not in search:
                matches.append(Article.tag_index.ilike(pattern, escape="\\"))
            conditions.append(or_(*matches))

        return conditions

    def list_articles(
        self,
        published: Optional[bool] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> ArticleList:
        conditions = self._filters(published, category, search)

        total = self.session.exec(select(func.count(Article.id)).where(*conditions)).one()

        # Past the last row nothing can match; skip offsets too large for the driver
        offset = (page - 1) * limit
        articles = []
        if offset < total:
            articles = self.session.exec(
                select(Article)
                .where(*conditions)
                .order_by(*_newest_first())
                .offset(offset)
                .limit(min(limit, total))
            ).all()

        return ArticleList(
            articles=[ArticleRead.model_validate(article, from_attributes=True) for article in articles],
            totalPages=math.ceil(total / limit),
            currentPage=page,
            total=total,
        )

    def list_published(self) -> List[Article]:
        return self.session.exec(
            select(Article).where(Article.published == True).order_by(*_newest_first())
        ).all()

    def list_by_category(self, category: Category) -> List[Article]:
        return self.session.exec(
            select(Article)
            .where(Article.published == True, Article.category == category)
            .order_by(*_newest_first())
        ).all()

    def get_article(self, article_id: str) -> Optional[Article]:
        """Fetch one article, counting a view if it is published."""
        article = self._get(article_id)
        if not article:
            return None

        if article.published:
            article.views += 1
            self.session.add(article)
            self.session.commit()
            self.session.refresh(article)

        return article

    def create_article(self, article_in: ArticleCreate) -> Article:
        article = Article(**article_in.model_dump())
        article.reading_time = calculate_reading_time(article.content)
        article.tag_index = build_tag_index(article.tags)

        now = utcnow()
        article.created_date = now
        article.updated_date = now
        if article.published and not article.published_date:
            article.published_date = now

        self.session.add(article)
        self.session.commit()
        self.session.refresh(article)
        return article

    def update_article(self, article_id: str, article_in: ArticleUpdate) -> Optional[Article]:
        article = self._get(article_id)
        if not article:
            return None

        updates = article_in.model_dump(exclude_unset=True)

        if "content" in updates:
            updates["reading_time"] = calculate_reading_time(updates["content"])
        if "tags" in updates:
            updates["tag_index"] = build_tag_index(updates["tags"])

        # Stamp the publish date only on the first draft -> published transition
        if updates.get("published") is True and not article.published and article.published_date is None:
            updates["published_date"] = utcnow()

        for key, value in updates.items():
            setattr(article, key, value)
        article.updated_date = utcnow()

        self.session.add(article)
        self.session.commit()
        self.session.refresh(article)
        return article

    def delete_article(self, article_id: str) -> bool:
        article = self._get(article_id)
        if not article:
            return False

        self.session.delete(article)
        self.session.commit()
        return True

    def get_stats(self) -> ArticleStats:
        total = self.session.exec(select(func.count(Article.id))).one()
        published = self.session.exec(
            select(func.count(Article.id)).where(Article.published == True)
        ).one()

        rows = self.session.exec(
            select(Article.category, func.count(Article.id))
            .group_by(Article.category)
            .order_by(Article.category)
        ).all()

        return ArticleStats(
            total=total,
            published=published,
            drafts=total - published,
            categoryStats=[{"_id": category.value, "count": count} for category, count in rows],
        )
