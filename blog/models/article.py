import uuid
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum
from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON, DateTime, Text

DEFAULT_AUTHOR = "Richard Li"

# Unit separator; cannot appear in a tag, so it delimits tags in tag_index
TAG_SEPARATOR = "\x1f"


def generate_article_id() -> str:
    return uuid.uuid4().hex


def build_tag_index(tags: List[str]) -> str:
    if not tags:
        return ""
    return TAG_SEPARATOR + TAG_SEPARATOR.join(tags) + TAG_SEPARATOR


def utcnow() -> datetime:
    # Naive UTC, which is what SQLite hands back on read
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Category(str, Enum):
    TECHNOLOGY = "Technology"
    LIFESTYLE = "Lifestyle"
    BUSINESS = "Business"
    DESIGN = "Design"
    PERSONAL = "Personal"
    TRAVEL = "Travel"
    OTHER = "Other"


class Article(SQLModel, table=True):
    id: str = Field(default_factory=generate_article_id, primary_key=True, max_length=32)

    # Content
    title: str = Field(index=True, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(sa_column=Column(Text, nullable=False))
    cover_image: Optional[str] = None

    # Categorization
    category: Category = Field(default=Category.PERSONAL, index=True)
    author: str = Field(default=DEFAULT_AUTHOR)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    tag_index: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))

    # Status
    published: bool = Field(default=False, index=True)
    published_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, index=True))

    # Derived
    reading_time: int = Field(default=0)
    views: int = Field(default=0)

    # Timestamps
    created_date: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_date: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _clean_tags(value):
    if not isinstance(value, list):
        return value
    tags = []
    for tag in value:
        if isinstance(tag, str):
            tag = tag.replace(TAG_SEPARATOR, "").strip()
            if not tag:
                continue
        tags.append(tag)
    return tags


class ArticleCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: str
    cover_image: Optional[str] = None
    category: Category = Category.PERSONAL
    author: str = DEFAULT_AUTHOR
    tags: List[str] = Field(default_factory=list)
    published: bool = False
    published_date: Optional[datetime] = None

    strip_text = field_validator("title", "subtitle", mode="before")(_strip)
    clean_tags = field_validator("tags", mode="before")(_clean_tags)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Article content is required")
        return value

    @field_validator("published_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ArticleUpdate(SQLModel):
    """Partial update: only the fields the caller actually sent are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None
    cover_image: Optional[str] = None
    category: Optional[Category] = None
    author: Optional[str] = None
    tags: Optional[List[str]] = None
    published: Optional[bool] = None

    strip_text = field_validator("title", "subtitle", mode="before")(_strip)
    clean_tags = field_validator("tags", mode="before")(_clean_tags)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Article content cannot be empty")
        return value

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("title", "content", "category", "author", "tags", "published"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ArticleRead(SQLModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    category: Category
    author: str
    tags: List[str] = []
    published: bool
    published_date: Optional[datetime] = None
    reading_time: int
    views: int
    created_date: datetime
    updated_date: datetime


class ArticleList(SQLModel):
    articles: List[ArticleRead]
    totalPages: int
    currentPage: int
    total: int


class ArticleStats(SQLModel):
    total: int
    published: int
    drafts: int
    categoryStats: List[Dict[str, Any]]
