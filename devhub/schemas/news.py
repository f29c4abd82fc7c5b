# news.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from devhub.schemas.common import CamelModel, blank_to_none


class NewsCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=250)
    preview: str = Field(min_length=1, max_length=500)
    content: str = Field(min_length=1)
    image_url: Optional[str] = Field(default=None, max_length=500)
    author: str = Field(min_length=1, max_length=100)
    published: bool = False

    @field_validator("title", "preview", "author", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("slug", "image_url")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)


class NewsUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    preview: Optional[str] = Field(default=None, min_length=1, max_length=500)
    content: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = Field(default=None, max_length=500)
    author: Optional[str] = Field(default=None, min_length=1, max_length=100)
    published: Optional[bool] = None

    @field_validator("title", "preview", "author", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class NewsSummary(CamelModel):
    id: int
    title: str
    slug: str
    preview: str
    image_url: Optional[str] = None
    author: str
    published_at: Optional[datetime] = None
    views: int


class NewsRead(NewsSummary):
    content: str
    published: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class NewsPagination(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool


class NewsListData(CamelModel):
    articles: List[NewsSummary]
    pagination: NewsPagination


class NewsArticlesData(CamelModel):
    articles: List[NewsSummary]


class NewsArticleData(CamelModel):
    article: NewsRead
