# comment.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from devhub.schemas.common import CamelModel


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=1000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    parent_comment_id: Optional[int] = None


class CommentUpdate(CamelModel):
    content: Optional[str] = Field(default=None, max_length=1000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    is_public: Optional[bool] = None


class CommentAuthor(CamelModel):
    id: int
    username: Optional[str] = None
    first_name: str
    last_name: str


class CommentProject(CamelModel):
    id: int
    title: str


class CommentRead(CamelModel):
    id: int
    project_id: int
    user_id: int
    user: Optional[CommentAuthor] = None
    content: str
    rating: Optional[int] = None
    is_public: bool
    parent_comment_id: Optional[int] = None
    is_reply: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class CommentThread(CommentRead):
    replies: List[CommentRead] = Field(default_factory=list)
    reply_count: int = 0


class RecentComment(CommentRead):
    project: Optional[CommentProject] = None


class CommentPagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool


class CommentStats(CamelModel):
    total_comments: int
    average_rating: Optional[float] = None
    total_ratings: int = 0


class ProjectCommentsData(CamelModel):
    comments: List[CommentThread]
    pagination: CommentPagination
    stats: CommentStats


class RecentCommentsData(CamelModel):
    comments: List[RecentComment]


class CommentDeleteData(CamelModel):
    deleted_count: int
