from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from devhub.schemas.common import CamelModel
from devhub.schemas.user import UserRead


class AdminStatKV(CamelModel):
    key: str
    label: str
    count: int


class AdminStatsResponse(CamelModel):
    generated_at: datetime
    accounts_total: int
    accounts_verified: int
    accounts_suspended: int
    admins_total: int
    projects_total: int
    skills_total: int
    comments_total: int
    uploads_total: int
    news_total: int
    news_published: int
    top_technologies: list[AdminStatKV]
    top_skills: list[AdminStatKV]


class UserStatusUpdate(CamelModel):
    is_verified: Optional[bool] = None
    is_suspended: Optional[bool] = None
    role: Optional[Literal["user", "admin"]] = None


class AdminUserData(CamelModel):
    user: UserRead
