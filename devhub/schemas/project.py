# project.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from devhub.models.project import MAX_TECHNOLOGIES
from devhub.schemas.common import CamelModel, Pagination, blank_to_none


ProjectStatus = Literal["planning", "in-progress", "completed", "archived"]
ProjectPriority = Literal["low", "medium", "high"]
ProjectSort = Literal["createdAt", "-createdAt", "title", "-title", "status", "-status"]

_GITHUB_RE = re.compile(r"^https?://(www\.)?github\.com/.*$")
_URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


def _clean_technologies(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return None
    cleaned = [str(t).strip() for t in v]
    for tech in cleaned:
        if len(tech) > 30:
            raise ValueError("Technology name cannot exceed 30 characters")
    if len(cleaned) > MAX_TECHNOLOGIES:
        raise ValueError(f"Cannot have more than {MAX_TECHNOLOGIES} technologies per project")
    return cleaned


def _check_github(v: Optional[str]) -> Optional[str]:
    value = blank_to_none(v)
    if value and not _GITHUB_RE.match(value):
        raise ValueError("Please provide a valid GitHub URL")
    return value


def _check_url(v: Optional[str]) -> Optional[str]:
    value = blank_to_none(v)
    if value and not _URL_RE.match(value):
        raise ValueError("Please provide a valid URL")
    return value


class _ProjectFields(CamelModel):
    @field_validator("title", "description", mode="before", check_fields=False)
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("technologies", check_fields=False)
    @classmethod
    def _validate_technologies(cls, v):
        return _clean_technologies(v)

    @field_validator("github_url", check_fields=False)
    @classmethod
    def _validate_github_url(cls, v):
        return _check_github(v)

    @field_validator("live_url", "image_url", check_fields=False)
    @classmethod
    def _validate_urls(cls, v):
        return _check_url(v)

    @model_validator(mode="after")
    def _validate_dates(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start and end and end < start:
            raise ValueError("End date must be after start date")
        return self


class ProjectCreate(_ProjectFields):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    technologies: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image_url: Optional[str] = None
    status: ProjectStatus = "planning"
    priority: ProjectPriority = "medium"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    featured: bool = False


class ProjectUpdate(_ProjectFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    technologies: Optional[List[str]] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[ProjectPriority] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    featured: Optional[bool] = None


class ProjectOwner(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


class ProjectRead(CamelModel):
    id: int
    user_id: int
    user: Optional[ProjectOwner] = None
    title: str
    description: str
    technologies: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image_url: Optional[str] = None
    status: str
    priority: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    featured: bool
    likes: int
    views: int
    duration: Optional[str] = None
    progress: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProjectStats(CamelModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    planning: int = 0
    archived: int = 0
    total_views: int = 0
    total_likes: int = 0


class ProjectListData(CamelModel):
    projects: List[ProjectRead]
    pagination: Pagination
    stats: ProjectStats


class ProjectData(CamelModel):
    project: ProjectRead


class LikesData(CamelModel):
    likes: int


class StatusBucket(CamelModel):
    status: str
    count: int
    average_likes: float
    average_views: float


class TechnologyBucket(CamelModel):
    technology: str
    count: int
    projects: List[str]


class MonthlyActivity(CamelModel):
    year: int
    month: int
    projects_created: int
    total_views: int
    total_likes: int


class PriorityBucket(CamelModel):
    priority: str
    count: int


class ProjectAnalytics(CamelModel):
    status_breakdown: List[StatusBucket]
    technology_popularity: List[TechnologyBucket]
    monthly_activity: List[MonthlyActivity]
    priority_distribution: List[PriorityBucket]


class ProjectAnalyticsData(CamelModel):
    analytics: ProjectAnalytics
