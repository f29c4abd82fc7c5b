# dashboard.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from devhub.schemas.common import CamelModel
from devhub.schemas.project import ProjectRead, ProjectStats
from devhub.schemas.skill import CategoryStat, SkillRead
from devhub.schemas.user import DirectoryUser, PublicUser, UserCard, UserRead


class ProjectTotals(CamelModel):
    total_projects: int = 0
    completed_projects: int = 0
    total_views: int = 0
    total_likes: int = 0
    featured_projects: int = 0


class SkillTotals(CamelModel):
    total_skills: int = 0
    average_proficiency: float = 0
    expert_skills: int = 0
    total_endorsements: int = 0


class ProfileStats(CamelModel):
    projects: ProjectTotals
    skills: SkillTotals


class RecentProject(CamelModel):
    id: int
    title: str
    status: str
    views: int = 0
    likes: int = 0
    updated_at: Optional[datetime] = None


class TopSkill(CamelModel):
    id: int
    name: str
    category: str
    proficiency_level: int
    endorsements: int


class RecentActivity(CamelModel):
    projects: List[RecentProject] = Field(default_factory=list)
    skills: List[TopSkill] = Field(default_factory=list)


class ProfileData(CamelModel):
    user: UserRead
    stats: ProfileStats
    recent_activity: RecentActivity


class PublicProfileData(CamelModel):
    user: PublicUser
    stats: ProfileStats
    recent_activity: RecentActivity


class UserData(CamelModel):
    user: UserRead


class DashboardOverview(CamelModel):
    total_projects: int = 0
    total_skills: int = 0
    total_views: int = 0
    total_likes: int = 0


class StatusStat(CamelModel):
    status: str
    count: int
    total_views: int
    total_likes: int


class CategoryProficiency(CamelModel):
    category: str
    count: int
    average_proficiency: float


class ActivityPoint(CamelModel):
    year: int
    month: int
    projects_created: int


class DashboardData(CamelModel):
    user: Optional[UserCard] = None
    overview: DashboardOverview
    project_stats: List[StatusStat]
    skill_stats: List[CategoryProficiency]
    recent_projects: List[RecentProject]
    top_skills: List[TopSkill]
    activity_data: List[ActivityPoint]


class UserSkillStats(CamelModel):
    total: int = 0
    average_proficiency: float = 0
    expert_skills: int = 0
    total_endorsements: int = 0


class UserSkillsData(CamelModel):
    user: UserCard
    skills: List[SkillRead]
    stats: UserSkillStats
    category_stats: List[CategoryStat]


class UserProjectsData(CamelModel):
    user: UserCard
    projects: List[ProjectRead]
    stats: ProjectStats


class MapUsersData(CamelModel):
    users: List[DirectoryUser]


class AllUsersData(CamelModel):
    users: List[DirectoryUser]
    total: int


class SearchUsersData(CamelModel):
    users: List[DirectoryUser]
    query: str
    count: int
