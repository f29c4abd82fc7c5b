# skill.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from devhub.data.skill_catalog import CatalogSkill
from devhub.schemas.common import CamelModel, Pagination


SkillCategory = Literal["frontend", "backend", "database", "tools", "cloud", "mobile", "other"]
SkillSort = Literal[
    "name", "-name",
    "proficiencyLevel", "-proficiencyLevel",
    "category", "-category",
    "lastUsed", "-lastUsed",
]


def _clean_certifications(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return None
    cleaned = [str(c).strip() for c in v]
    if len(cleaned) > 10:
        raise ValueError("Cannot have more than 10 certifications")
    for cert in cleaned:
        if len(cert) > 100:
            raise ValueError("Certification name cannot exceed 100 characters")
    return cleaned


class SkillCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    category: SkillCategory
    proficiency_level: int = Field(ge=1, le=5)
    years_of_experience: Optional[float] = Field(default=None, ge=0, le=50)
    description: Optional[str] = Field(default=None, max_length=500)
    last_used: Optional[datetime] = None
    certifications: List[str] = Field(default_factory=list)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("certifications")
    @classmethod
    def _validate_certifications(cls, v):
        return _clean_certifications(v)


class SkillUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[SkillCategory] = None
    proficiency_level: Optional[int] = Field(default=None, ge=1, le=5)
    years_of_experience: Optional[float] = Field(default=None, ge=0, le=50)
    description: Optional[str] = Field(default=None, max_length=500)
    last_used: Optional[datetime] = None
    certifications: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("certifications")
    @classmethod
    def _validate_certifications(cls, v):
        return _clean_certifications(v)


class SkillRead(CamelModel):
    id: int
    user_id: int
    name: str
    category: str
    proficiency_level: int
    proficiency_label: str
    years_of_experience: Optional[float] = None
    experience_level: str
    description: Optional[str] = None
    endorsements: int
    last_used: Optional[datetime] = None
    freshness: str
    certifications: List[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class SkillStats(CamelModel):
    total: int = 0
    average_proficiency: float = 0
    expert_skills: int = 0
    advanced_skills: int = 0
    intermediate_skills: int = 0
    total_endorsements: int = 0


class CategoryStat(CamelModel):
    category: str
    count: int
    average_proficiency: float
    total_endorsements: int = 0


class SkillListData(CamelModel):
    skills: List[SkillRead]
    pagination: Pagination
    stats: SkillStats
    category_stats: List[CategoryStat]


class SkillData(CamelModel):
    skill: SkillRead


class SkillCategoryData(CamelModel):
    category: str
    skills: List[SkillRead]
    count: int


class EndorsementsData(CamelModel):
    endorsements: int


class AvailableSkillsData(CamelModel):
    skills: List[CatalogSkill]


class ProficiencyBucket(CamelModel):
    proficiency_level: int
    count: int
    skills: List[str]


class CategorySkill(CamelModel):
    name: str
    proficiency: int


class CategoryAnalysis(CamelModel):
    category: str
    count: int
    average_proficiency: float
    total_endorsements: int
    skills: List[CategorySkill]


class FreshnessBucket(CamelModel):
    freshness: str
    count: int


class EndorsedSkill(CamelModel):
    id: int
    name: str
    endorsements: int
    proficiency_level: int
    category: str


class SkillAnalytics(CamelModel):
    proficiency_breakdown: List[ProficiencyBucket]
    category_analysis: List[CategoryAnalysis]
    skill_freshness: List[FreshnessBucket]
    top_endorsed_skills: List[EndorsedSkill]


class SkillAnalyticsData(CamelModel):
    analytics: SkillAnalytics
