# skills.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devhub.data.skill_catalog import available_skills
from devhub.database import get_db
from devhub.models.skills import SKILL_CATEGORIES, Skill
from devhub.models.user import User
from devhub.routers.dependencies import get_current_user
from devhub.schemas.common import Envelope
from devhub.schemas.skill import (
    AvailableSkillsData,
    EndorsementsData,
    SkillAnalyticsData,
    SkillCategory,
    SkillCategoryData,
    SkillCreate,
    SkillData,
    SkillListData,
    SkillRead,
    SkillSort,
    SkillUpdate,
)
from devhub.services.skill_service import (
    category_stats,
    increment_endorsements,
    list_skills,
    name_taken,
    ranked_active_skills,
    skill_analytics,
    skill_stats,
)
from devhub.utils.dates import utc_now


router = APIRouter(dependencies=[Depends(get_current_user)])

DUPLICATE_SKILL = "You already have a skill with this name"


def _get_owned_skill(db: Session, skill_id: int, user: User) -> Skill:
    skill = db.query(Skill).filter(Skill.id == skill_id, Skill.user_id == user.id).first()
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return skill


def _commit_skill(db: Session, skill: Skill) -> Skill:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_SKILL)
    db.refresh(skill)
    return skill


@router.get("", response_model=Envelope[SkillListData])
def read_skills(
    category: Optional[SkillCategory] = None,
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    min_proficiency: Optional[int] = Query(default=None, alias="minProficiency", ge=1, le=5),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    sort: SkillSort = "-proficiencyLevel",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[SkillListData]:
    skills, pagination = list_skills(
        db,
        current_user.id,
        category=category,
        is_active=is_active,
        min_proficiency=min_proficiency,
        page=page,
        limit=limit,
        sort=sort,
    )
    return Envelope(
        data=SkillListData(
            skills=[SkillRead.model_validate(s) for s in skills],
            pagination=pagination,
            stats=skill_stats(db, current_user.id),
            category_stats=category_stats(db, current_user.id),
        )
    )


@router.get("/analytics", response_model=Envelope[SkillAnalyticsData])
def read_skill_analytics(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[SkillAnalyticsData]:
    return Envelope(data=SkillAnalyticsData(analytics=skill_analytics(db, current_user.id)))


@router.get("/available", response_model=Envelope[AvailableSkillsData])
def read_available_skills(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[AvailableSkillsData]:
    owned = [name for (name,) in db.query(Skill.name).filter(Skill.user_id == current_user.id, Skill.is_active.is_(True)).all()]
    return Envelope(
        message="Available skills retrieved successfully",
        data=AvailableSkillsData(skills=available_skills(owned)),
    )


@router.get("/category/{category}", response_model=Envelope[SkillCategoryData])
def read_skills_by_category(category: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[SkillCategoryData]:
    if category not in SKILL_CATEGORIES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")
    skills = ranked_active_skills(db, current_user.id, category=category)
    return Envelope(
        data=SkillCategoryData(category=category, skills=[SkillRead.model_validate(s) for s in skills], count=len(skills))
    )


@router.get("/{skill_id}", response_model=Envelope[SkillData])
def read_skill(skill_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[SkillData]:
    skill = _get_owned_skill(db, skill_id, current_user)
    return Envelope(data=SkillData(skill=SkillRead.model_validate(skill)))


@router.post("", response_model=Envelope[SkillData], status_code=status.HTTP_201_CREATED)
def create_skill(payload: SkillCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[SkillData]:
    if name_taken(db, current_user.id, payload.name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_SKILL)

    values = payload.model_dump()
    if values.get("last_used") is None:
        values["last_used"] = utc_now()
    skill = Skill(user_id=current_user.id, **values)
    db.add(skill)
    skill = _commit_skill(db, skill)
    return Envelope(message="Skill created successfully", data=SkillData(skill=SkillRead.model_validate(skill)))


@router.put("/{skill_id}", response_model=Envelope[SkillData])
def update_skill(
    skill_id: int,
    payload: SkillUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[SkillData]:
    skill = _get_owned_skill(db, skill_id, current_user)
    updates = payload.model_dump(exclude_unset=True)
    for field in ("name", "category", "proficiency_level", "certifications", "is_active"):
        if field in updates and updates[field] is None:
            updates.pop(field)

    if "name" in updates and name_taken(db, current_user.id, updates["name"], exclude_id=skill.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_SKILL)

    for field, value in updates.items():
        setattr(skill, field, value)
    skill = _commit_skill(db, skill)
    return Envelope(message="Skill updated successfully", data=SkillData(skill=SkillRead.model_validate(skill)))


@router.delete("/{skill_id}", response_model=Envelope[None])
def delete_skill(skill_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[None]:
    skill = _get_owned_skill(db, skill_id, current_user)
    db.delete(skill)
    db.commit()
    return Envelope(message="Skill deleted successfully")


@router.post("/{skill_id}/endorse", response_model=Envelope[EndorsementsData])
def endorse_skill(skill_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[EndorsementsData]:
    skill = _get_owned_skill(db, skill_id, current_user)
    skill = increment_endorsements(db, skill)
    return Envelope(message="Skill endorsed successfully", data=EndorsementsData(endorsements=skill.endorsements))
