# skill_service.py
from __future__ import annotations

from collections import defaultdict
from datetime import timedelta

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from devhub.models.skills import Skill
from devhub.schemas.common import Pagination
from devhub.schemas.skill import (
    CategoryAnalysis,
    CategorySkill,
    CategoryStat,
    EndorsedSkill,
    FreshnessBucket,
    ProficiencyBucket,
    SkillAnalytics,
    SkillStats,
)
from devhub.utils.dates import as_utc, utc_now


_SORT_COLUMNS = {
    "name": Skill.name,
    "proficiencyLevel": Skill.proficiency_level,
    "category": Skill.category,
    "lastUsed": Skill.last_used,
}


def _order_by(sort: str):
    descending = sort.startswith("-")
    column = _SORT_COLUMNS.get(sort.lstrip("-"), Skill.proficiency_level)
    if descending:
        return [column.desc(), Skill.id.desc()]
    return [column.asc(), Skill.id.asc()]


def name_taken(db: Session, user_id: int, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Skill.id).filter(Skill.user_id == user_id, Skill.name == name)
    if exclude_id is not None:
        query = query.filter(Skill.id != exclude_id)
    return query.first() is not None


def list_skills(
    db: Session,
    user_id: int,
    *,
    category: str | None = None,
    is_active: bool | None = None,
    min_proficiency: int | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str = "-proficiencyLevel",
) -> tuple[list[Skill], Pagination]:
    query = db.query(Skill).filter(Skill.user_id == user_id)
    if category:
        query = query.filter(Skill.category == category)
    if is_active is not None:
        query = query.filter(Skill.is_active.is_(is_active))
    if min_proficiency is not None:
        query = query.filter(Skill.proficiency_level >= min_proficiency)

    total = query.count()
    items = query.order_by(*_order_by(sort)).offset((page - 1) * limit).limit(limit).all()
    return items, Pagination.build(page, limit, total)


def ranked_active_skills(db: Session, user_id: int, category: str | None = None, limit: int | None = None) -> list[Skill]:
    query = db.query(Skill).filter(Skill.user_id == user_id, Skill.is_active.is_(True))
    if category:
        query = query.filter(Skill.category == category)
    query = query.order_by(Skill.proficiency_level.desc(), Skill.endorsements.desc(), Skill.id.asc())
    if limit:
        query = query.limit(limit)
    return query.all()


def skill_stats(db: Session, user_id: int) -> SkillStats:
    row = (
        db.query(
            func.count(Skill.id),
            func.avg(Skill.proficiency_level),
            func.sum(case((Skill.proficiency_level == 5, 1), else_=0)),
            func.sum(case((Skill.proficiency_level == 4, 1), else_=0)),
            func.sum(case((Skill.proficiency_level == 3, 1), else_=0)),
            func.sum(Skill.endorsements),
        )
        .filter(Skill.user_id == user_id, Skill.is_active.is_(True))
        .one()
    )
    total, avg_level, expert, advanced, intermediate, endorsements = row
    return SkillStats(
        total=int(total or 0),
        average_proficiency=float(avg_level or 0),
        expert_skills=int(expert or 0),
        advanced_skills=int(advanced or 0),
        intermediate_skills=int(intermediate or 0),
        total_endorsements=int(endorsements or 0),
    )


def category_stats(db: Session, user_id: int) -> list[CategoryStat]:
    rows = (
        db.query(Skill.category, func.count(Skill.id), func.avg(Skill.proficiency_level), func.sum(Skill.endorsements))
        .filter(Skill.user_id == user_id, Skill.is_active.is_(True))
        .group_by(Skill.category)
        .all()
    )
    stats = [
        CategoryStat(category=c, count=int(n), average_proficiency=float(avg or 0), total_endorsements=int(e or 0))
        for c, n, avg, e in rows
    ]
    return sorted(stats, key=lambda s: s.count, reverse=True)


def freshness_bucket(last_used, now=None) -> str:
    last_used = as_utc(last_used)
    now = now or utc_now()
    if last_used is not None and last_used >= now - timedelta(days=30):
        return "Recent"
    if last_used is not None and last_used >= now - timedelta(days=182):
        return "Moderate"
    return "Stale"


def skill_analytics(db: Session, user_id: int) -> SkillAnalytics:
    skills = db.query(Skill).filter(Skill.user_id == user_id).order_by(Skill.id.asc()).all()

    by_level: dict[int, list[str]] = defaultdict(list)
    by_category: dict[str, list[Skill]] = defaultdict(list)
    freshness: dict[str, int] = defaultdict(int)
    now = utc_now()
    for skill in skills:
        by_level[skill.proficiency_level].append(skill.name)
        by_category[skill.category].append(skill)
        freshness[freshness_bucket(skill.last_used, now)] += 1

    category_analysis = [
        CategoryAnalysis(
            category=category,
            count=len(items),
            average_proficiency=sum(s.proficiency_level for s in items) / len(items),
            total_endorsements=sum(s.endorsements or 0 for s in items),
            skills=[CategorySkill(name=s.name, proficiency=s.proficiency_level) for s in items],
        )
        for category, items in by_category.items()
    ]
    category_analysis.sort(key=lambda c: c.count, reverse=True)

    endorsed = sorted((s for s in skills if (s.endorsements or 0) > 0), key=lambda s: s.endorsements, reverse=True)[:5]

    return SkillAnalytics(
        proficiency_breakdown=[
            ProficiencyBucket(proficiency_level=level, count=len(names), skills=names)
            for level, names in sorted(by_level.items(), reverse=True)
        ],
        category_analysis=category_analysis,
        skill_freshness=[FreshnessBucket(freshness=label, count=count) for label, count in freshness.items()],
        top_endorsed_skills=[
            EndorsedSkill(
                id=s.id,
                name=s.name,
                endorsements=s.endorsements,
                proficiency_level=s.proficiency_level,
                category=s.category,
            )
            for s in endorsed
        ],
    )


def increment_endorsements(db: Session, skill: Skill) -> Skill:
    db.query(Skill).filter(Skill.id == skill.id).update({Skill.endorsements: Skill.endorsements + 1}, synchronize_session=False)
    db.commit()
    db.refresh(skill)
    return skill
