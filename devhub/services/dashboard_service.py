# dashboard_service.py
from __future__ import annotations

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from devhub.models.project import Project
from devhub.models.skills import Skill
from devhub.models.user import User
from devhub.schemas.dashboard import (
    ActivityPoint,
    CategoryProficiency,
    DashboardData,
    DashboardOverview,
    ProfileStats,
    ProjectTotals,
    RecentActivity,
    RecentProject,
    SkillTotals,
    StatusStat,
    TopSkill,
    UserSkillStats,
)
from devhub.schemas.user import UserCard
from devhub.services.project_service import monthly_activity
from devhub.services.skill_service import ranked_active_skills


def find_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == (username or "").strip().lower()).first()


def user_card(user: User) -> UserCard:
    return UserCard(
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        avatar=user.avatar,
        bio=user.bio,
    )


def project_totals(db: Session, user_id: int) -> ProjectTotals:
    total, completed, views, likes, featured = (
        db.query(
            func.count(Project.id),
            func.sum(case((Project.status == "completed", 1), else_=0)),
            func.sum(Project.views),
            func.sum(Project.likes),
            func.sum(case((Project.featured.is_(True), 1), else_=0)),
        )
        .filter(Project.user_id == user_id)
        .one()
    )
    return ProjectTotals(
        total_projects=int(total or 0),
        completed_projects=int(completed or 0),
        total_views=int(views or 0),
        total_likes=int(likes or 0),
        featured_projects=int(featured or 0),
    )


def skill_totals(db: Session, user_id: int) -> SkillTotals:
    total, avg_level, expert, endorsements = (
        db.query(
            func.count(Skill.id),
            func.avg(Skill.proficiency_level),
            func.sum(case((Skill.proficiency_level >= 5, 1), else_=0)),
            func.sum(Skill.endorsements),
        )
        .filter(Skill.user_id == user_id, Skill.is_active.is_(True))
        .one()
    )
    return SkillTotals(
        total_skills=int(total or 0),
        average_proficiency=float(avg_level or 0),
        expert_skills=int(expert or 0),
        total_endorsements=int(endorsements or 0),
    )


def user_skill_stats(db: Session, user_id: int) -> UserSkillStats:
    totals = skill_totals(db, user_id)
    return UserSkillStats(
        total=totals.total_skills,
        average_proficiency=totals.average_proficiency,
        expert_skills=totals.expert_skills,
        total_endorsements=totals.total_endorsements,
    )


def recent_projects(db: Session, user_id: int, limit: int = 5) -> list[RecentProject]:
    rows = (
        db.query(Project)
        .filter(Project.user_id == user_id)
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .limit(limit)
        .all()
    )
    return [RecentProject.model_validate(p) for p in rows]


def top_skills(db: Session, user_id: int, limit: int) -> list[TopSkill]:
    return [TopSkill.model_validate(s) for s in ranked_active_skills(db, user_id, limit=limit)]


def profile_stats(db: Session, user_id: int) -> ProfileStats:
    return ProfileStats(projects=project_totals(db, user_id), skills=skill_totals(db, user_id))


def recent_activity(db: Session, user_id: int, include_skills: bool = True) -> RecentActivity:
    return RecentActivity(
        projects=recent_projects(db, user_id),
        skills=top_skills(db, user_id, limit=10) if include_skills else [],
    )


def dashboard_data(db: Session, user: User, include_card: bool = False) -> DashboardData:
    status_rows = (
        db.query(Project.status, func.count(Project.id), func.sum(Project.views), func.sum(Project.likes))
        .filter(Project.user_id == user.id)
        .group_by(Project.status)
        .all()
    )
    category_rows = (
        db.query(Skill.category, func.count(Skill.id), func.avg(Skill.proficiency_level))
        .filter(Skill.user_id == user.id, Skill.is_active.is_(True))
        .group_by(Skill.category)
        .all()
    )
    totals = project_totals(db, user.id)
    active_skills = db.query(func.count(Skill.id)).filter(Skill.user_id == user.id, Skill.is_active.is_(True)).scalar()
    projects = db.query(Project).filter(Project.user_id == user.id).all()

    return DashboardData(
        user=user_card(user) if include_card else None,
        overview=DashboardOverview(
            total_projects=totals.total_projects,
            total_skills=int(active_skills or 0),
            total_views=totals.total_views,
            total_likes=totals.total_likes,
        ),
        project_stats=[
            StatusStat(status=s, count=int(c), total_views=int(v or 0), total_likes=int(l or 0))
            for s, c, v, l in status_rows
        ],
        skill_stats=[
            CategoryProficiency(category=c, count=int(n), average_proficiency=float(avg or 0))
            for c, n, avg in category_rows
        ],
        recent_projects=recent_projects(db, user.id),
        top_skills=top_skills(db, user.id, limit=8),
        activity_data=[
            ActivityPoint(year=m.year, month=m.month, projects_created=m.projects_created)
            for m in monthly_activity(projects, limit=6)
        ],
    )


def users_with_location(db: Session):
    return db.query(User).filter(User.latitude.isnot(None), User.longitude.isnot(None))


def search_users(db: Session, query: str, limit: int) -> list[User]:
    q = users_with_location(db)
    term = (query or "").strip()
    if term:
        escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        q = q.filter(
            or_(
                func.lower(User.username).like(pattern, escape="\\"),
                func.lower(User.first_name).like(pattern, escape="\\"),
                func.lower(User.last_name).like(pattern, escape="\\"),
                func.lower(User.city).like(pattern, escape="\\"),
                func.lower(User.country).like(pattern, escape="\\"),
            )
        )
    # Users who never logged in sort last.
    q = q.order_by(case((User.last_login.is_(None), 1), else_=0), User.last_login.desc(), User.created_at.desc())
    return q.limit(limit).all()
