from __future__ import annotations

from collections import Counter
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from devhub.database import get_db
from devhub.models.comment import Comment
from devhub.models.news import News
from devhub.models.project import Project
from devhub.models.skills import Skill
from devhub.models.upload import Upload
from devhub.models.user import User
from devhub.routers.dependencies import admin_only, get_current_user
from devhub.schemas.admin import AdminStatKV, AdminStatsResponse, AdminUserData, UserStatusUpdate
from devhub.schemas.common import Envelope
from devhub.schemas.user import UserRead
from devhub.utils.dates import utc_now


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_user)])

logger = logging.getLogger(__name__)


def _count(db: Session, column) -> int:
    return int(db.query(func.count(column)).scalar() or 0)


@router.get("/stats", response_model=Envelope[AdminStatsResponse])
def get_admin_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(admin_only),
) -> Envelope[AdminStatsResponse]:
    logger.info("admin.stats user_id=%s", admin.id)

    accounts_total, verified, suspended, admins = db.query(
        func.count(User.id),
        func.sum(case((User.is_verified.is_(True), 1), else_=0)),
        func.sum(case((User.is_suspended.is_(True), 1), else_=0)),
        func.sum(case((User.role == "admin", 1), else_=0)),
    ).one()

    news_total, news_published = db.query(
        func.count(News.id),
        func.sum(case((News.published.is_(True), 1), else_=0)),
    ).one()

    # Technologies live in a JSON list per project, so they are tallied here.
    tech_counter: Counter[str] = Counter()
    labels: dict[str, str] = {}
    for (technologies,) in db.query(Project.technologies).all():
        for tech in technologies or []:
            key = tech.strip().lower()
            if not key:
                continue
            tech_counter[key] += 1
            labels.setdefault(key, tech.strip())

    top_technologies = [
        AdminStatKV(key=k, label=labels[k], count=int(v))
        for k, v in tech_counter.most_common(10)
    ]

    skill_key = func.lower(Skill.name)
    top_skills_rows = (
        db.query(skill_key.label("k"), func.min(Skill.name), func.count(Skill.id).label("c"))
        .filter(Skill.is_active.is_(True))
        .group_by(skill_key)
        .order_by(func.count(Skill.id).desc(), skill_key.asc())
        .limit(10)
        .all()
    )
    top_skills = [AdminStatKV(key=k, label=str(label), count=int(c)) for k, label, c in top_skills_rows]

    return Envelope(
        data=AdminStatsResponse(
            generated_at=utc_now(),
            accounts_total=int(accounts_total or 0),
            accounts_verified=int(verified or 0),
            accounts_suspended=int(suspended or 0),
            admins_total=int(admins or 0),
            projects_total=_count(db, Project.id),
            skills_total=_count(db, Skill.id),
            comments_total=_count(db, Comment.id),
            uploads_total=_count(db, Upload.id),
            news_total=int(news_total or 0),
            news_published=int(news_published or 0),
            top_technologies=top_technologies,
            top_skills=top_skills,
        )
    )


@router.put("/users/{user_id}/status", response_model=Envelope[AdminUserData])
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(admin_only),
) -> Envelope[AdminUserData]:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.id == admin.id and (payload.is_suspended or payload.role == "user"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admins cannot suspend or demote themselves")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    db.commit()
    db.refresh(user)

    logger.info(
        "admin.user_status user_id=%s by=%s verified=%s suspended=%s role=%s",
        user.id,
        admin.id,
        user.is_verified,
        user.is_suspended,
        user.role,
    )
    return Envelope(message="User status updated successfully", data=AdminUserData(user=UserRead.model_validate(user)))
