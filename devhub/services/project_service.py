# project_service.py
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Iterable

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from devhub.models.project import Project
from devhub.schemas.common import Pagination
from devhub.schemas.project import (
    MonthlyActivity,
    PriorityBucket,
    ProjectAnalytics,
    ProjectStats,
    StatusBucket,
    TechnologyBucket,
)
from devhub.utils.dates import as_utc


_SORT_COLUMNS = {
    "createdAt": Project.created_at,
    "title": Project.title,
    "status": Project.status,
}


def _order_by(sort: str):
    descending = sort.startswith("-")
    column = _SORT_COLUMNS.get(sort.lstrip("-"), Project.created_at)
    if descending:
        return [column.desc(), Project.id.desc()]
    return [column.asc(), Project.id.asc()]


def matches_technology(project: Project, technology: str) -> bool:
    needle = technology.strip().lower()
    return any(needle in (tech or "").lower() for tech in (project.technologies or []))


def list_projects(
    db: Session,
    user_id: int,
    *,
    status: str | None = None,
    priority: str | None = None,
    featured: bool | None = None,
    technology: str | None = None,
    page: int = 1,
    limit: int = 10,
    sort: str = "-createdAt",
) -> tuple[list[Project], Pagination]:
    query = db.query(Project).filter(Project.user_id == user_id)
    if status:
        query = query.filter(Project.status == status)
    if priority:
        query = query.filter(Project.priority == priority)
    if featured is not None:
        query = query.filter(Project.featured.is_(featured))
    query = query.order_by(*_order_by(sort))

    if technology:
        # Technologies live in a JSON column; match them in Python.
        rows = [p for p in query.all() if matches_technology(p, technology)]
        total = len(rows)
        items = rows[(page - 1) * limit : page * limit]
    else:
        total = query.count()
        items = query.offset((page - 1) * limit).limit(limit).all()

    return items, Pagination.build(page, limit, total)


def project_stats(db: Session, user_id: int) -> ProjectStats:
    row = (
        db.query(
            func.count(Project.id),
            func.sum(case((Project.status == "completed", 1), else_=0)),
            func.sum(case((Project.status == "in-progress", 1), else_=0)),
            func.sum(case((Project.status == "planning", 1), else_=0)),
            func.sum(case((Project.status == "archived", 1), else_=0)),
            func.sum(Project.views),
            func.sum(Project.likes),
        )
        .filter(Project.user_id == user_id)
        .one()
    )
    total, completed, in_progress, planning, archived, views, likes = row
    return ProjectStats(
        total=int(total or 0),
        completed=int(completed or 0),
        in_progress=int(in_progress or 0),
        planning=int(planning or 0),
        archived=int(archived or 0),
        total_views=int(views or 0),
        total_likes=int(likes or 0),
    )


def technology_popularity(projects: Iterable[Project], limit: int = 10) -> list[TechnologyBucket]:
    counts: Counter[str] = Counter()
    titles: dict[str, list[str]] = defaultdict(list)
    for project in projects:
        for tech in project.technologies or []:
            counts[tech] += 1
            titles[tech].append(project.title)
    return [TechnologyBucket(technology=tech, count=count, projects=titles[tech]) for tech, count in counts.most_common(limit)]


def monthly_activity(projects: Iterable[Project], limit: int = 12) -> list[MonthlyActivity]:
    buckets: dict[tuple[int, int], list[int]] = defaultdict(lambda: [0, 0, 0])
    for project in projects:
        created = as_utc(project.created_at)
        if created is None:
            continue
        bucket = buckets[(created.year, created.month)]
        bucket[0] += 1
        bucket[1] += project.views or 0
        bucket[2] += project.likes or 0

    ordered = sorted(buckets.items(), key=lambda item: item[0], reverse=True)[:limit]
    return [
        MonthlyActivity(year=year, month=month, projects_created=created, total_views=views, total_likes=likes)
        for (year, month), (created, views, likes) in ordered
    ]


def project_analytics(db: Session, user_id: int) -> ProjectAnalytics:
    status_rows = (
        db.query(Project.status, func.count(Project.id), func.avg(Project.likes), func.avg(Project.views))
        .filter(Project.user_id == user_id)
        .group_by(Project.status)
        .all()
    )
    priority_rows = (
        db.query(Project.priority, func.count(Project.id))
        .filter(Project.user_id == user_id)
        .group_by(Project.priority)
        .all()
    )
    projects = db.query(Project).filter(Project.user_id == user_id).all()

    return ProjectAnalytics(
        status_breakdown=[
            StatusBucket(status=s, count=int(c), average_likes=float(l or 0), average_views=float(v or 0))
            for s, c, l, v in status_rows
        ],
        technology_popularity=technology_popularity(projects),
        monthly_activity=monthly_activity(projects),
        priority_distribution=[PriorityBucket(priority=p, count=int(c)) for p, c in priority_rows],
    )


def increment_counter(db: Session, project: Project, column) -> Project:
    db.query(Project).filter(Project.id == project.id).update({column: column + 1}, synchronize_session=False)
    db.commit()
    db.refresh(project)
    return project
