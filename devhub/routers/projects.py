# projects.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from devhub.database import get_db
from devhub.models.project import Project
from devhub.models.upload import Upload
from devhub.models.user import User
from devhub.routers.dependencies import get_current_user
from devhub.schemas.common import Envelope
from devhub.schemas.project import (
    LikesData,
    ProjectAnalyticsData,
    ProjectCreate,
    ProjectData,
    ProjectListData,
    ProjectPriority,
    ProjectRead,
    ProjectSort,
    ProjectStatus,
    ProjectUpdate,
)
from devhub.services.project_service import increment_counter, list_projects, project_analytics, project_stats
from devhub.services.upload_storage import remove_stored_file


router = APIRouter(dependencies=[Depends(get_current_user)])

logger = logging.getLogger(__name__)


def _get_owned_project(db: Session, project_id: int, user: User) -> Project:
    project = db.query(Project).filter(Project.id == project_id, Project.user_id == user.id).first()
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.get("", response_model=Envelope[ProjectListData])
def read_projects(
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status"),
    priority: Optional[ProjectPriority] = None,
    featured: Optional[bool] = None,
    technology: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    sort: ProjectSort = "-createdAt",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[ProjectListData]:
    projects, pagination = list_projects(
        db,
        current_user.id,
        status=status_filter,
        priority=priority,
        featured=featured,
        technology=technology,
        page=page,
        limit=limit,
        sort=sort,
    )
    return Envelope(
        data=ProjectListData(
            projects=[ProjectRead.model_validate(p) for p in projects],
            pagination=pagination,
            stats=project_stats(db, current_user.id),
        )
    )


@router.get("/analytics", response_model=Envelope[ProjectAnalyticsData])
def read_project_analytics(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[ProjectAnalyticsData]:
    return Envelope(data=ProjectAnalyticsData(analytics=project_analytics(db, current_user.id)))


@router.get("/{project_id}", response_model=Envelope[ProjectData])
def read_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[ProjectData]:
    project = _get_owned_project(db, project_id, current_user)
    project = increment_counter(db, project, Project.views)
    return Envelope(data=ProjectData(project=ProjectRead.model_validate(project)))


@router.post("", response_model=Envelope[ProjectData], status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[ProjectData]:
    project = Project(user_id=current_user.id, **payload.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("projects.create project_id=%s user_id=%s", project.id, current_user.id)
    return Envelope(message="Project created successfully", data=ProjectData(project=ProjectRead.model_validate(project)))


@router.put("/{project_id}", response_model=Envelope[ProjectData])
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[ProjectData]:
    project = _get_owned_project(db, project_id, current_user)
    updates = payload.model_dump(exclude_unset=True)
    for field in ("title", "description", "status", "priority", "featured", "technologies"):
        # Non-nullable fields; an explicit null means "leave as is".
        if field in updates and updates[field] is None:
            updates.pop(field)

    start = updates.get("start_date", project.start_date)
    end = updates.get("end_date", project.end_date)
    if start and end and end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="End date must be after start date")

    for field, value in updates.items():
        setattr(project, field, value)
    db.commit()
    db.refresh(project)
    return Envelope(message="Project updated successfully", data=ProjectData(project=ProjectRead.model_validate(project)))


@router.delete("/{project_id}", response_model=Envelope[None])
def delete_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[None]:
    project = _get_owned_project(db, project_id, current_user)
    stored_paths = [path for (path,) in db.query(Upload.file_path).filter(Upload.project_id == project.id).all()]
    db.delete(project)
    db.commit()
    for path in stored_paths:
        remove_stored_file(path)
    logger.info("projects.delete project_id=%s files_removed=%s", project_id, len(stored_paths))
    return Envelope(message="Project deleted successfully")


@router.post("/{project_id}/like", response_model=Envelope[LikesData])
def like_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[LikesData]:
    project = _get_owned_project(db, project_id, current_user)
    project = increment_counter(db, project, Project.likes)
    return Envelope(message="Project liked successfully", data=LikesData(likes=project.likes))
