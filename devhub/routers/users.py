# users.py
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from devhub.database import get_db
from devhub.models.project import Project
from devhub.models.user import User
from devhub.routers.dependencies import clear_auth_cookies, get_current_user
from devhub.schemas.common import Envelope
from devhub.schemas.dashboard import (
    AllUsersData,
    DashboardData,
    MapUsersData,
    ProfileData,
    PublicProfileData,
    SearchUsersData,
    UserData,
    UserProjectsData,
    UserSkillsData,
)
from devhub.schemas.project import ProjectRead
from devhub.schemas.skill import SkillRead
from devhub.schemas.user import AccountDelete, DirectoryUser, PasswordChange, PublicUser, UserRead, UserUpdate
from devhub.services.account_service import delete_account, username_taken
from devhub.services.dashboard_service import (
    dashboard_data,
    find_by_username,
    profile_stats,
    recent_activity,
    search_users,
    user_card,
    user_skill_stats,
    users_with_location,
)
from devhub.services.project_service import project_stats
from devhub.services.skill_service import category_stats, ranked_active_skills
from devhub.utils.password_hash import hash_password, verify_password
from devhub.utils.rate_limit import sensitive_limit


router = APIRouter(dependencies=[Depends(get_current_user)])

logger = logging.getLogger(__name__)


def _get_user_by_username(db: Session, username: str) -> User:
    user = find_by_username(db, username)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with username '{username}' not found")
    return user


@router.get("", response_model=Envelope[ProfileData])
def read_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[ProfileData]:
    return Envelope(
        data=ProfileData(
            user=UserRead.model_validate(current_user),
            stats=profile_stats(db, current_user.id),
            recent_activity=recent_activity(db, current_user.id),
        )
    )


@router.put("", response_model=Envelope[UserData])
def update_profile(payload: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[UserData]:
    updates = payload.model_dump(exclude_unset=True, exclude={"location"})
    for field in ("username", "first_name", "last_name"):
        if field in updates and updates[field] is None:
            updates.pop(field)
    if "bio" in updates:
        updates["bio"] = updates["bio"] or None

    if "username" in updates:
        username = updates["username"].lower()
        if username_taken(db, username, exclude_id=current_user.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is already taken")
        updates["username"] = username

    for field, value in updates.items():
        setattr(current_user, field, value)

    if "location" in payload.model_fields_set:
        current_user.set_location(payload.location.model_dump() if payload.location else None)

    db.commit()
    db.refresh(current_user)
    return Envelope(message="Profile updated successfully", data=UserData(user=UserRead.model_validate(current_user)))


@router.delete("", response_model=Envelope[None])
@sensitive_limit()
def remove_account(
    request: Request,
    response: Response,
    payload: AccountDelete | None = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[None]:
    if not payload or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password required to delete account")
    if not verify_password(payload.password, current_user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid password")

    delete_account(db, current_user)
    clear_auth_cookies(response)
    return Envelope(message="Account deleted successfully")


@router.put("/password", response_model=Envelope[None])
@sensitive_limit()
def change_password(
    request: Request,
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[None]:
    if payload.new_password != payload.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password confirmation does not match")
    if not verify_password(payload.current_password, current_user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    current_user.password = hash_password(payload.new_password)
    db.commit()
    logger.info("users.password_changed user_id=%s", current_user.id)
    return Envelope(message="Password changed successfully")


@router.get("/dashboard", response_model=Envelope[DashboardData])
def read_dashboard(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[DashboardData]:
    return Envelope(data=dashboard_data(db, current_user))


@router.get("/map-users", response_model=Envelope[MapUsersData])
def read_map_users(db: Session = Depends(get_db)) -> Envelope[MapUsersData]:
    users = users_with_location(db).order_by(User.id.asc()).limit(100).all()
    return Envelope(data=MapUsersData(users=[DirectoryUser.from_user(u) for u in users]))


@router.get("/all-users", response_model=Envelope[AllUsersData])
def read_all_users(db: Session = Depends(get_db)) -> Envelope[AllUsersData]:
    users = [DirectoryUser.from_user(u) for u in db.query(User).order_by(User.id.asc()).all()]
    return Envelope(message="All users retrieved successfully", data=AllUsersData(users=users, total=len(users)))


@router.get("/search-users", response_model=Envelope[SearchUsersData])
def read_search_users(
    query: str = "",
    limit: int = Query(default=100, ge=1, le=100),
    db: Session = Depends(get_db),
) -> Envelope[SearchUsersData]:
    users = [DirectoryUser.from_user(u, truncate_bio=True) for u in search_users(db, query, limit)]
    return Envelope(data=SearchUsersData(users=users, query=query.strip(), count=len(users)))


@router.get("/{username}/dashboard", response_model=Envelope[DashboardData])
def read_user_dashboard(username: str, db: Session = Depends(get_db)) -> Envelope[DashboardData]:
    user = _get_user_by_username(db, username)
    return Envelope(data=dashboard_data(db, user, include_card=True))


@router.get("/{username}/profile", response_model=Envelope[PublicProfileData])
def read_user_profile(username: str, db: Session = Depends(get_db)) -> Envelope[PublicProfileData]:
    user = _get_user_by_username(db, username)
    return Envelope(
        data=PublicProfileData(
            user=PublicUser.model_validate(user),
            stats=profile_stats(db, user.id),
            recent_activity=recent_activity(db, user.id, include_skills=False),
        )
    )


@router.get("/{username}/skills", response_model=Envelope[UserSkillsData])
def read_user_skills(username: str, db: Session = Depends(get_db)) -> Envelope[UserSkillsData]:
    user = _get_user_by_username(db, username)
    skills = ranked_active_skills(db, user.id)
    return Envelope(
        data=UserSkillsData(
            user=user_card(user),
            skills=[SkillRead.model_validate(s) for s in skills],
            stats=user_skill_stats(db, user.id),
            category_stats=category_stats(db, user.id),
        )
    )


@router.get("/{username}/projects", response_model=Envelope[UserProjectsData])
def read_user_projects(username: str, db: Session = Depends(get_db)) -> Envelope[UserProjectsData]:
    user = _get_user_by_username(db, username)
    projects = db.query(Project).filter(Project.user_id == user.id).order_by(Project.created_at.desc(), Project.id.desc()).all()
    return Envelope(
        data=UserProjectsData(
            user=user_card(user),
            projects=[ProjectRead.model_validate(p) for p in projects],
            stats=project_stats(db, user.id),
        )
    )
