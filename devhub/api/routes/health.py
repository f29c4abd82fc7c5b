from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from devhub.database import engine
from devhub.config import build_sqlalchemy_db_url, settings
from devhub.utils.rate_limit import general_limit


router = APIRouter(prefix="/health", tags=["health"])
root_router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime


class DBHealthStatus(BaseModel):
    orm: str
    dialect: str
    orm_db_url: str
    timestamp: datetime


class ApiStatus(BaseModel):
    success: bool
    message: str
    environment: str
    version: str
    timestamp: datetime


@root_router.get("/", summary="Service welcome document")
def welcome() -> dict:
    prefix = settings.api_prefix
    return {
        "success": True,
        "message": f"Welcome to {settings.app_name}",
        "version": settings.version,
        "endpoints": {
            "auth": f"{prefix}/auth",
            "projects": f"{prefix}/projects",
            "skills": f"{prefix}/skills",
            "dashboard": f"{prefix}/dashboard",
            "user": f"{prefix}/user",
            "comments": f"{prefix}/comments",
            "upload": f"{prefix}/upload",
            "news": f"{prefix}/news",
            "health": "/health/",
            "docs": "/docs",
        },
    }


@root_router.get(
    f"{settings.api_prefix}/test",
    response_model=ApiStatus,
    summary="API status",
    dependencies=[Depends(general_limit)],
)
def api_status() -> ApiStatus:
    return ApiStatus(
        success=True,
        message="DevHub API is operational",
        environment=settings.environment,
        version=settings.version,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/", response_model=HealthStatus, summary="API heartbeat")
def health_check() -> HealthStatus:
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/db", response_model=DBHealthStatus, summary="DB connectivity checks")
def db_health_check() -> DBHealthStatus:
    now = datetime.now(timezone.utc)

    orm_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        orm_status = "error"

    orm_url = build_sqlalchemy_db_url(settings)
    try:
        masked = str(make_url(orm_url).set(password="***"))
    except (ArgumentError, ValueError):
        masked = orm_url

    return DBHealthStatus(
        orm=orm_status,
        dialect=engine.dialect.name,
        orm_db_url=masked,
        timestamp=now,
    )
