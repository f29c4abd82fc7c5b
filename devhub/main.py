# main.py
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from devhub.config import build_sqlalchemy_db_url, get_cors_origins, get_upload_root, settings
from devhub.database import Base, engine
from devhub import models  # noqa: F401  (registers tables on Base.metadata)
from devhub.api.routes.health import root_router
from devhub.api.routes.health import router as health_router
from devhub.routers import admin, auth, comments, news, projects, skills, uploads, users
from devhub.utils.errors import register_exception_handlers
from devhub.utils.rate_limit import general_limit, limiter


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.state.limiter = limiter
    register_exception_handlers(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(root_router)
    application.include_router(health_router)

    prefix = settings.api_prefix
    # The general rate-limit class applies to /api only, not /health or /uploads.
    api_limit = [Depends(general_limit)]
    application.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"], dependencies=api_limit)
    application.include_router(projects.router, prefix=f"{prefix}/projects", tags=["projects"], dependencies=api_limit)
    application.include_router(skills.router, prefix=f"{prefix}/skills", tags=["skills"], dependencies=api_limit)
    # Profile and dashboard views share one router under both paths.
    application.include_router(users.router, prefix=f"{prefix}/dashboard", tags=["dashboard"], dependencies=api_limit)
    application.include_router(users.router, prefix=f"{prefix}/user", tags=["user"], dependencies=api_limit)
    application.include_router(comments.router, prefix=f"{prefix}/comments", tags=["comments"], dependencies=api_limit)
    application.include_router(uploads.router, prefix=f"{prefix}/upload", tags=["upload"], dependencies=api_limit)
    application.include_router(news.router, prefix=f"{prefix}/news", tags=["news"], dependencies=api_limit)
    application.include_router(admin.router, prefix=prefix, dependencies=api_limit)

    upload_root = get_upload_root(settings)
    (upload_root / "projects").mkdir(parents=True, exist_ok=True)
    application.mount("/uploads", StaticFiles(directory=str(upload_root)), name="uploads")

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
