from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


def _normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def _parse_str_list(raw: Any) -> list[str]:
    if raw is None:
        return []

    items: list[Any]
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []

        # Support JSON array string or comma-separated string.
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = [p.strip() for p in s.split(",")]
        else:
            items = [p.strip() for p in s.split(",")]
    else:
        items = [raw]

    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def _parse_admin_emails(raw: Any) -> list[str]:
    return [_normalize_email(e) for e in _parse_str_list(raw)]


class Settings(BaseSettings):
    app_name: str = Field(default="DevHub API")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # Database configuration
    # DB_URL / ORM_DB_URL take precedence over the discrete MySQL settings.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    orm_use_mysql: bool = Field(default=False, validation_alias="ORM_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="devhub", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    # Session tokens
    # No default: protected routes answer 500 until JWT_SECRET is set.
    jwt_secret: str | None = Field(default=None, validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256")
    jwt_issuer: str = Field(default="devhub-api")
    jwt_audience: str = Field(default="devhub-client")
    jwt_expire_days: int = Field(default=30, validation_alias="JWT_EXPIRE_DAYS")
    jwt_refresh_expire_days: int = Field(default=90, validation_alias="JWT_REFRESH_EXPIRE_DAYS")
    bcrypt_rounds: int = Field(default=12, validation_alias="BCRYPT_ROUNDS")
    require_email_verification: bool = Field(default=True, validation_alias="REQUIRE_EMAIL_VERIFICATION")

    client_url: str = Field(default="http://localhost:3001", validation_alias="CLIENT_URL")
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="CORS_ORIGINS")

    # Admin bootstrap
    # - JSON array string: ADMIN_EMAILS=["admin@example.com","ops@example.com"]
    # - Comma-separated:   ADMIN_EMAILS=admin@example.com,ops@example.com
    # Accounts registered with one of these emails get the "admin" role.
    admin_emails: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="ADMIN_EMAILS")
    admin_email: str | None = Field(default=None, validation_alias="ADMIN_EMAIL")

    # File ingestion
    upload_dir: str = Field(default="uploads", validation_alias="UPLOAD_DIR")
    max_upload_size: int = Field(default=10 * 1024 * 1024, validation_alias="MAX_UPLOAD_SIZE")
    max_upload_files: int = Field(default=5, validation_alias="MAX_UPLOAD_FILES")

    # Rate limiting (slowapi limit strings, fixed window per client address)
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_storage_uri: str = Field(default="memory://", validation_alias="RATE_LIMIT_STORAGE_URI")
    rate_limit_general: str = Field(default="1200/10 minutes", validation_alias="RATE_LIMIT_GENERAL")
    rate_limit_register: str = Field(default="20/hour", validation_alias="RATE_LIMIT_REGISTER")
    rate_limit_auth: str = Field(default="30/minute", validation_alias="RATE_LIMIT_AUTH")
    rate_limit_upload: str = Field(default="20/hour", validation_alias="RATE_LIMIT_UPLOAD")
    rate_limit_comment: str = Field(default="10/10 minutes", validation_alias="RATE_LIMIT_COMMENT")
    rate_limit_sensitive: str = Field(default="20/15 minutes", validation_alias="RATE_LIMIT_SENSITIVE")

    @field_validator("admin_emails", mode="before")
    @classmethod
    def _validate_admin_emails(cls, v: Any) -> list[str]:
        return _parse_admin_emails(v)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_str_list(v)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_production(self) -> bool:
        return (self.environment or "").lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    # Development and test default to sqlite unless MySQL is explicitly requested.
    if settings.environment.lower() in {"development", "test"} and not settings.orm_use_mysql:
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; prefer DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )


def get_cors_origins(settings: Settings) -> list[str]:
    origins = list(settings.cors_origins or [])
    if settings.client_url and settings.client_url not in origins:
        origins.append(settings.client_url)
    return origins


def get_admin_allowlist() -> set[str]:
    emails: set[str] = set(_normalize_email(e) for e in (settings.admin_emails or []))
    emails.update(_parse_admin_emails(settings.admin_email))
    return emails


def is_admin_email(email: str) -> bool:
    return _normalize_email(email) in get_admin_allowlist()


def get_upload_root(settings: Settings) -> Path:
    return Path(settings.upload_dir).resolve()
