# auth.py
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from devhub.schemas.common import CamelModel, normalize_email
from devhub.schemas.user import UserRead


class RegisterRequest(CamelModel):
    email: str
    password: str = Field(min_length=6, max_length=128)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    username: Optional[str] = Field(default=None, min_length=1, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("first_name", "last_name", "bio", "username", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return normalize_email(v)


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class CheckEmailRequest(CamelModel):
    email: Optional[str] = None


class AuthData(CamelModel):
    user: UserRead
    token: str
    refresh_token: str


class EmailCheck(CamelModel):
    exists: bool
    email: str
