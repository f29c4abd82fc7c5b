# user.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from devhub.schemas.common import CamelModel, blank_to_none


class Location(CamelModel):
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)


class PublicUser(CamelModel):
    id: int
    username: Optional[str] = None
    first_name: str
    last_name: str
    full_name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    location: Optional[Location] = None
    created_at: Optional[datetime] = None


class UserRead(PublicUser):
    email: str
    role: str
    is_verified: bool
    is_suspended: bool
    last_login: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DirectoryUser(CamelModel):
    id: int
    username: Optional[str] = None
    first_name: str
    last_name: str
    full_name: str
    location: Optional[Location] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    member_since: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_user(cls, user, *, truncate_bio: bool = False) -> "DirectoryUser":
        bio = user.bio
        if truncate_bio:
            bio = bio[:100] + "..." if bio and len(bio) > 100 else (bio or "")
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            location=user.location,
            avatar=user.avatar,
            bio=bio,
            member_since=user.created_at,
            last_login=user.last_login,
        )


class UserCard(CamelModel):
    username: Optional[str] = None
    first_name: str
    last_name: str
    full_name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None


class UserUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[str] = Field(default=None, max_length=500)
    location: Optional[Location] = None

    @field_validator("username", "first_name", "last_name", "bio", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("avatar")
    @classmethod
    def _validate_avatar(cls, v: Optional[str]) -> Optional[str]:
        value = blank_to_none(v)
        if value and not value.startswith(("http://", "https://", "/")):
            raise ValueError("Avatar must be a valid URL")
        return value


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
    confirm_password: str


class AccountDelete(CamelModel):
    password: Optional[str] = None
