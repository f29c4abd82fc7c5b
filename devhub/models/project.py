from __future__ import annotations

import math

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship, validates

from devhub.database import Base
from devhub.utils.dates import utc_now


PROJECT_STATUSES = ("planning", "in-progress", "completed", "archived")
PROJECT_PRIORITIES = ("low", "medium", "high")
MAX_TECHNOLOGIES = 20

_PROGRESS_BY_STATUS = {
    "planning": 10,
    "in-progress": 50,
    "completed": 100,
    "archived": 100,
}


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    technologies = Column(JSON, nullable=False, default=list)
    github_url = Column(String(500), nullable=True)
    live_url = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="planning", index=True)
    priority = Column(String(10), nullable=False, default="medium")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="projects")
    comments = relationship("Comment", back_populates="project", cascade="all, delete-orphan")
    uploads = relationship("Upload", back_populates="project", cascade="all, delete-orphan")

    @validates("technologies")
    def _validate_technologies(self, key, value):
        value = list(value or [])
        if len(value) > MAX_TECHNOLOGIES:
            raise ValueError(f"Cannot have more than {MAX_TECHNOLOGIES} technologies per project")
        return value

    @property
    def duration(self) -> str | None:
        if not self.start_date or not self.end_date:
            return None

        diff_days = abs((self.end_date - self.start_date).days)
        if diff_days < 30:
            return f"{diff_days} days"
        if diff_days < 365:
            months = math.floor(diff_days / 30)
            return f"{months} month{'s' if months > 1 else ''}"
        years = math.floor(diff_days / 365)
        return f"{years} year{'s' if years > 1 else ''}"

    @property
    def progress(self) -> int:
        return _PROGRESS_BY_STATUS.get(self.status, 0)
