from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from devhub.database import Base
from devhub.utils.dates import utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    username = Column(String(30), unique=True, index=True, nullable=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    bio = Column(Text, nullable=True)
    avatar = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="user")
    is_verified = Column(Boolean, nullable=False, default=False)
    is_suspended = Column(Boolean, nullable=False, default=False)

    # Optional geo-location, stored flat; all four are cleared together.
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    projects = relationship("Project", back_populates="user", cascade="all, delete-orphan")
    skills = relationship("Skill", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def location(self) -> dict | None:
        if not self.has_location:
            return None
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city or "",
            "country": self.country or "",
        }

    def set_location(self, location: dict | None) -> None:
        if location and isinstance(location.get("latitude"), (int, float)) and isinstance(location.get("longitude"), (int, float)):
            self.latitude = float(location["latitude"])
            self.longitude = float(location["longitude"])
            self.city = location.get("city") or ""
            self.country = location.get("country") or ""
        else:
            self.latitude = None
            self.longitude = None
            self.city = None
            self.country = None
