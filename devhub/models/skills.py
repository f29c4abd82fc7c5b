from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from devhub.database import Base
from devhub.utils.dates import as_utc, utc_now


SKILL_CATEGORIES = ("frontend", "backend", "database", "tools", "cloud", "mobile", "other")

PROFICIENCY_LABELS = {
    1: "Beginner",
    2: "Novice",
    3: "Intermediate",
    4: "Advanced",
    5: "Expert",
}


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    proficiency_level = Column(Integer, nullable=False)
    years_of_experience = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    endorsements = Column(Integer, nullable=False, default=0)
    last_used = Column(DateTime(timezone=True), nullable=True, default=utc_now)
    certifications = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="skills")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_skills_user_id_name"),
    )

    @property
    def proficiency_label(self) -> str:
        return PROFICIENCY_LABELS.get(self.proficiency_level, "Unknown")

    @property
    def experience_level(self) -> str:
        years = self.years_of_experience
        if not years:
            return "Not specified"
        if years < 1:
            return "Less than 1 year"
        if years < 3:
            shown = int(years) if float(years).is_integer() else years
            return f"{shown} year{'s' if years > 1 else ''}"
        if years < 5:
            return "3-5 years"
        if years < 10:
            return "5-10 years"
        return "10+ years"

    @property
    def freshness(self) -> str:
        last_used = as_utc(self.last_used)
        if last_used is None:
            return "Unknown"

        diff_days = abs((utc_now() - last_used).days)
        if diff_days <= 30:
            return "Recently used"
        if diff_days <= 90:
            return "Used in last 3 months"
        if diff_days <= 365:
            return "Used in last year"
        return "Not used recently"
