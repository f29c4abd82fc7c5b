from __future__ import annotations

import math

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from devhub.database import Base
from devhub.utils.dates import utc_now


FILE_TYPES = ("image", "video", "document", "other")

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


class Upload(Base):
    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_type = Column(String(20), nullable=False, index=True)
    file_size = Column(BigInteger().with_variant(Integer, "sqlite"), nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    alt_text = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    project = relationship("Project", back_populates="uploads")

    @property
    def file_extension(self) -> str:
        parts = (self.file_name or "").split(".")
        return parts[-1].lower() if len(parts) > 1 else ""

    @property
    def formatted_size(self) -> str:
        size = int(self.file_size or 0)
        if size <= 0:
            return "0 Bytes"
        i = min(int(math.floor(math.log(size, 1024))), len(_SIZE_UNITS) - 1)
        value = round(size / math.pow(1024, i), 2)
        # "1.0 KB" reads as "1 KB"
        shown = int(value) if float(value).is_integer() else value
        return f"{shown} {_SIZE_UNITS[i]}"

    @property
    def file_url(self) -> str:
        path = self.file_path or ""
        return path if path.startswith("/") else f"/{path}"
