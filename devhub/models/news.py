from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from devhub.database import Base
from devhub.utils.dates import utc_now


class News(Base):
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(250), unique=True, index=True, nullable=False)
    preview = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=True)
    author = Column(String(100), nullable=False)
    published = Column(Boolean, nullable=False, default=False, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
