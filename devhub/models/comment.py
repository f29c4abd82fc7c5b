from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import backref, relationship

from devhub.database import Base
from devhub.utils.dates import utc_now


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True, index=True)
    # Replies are one level deep: a parent never has a parent of its own.
    parent_comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    project = relationship("Project", back_populates="comments")
    user = relationship("User", back_populates="comments")
    replies = relationship(
        "Comment",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
        backref=backref("parent", remote_side=[id]),
    )

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None
