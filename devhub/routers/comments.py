# comments.py
import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from devhub.database import get_db
from devhub.models.comment import Comment
from devhub.models.project import Project
from devhub.models.user import User
from devhub.routers.dependencies import get_current_user, is_owner_or_admin, user_or_admin
from devhub.schemas.common import Envelope
from devhub.schemas.comment import (
    CommentCreate,
    CommentDeleteData,
    CommentPagination,
    CommentRead,
    CommentStats,
    CommentThread,
    CommentUpdate,
    ProjectCommentsData,
    RecentComment,
    RecentCommentsData,
)
from devhub.utils.rate_limit import comment_limit


router = APIRouter()

logger = logging.getLogger(__name__)


def _get_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def _get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


def _thread(comment: Comment) -> CommentThread:
    replies = [CommentRead.model_validate(r) for r in comment.replies]
    return CommentThread(
        **CommentRead.model_validate(comment).model_dump(),
        replies=replies,
        reply_count=len(replies),
    )


@router.get("/project/{project_id}", response_model=Envelope[ProjectCommentsData])
def read_project_comments(
    project_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
) -> Envelope[ProjectCommentsData]:
    project = _get_project(db, project_id)

    top_level = db.query(Comment).filter(
        Comment.project_id == project.id,
        Comment.is_public.is_(True),
        Comment.parent_comment_id.is_(None),
    )
    total = top_level.count()
    comments = (
        top_level.order_by(Comment.created_at.desc(), Comment.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    average, rated = (
        db.query(func.avg(Comment.rating), func.count(Comment.id))
        .filter(Comment.project_id == project.id, Comment.is_public.is_(True), Comment.rating.isnot(None))
        .one()
    )

    pages = math.ceil(total / limit)
    return Envelope(
        data=ProjectCommentsData(
            comments=[_thread(c) for c in comments],
            pagination=CommentPagination(
                page=page,
                limit=limit,
                total=total,
                pages=pages,
                has_next=page < pages,
                has_prev=page > 1,
            ),
            stats=CommentStats(
                total_comments=total,
                average_rating=float(average) if average is not None else None,
                total_ratings=int(rated or 0),
            ),
        )
    )


@router.get("/recent", response_model=Envelope[RecentCommentsData])
def read_recent_comments(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[RecentCommentsData]:
    comments = (
        db.query(Comment)
        .filter(Comment.is_public.is_(True))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(5)
        .all()
    )
    return Envelope(data=RecentCommentsData(comments=[RecentComment.model_validate(c) for c in comments]))


@router.post(
    "/project/{project_id}",
    response_model=Envelope[CommentRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_user)],
)
@comment_limit()
def create_comment(
    request: Request,
    project_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(user_or_admin),
) -> Envelope[CommentRead]:
    project = _get_project(db, project_id)

    if payload.parent_comment_id is not None:
        parent = db.get(Comment, payload.parent_comment_id)
        if not parent or parent.project_id != project.id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent comment not found")
        if parent.is_reply:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot reply to a reply. Please reply to the original comment.",
            )

    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content cannot be empty")

    comment = Comment(
        project_id=project.id,
        user_id=current_user.id,
        content=content,
        rating=payload.rating,
        parent_comment_id=payload.parent_comment_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    message = "Reply created successfully" if comment.is_reply else "Comment created successfully"
    return Envelope(message=message, data=CommentRead.model_validate(comment))


@router.put("/{comment_id}", response_model=Envelope[CommentRead])
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[CommentRead]:
    comment = _get_comment(db, comment_id)
    if not is_owner_or_admin(current_user, comment.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to update this comment")

    fields = payload.model_fields_set
    if "content" in fields and payload.content is not None:
        content = payload.content.strip()
        if not content:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content cannot be empty")
        comment.content = content
    if "rating" in fields:
        comment.rating = payload.rating
    if payload.is_public is not None and current_user.role == "admin":
        comment.is_public = payload.is_public

    db.commit()
    db.refresh(comment)
    return Envelope(message="Comment updated successfully", data=CommentRead.model_validate(comment))


@router.delete("/{comment_id}", response_model=Envelope[CommentDeleteData])
def delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Envelope[CommentDeleteData]:
    comment = _get_comment(db, comment_id)
    if not is_owner_or_admin(current_user, comment.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this comment")

    reply_count = len(comment.replies)
    db.delete(comment)
    db.commit()
    logger.info("comments.delete comment_id=%s replies=%s by=%s", comment_id, reply_count, current_user.id)

    suffix = f" along with {reply_count} replies" if reply_count > 0 else ""
    return Envelope(
        message=f"Comment deleted successfully{suffix}",
        data=CommentDeleteData(deleted_count=reply_count + 1),
    )
