# account_service.py
from __future__ import annotations

import logging
import re

from sqlalchemy.orm import Session

from devhub.models.project import Project
from devhub.models.upload import Upload
from devhub.models.user import User
from devhub.services.upload_storage import remove_stored_file


logger = logging.getLogger(__name__)

_USERNAME_CHARS = re.compile(r"[^a-z0-9_.-]")
_USERNAME_MAX = 30


def username_taken(db: Session, username: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def derive_username(db: Session, email: str) -> str:
    local = (email or "").split("@", 1)[0].lower()
    base = _USERNAME_CHARS.sub("", local)[:_USERNAME_MAX] or "user"
    candidate = base
    suffix = 1
    while username_taken(db, candidate):
        suffix += 1
        tail = str(suffix)
        candidate = f"{base[: _USERNAME_MAX - len(tail)]}{tail}"
    return candidate


def delete_account(db: Session, user: User) -> None:
    stored_paths = [
        path
        for (path,) in db.query(Upload.file_path).join(Project, Upload.project_id == Project.id).filter(Project.user_id == user.id).all()
    ]
    user_id = user.id
    db.delete(user)
    db.commit()

    for path in stored_paths:
        remove_stored_file(path)
    logger.info("account.deleted user_id=%s files_removed=%s", user_id, len(stored_paths))
