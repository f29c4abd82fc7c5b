from __future__ import annotations

from devhub.database import SessionLocal
from devhub.models.user import User


def mark_verified(email: str) -> None:
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).one()
        user.is_verified = True
        db.commit()


def set_suspended(email: str, suspended: bool = True) -> None:
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).one()
        user.is_suspended = suspended
        db.commit()
