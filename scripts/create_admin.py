from __future__ import annotations

import argparse
import secrets
import string
import sys

from devhub.config import build_sqlalchemy_db_url, is_admin_email, settings
from devhub.database import Base, SessionLocal, engine
from devhub.models.user import User
from devhub.services.account_service import derive_username
from devhub.utils.password_hash import hash_password


def _ensure_tables() -> None:
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def _generate_password(length: int = 20) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Create (or promote) an admin account. "
            "The account is marked verified and given the admin role."
        )
    )
    parser.add_argument("--email", required=True, help="Admin user email")
    parser.add_argument("--password", default=None, help="Admin user password (generated if omitted)")
    parser.add_argument("--first-name", default="Admin", help="First name")
    parser.add_argument("--last-name", default="User", help="Last name")
    parser.add_argument(
        "--update-password",
        action="store_true",
        help="If the user exists, overwrite their password",
    )

    args = parser.parse_args(argv)
    email = args.email.strip().lower()

    _ensure_tables()

    password = args.password or _generate_password()

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                password=hash_password(password),
                username=derive_username(db, email),
                first_name=args.first_name,
                last_name=args.last_name,
                role="admin",
                is_verified=True,
            )
            db.add(user)
            created = True
        else:
            created = False
            user.role = "admin"
            user.is_verified = True
            user.is_suspended = False
            if args.update_password:
                user.password = hash_password(password)
        db.commit()
        db.refresh(user)
        user_id = user.id

    if not is_admin_email(email):
        sys.stderr.write(
            "NOTE: this email is not in ADMIN_EMAILS; the role was set directly on the account.\n"
        )

    if created:
        # Print the password so the operator can log in immediately.
        print(f"created admin id={user_id} email={email}")
        if args.password is None:
            print(f"generated password: {password}")
    else:
        print(f"promoted existing user id={user_id} email={email}")
        if args.update_password:
            print("password updated")
        else:
            print("(password not changed)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
