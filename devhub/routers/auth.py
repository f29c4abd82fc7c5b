# auth.py
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devhub.config import is_admin_email, settings
from devhub.database import get_db
from devhub.models.user import User
from devhub.routers.dependencies import REFRESH_COOKIE, clear_auth_cookies, get_current_user, set_auth_cookies
from devhub.schemas.auth import AuthData, CheckEmailRequest, EmailCheck, LoginRequest, RefreshRequest, RegisterRequest
from devhub.schemas.common import Envelope, normalize_email
from devhub.schemas.user import UserRead
from devhub.schemas.dashboard import UserData
from devhub.services.account_service import derive_username, username_taken
from devhub.utils.dates import utc_now
from devhub.utils.jwt_handler import MissingSecretError, TokenError, create_token_pair, decode_refresh_token
from devhub.utils.password_hash import hash_password, verify_password
from devhub.utils.rate_limit import auth_limit, register_limit


router = APIRouter()

logger = logging.getLogger(__name__)


def _issue_tokens(response: Response, user: User) -> AuthData:
    try:
        token, refresh_token = create_token_pair(user.id, user.email)
    except MissingSecretError:
        logger.error("auth.tokens JWT_SECRET is not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")
    set_auth_cookies(response, token, refresh_token)
    return AuthData(user=UserRead.model_validate(user), token=token, refresh_token=refresh_token)


@router.post("/register", response_model=Envelope[AuthData], status_code=status.HTTP_201_CREATED)
@register_limit()
def register_user(request: Request, response: Response, user_in: RegisterRequest, db: Session = Depends(get_db)) -> Envelope[AuthData]:
    existing_user = db.query(User).filter(User.email == user_in.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists with this email")

    if user_in.username:
        username = user_in.username.lower()
        if username_taken(db, username):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is already taken")
    else:
        username = derive_username(db, user_in.email)

    user = User(
        email=user_in.email,
        password=hash_password(user_in.password),
        username=username,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        bio=user_in.bio or None,
        role="admin" if is_admin_email(user_in.email) else "user",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists with this email")
    db.refresh(user)

    logger.info("auth.register user_id=%s role=%s", user.id, user.role)
    return Envelope(message="User registered successfully", data=_issue_tokens(response, user))


@router.post("/login", response_model=Envelope[AuthData])
@auth_limit()
def login_user(request: Request, response: Response, user_in: LoginRequest, db: Session = Depends(get_db)) -> Envelope[AuthData]:
    user = db.query(User).filter(User.email == user_in.email).first()
    if not user or not verify_password(user_in.password, user.password):
        logger.info("auth.login failed email=%s", user_in.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if settings.require_email_verification and not user.is_verified:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account not verified. Please verify your email.")
    if user.is_suspended:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is suspended")

    user.last_login = utc_now()
    db.commit()
    db.refresh(user)
    return Envelope(message="Login successful", data=_issue_tokens(response, user))


@router.post("/refresh-token", response_model=Envelope[AuthData])
@auth_limit()
def refresh_tokens(
    request: Request,
    response: Response,
    payload: RefreshRequest | None = Body(default=None),
    db: Session = Depends(get_db),
) -> Envelope[AuthData]:
    token = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")

    try:
        claims = decode_refresh_token(token)
    except MissingSecretError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")
    except TokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.get(User, claims["userId"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    if user.is_suspended:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is suspended")

    return Envelope(message="Tokens refreshed successfully", data=_issue_tokens(response, user))


@router.post("/check-email", response_model=Envelope[EmailCheck])
@auth_limit()
def check_email(request: Request, payload: CheckEmailRequest | None = Body(default=None), db: Session = Depends(get_db)) -> Envelope[EmailCheck]:
    if not payload or not payload.email or not payload.email.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")
    try:
        email = normalize_email(payload.email)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please provide a valid email address")

    exists = db.query(User.id).filter(User.email == email).first() is not None
    return Envelope(data=EmailCheck(exists=exists, email=email))


@router.post("/logout", response_model=Envelope[None])
def logout_user(response: Response, current_user: User = Depends(get_current_user)) -> Envelope[None]:
    clear_auth_cookies(response)
    return Envelope(message="Logged out successfully")


@router.get("/me", response_model=Envelope[UserData])
def read_current_user(current_user: User = Depends(get_current_user)) -> Envelope[UserData]:
    return Envelope(data=UserData(user=UserRead.model_validate(current_user)))
