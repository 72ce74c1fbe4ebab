"""
Admin authentication endpoints.

Login exchanges a username/password for a random session token stored in an
httpOnly cookie. The first admin account can be bootstrapped once.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from storefront.api.deps import (
    ADMIN_SESSION_COOKIE,
    admin_session_days,
    get_current_admin,
    rate_limited,
)
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import admin as admin_repo
from storefront.utils.rate_limit import RATE_LIMITS
from storefront.utils.runtime import cookies_secure
from storefront.utils.security import password_needs_rehash, verify_against_dummy, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/auth", tags=["admin-auth"])

MIN_PASSWORD_LENGTH = 8


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        ADMIN_SESSION_COOKIE,
        token,
        max_age=admin_session_days() * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=cookies_secure(),
        path="/",
    )


@router.post("/login", dependencies=[Depends(rate_limited("login", RATE_LIMITS.FORM_SUBMIT))])
def login(payload: schemas.LoginRequest, response: Response, db: Session = Depends(get_db)):
    username = (payload.username or "").strip()
    if not username or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username and password are required")

    purged = admin_repo.purge_expired_sessions(db)
    if purged:
        logger.info("admin_sessions_purged: count=%d", purged)

    user = admin_repo.get_admin_by_username(db, username)
    if user is None:
        # Unknown usernames cost the same as wrong passwords
        verify_against_dummy(payload.password)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.warning("admin_login_failed: username=%s", username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if password_needs_rehash(user.password_hash):
        admin_repo.set_admin_password(db, user, payload.password)

    _session, token = admin_repo.create_session(db, user, admin_session_days())
    _set_session_cookie(response, token)
    logger.info("admin_login: user_id=%s", user.id)
    return {"success": True, "user": schemas.AdminUser.model_validate(user).model_dump(by_alias=True, mode="json")}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    token = request.cookies.get(ADMIN_SESSION_COOKIE)
    if token:
        admin_repo.delete_session(db, token)
    response.delete_cookie(ADMIN_SESSION_COOKIE, path="/")
    return {"success": True}


@router.get("/me", response_model=schemas.AdminUser)
def me(admin: models.AdminUser = Depends(get_current_admin)):
    return admin


@router.post(
    "/bootstrap",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited("bootstrap", RATE_LIMITS.FORM_SUBMIT))],
)
def bootstrap(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    """Create the first admin. Refused once any admin exists."""
    if admin_repo.count_admins(db) > 0:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="An admin account already exists")
    username = (payload.username or "").strip()
    if not username or len(payload.password or "") < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Username and a password of at least {MIN_PASSWORD_LENGTH} characters are required",
        )
    user = admin_repo.create_admin(db, username, payload.password)
    logger.info("admin_bootstrap: user_id=%s", user.id)
    return schemas.AdminUser.model_validate(user).model_dump(by_alias=True, mode="json")
