"""
API dependency helpers.

Admin identity comes from the ``admin_session`` cookie; public endpoints get
per-IP rate limiting and the anonymous visitor/session cookies.
"""
import logging
import os
import uuid
from typing import Callable, Optional, Tuple

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from storefront.db import models
from storefront.db.database import get_db
from storefront.db.repositories import admin as admin_repo
from storefront.utils.rate_limit import (
    RateLimitConfig,
    RateLimitResult,
    admin_rate_limit,
    get_client_ip,
    limiter,
)
from storefront.utils.runtime import cookies_secure, dev_mode_active
from storefront.utils.security import is_valid_token_format

logger = logging.getLogger(__name__)

ADMIN_SESSION_COOKIE = "admin_session"
PREVIEW_TOKEN_COOKIE = "preview_token"
PREVIEW_SESSION_COOKIE = "preview_session"
VISITOR_COOKIE = "visitor_id"
SESSION_COOKIE = "session_id"

VISITOR_COOKIE_MAX_AGE = 365 * 24 * 60 * 60
SESSION_COOKIE_MAX_AGE = 30 * 60

_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RateLimitExceeded(Exception):
    """Raised by rate-limit dependencies; rendered as a 429 by the app."""

    def __init__(self, result: RateLimitResult, detail: str = "Too many requests. Please try again later."):
        super().__init__(detail)
        self.result = result
        self.detail = detail


def admin_session_days() -> int:
    raw = os.getenv("ADMIN_SESSION_DAYS", "7")
    return int(raw) if raw.isdigit() and int(raw) > 0 else 7


def client_ip(request: Request) -> str:
    peer = request.client.host if request.client else None
    return get_client_ip(request.headers, fallback=peer)


def rate_limited(name: str, config: RateLimitConfig) -> Callable[[Request], None]:
    """Dependency factory: per-IP fixed-window budget under ``name``."""

    def _dependency(request: Request) -> None:
        result = limiter.check(f"{name}:{client_ip(request)}", config)
        if not result.success:
            logger.info("rate_limited: bucket=%s ip=%s", name, client_ip(request))
            raise RateLimitExceeded(result)

    return _dependency


def _dev_admin() -> models.AdminUser:
    return models.AdminUser(id="dev", username="dev@localhost", password_hash="")


def get_current_admin(request: Request, db: Session = Depends(get_db)) -> models.AdminUser:
    """Resolve the signed-in admin or raise 401; also applies the admin rate limit."""
    if dev_mode_active():
        return _dev_admin()

    token = request.cookies.get(ADMIN_SESSION_COOKIE)
    if not token or not is_valid_token_format(token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    session = admin_repo.get_active_session(db, token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")

    result = admin_rate_limit(session.id, is_write_operation=request.method in _WRITE_METHODS)
    if not result.success:
        raise RateLimitExceeded(result)
    return session.user


def has_preview_access(request: Request) -> bool:
    """Draft content is visible to admins and holders of a preview cookie."""
    cookies = request.cookies
    return bool(
        cookies.get(PREVIEW_TOKEN_COOKIE)
        or cookies.get(PREVIEW_SESSION_COOKIE)
        or cookies.get(ADMIN_SESSION_COOKIE)
    )


def visitor_cookies(request: Request, response: Response) -> Tuple[str, str]:
    """Read or mint the visitor (1 year) and session (30 min, sliding) ids."""
    visitor_id = request.cookies.get(VISITOR_COOKIE) or uuid.uuid4().hex
    session_id = request.cookies.get(SESSION_COOKIE) or uuid.uuid4().hex
    secure = cookies_secure()
    response.set_cookie(
        VISITOR_COOKIE, visitor_id, max_age=VISITOR_COOKIE_MAX_AGE, httponly=True, samesite="lax", secure=secure,
    )
    response.set_cookie(
        SESSION_COOKIE, session_id, max_age=SESSION_COOKIE_MAX_AGE, httponly=True, samesite="lax", secure=secure,
    )
    return visitor_id, session_id


def get_visitor_ids(request: Request) -> Tuple[Optional[str], Optional[str]]:
    return request.cookies.get(VISITOR_COOKIE), request.cookies.get(SESSION_COOKIE)
