"""Admin users and their login sessions."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.db import models
from storefront.utils.security import generate_session_token, hash_password


def get_admin_by_username(db: Session, username: str) -> Optional[models.AdminUser]:
    return db.query(models.AdminUser).filter(models.AdminUser.username == username).first()


def count_admins(db: Session) -> int:
    return db.query(func.count(models.AdminUser.id)).scalar() or 0


def create_admin(db: Session, username: str, password: str) -> models.AdminUser:
    user = models.AdminUser(username=username.strip(), password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_admin_password(db: Session, user: models.AdminUser, password: str) -> models.AdminUser:
    user.password_hash = hash_password(password)
    db.commit()
    db.refresh(user)
    return user


def create_session(db: Session, user: models.AdminUser, days: int) -> Tuple[models.AdminSession, str]:
    token = generate_session_token()
    session = models.AdminSession(
        user_id=user.id,
        token=token,
        expires_at=models.now_utc() + timedelta(days=days),
    )
    user.last_login_at = models.now_utc()
    db.add(session)
    db.commit()
    db.refresh(session)
    return session, token


def get_active_session(db: Session, token: str, now: Optional[datetime] = None) -> Optional[models.AdminSession]:
    """Session for ``token`` if it exists and has not expired."""
    session = db.query(models.AdminSession).filter(models.AdminSession.token == token).first()
    if session is None:
        return None
    now = now or models.now_utc()
    if models.as_utc(session.expires_at) <= now:
        return None
    return session


def delete_session(db: Session, token: str) -> bool:
    deleted = db.query(models.AdminSession).filter(models.AdminSession.token == token).delete(
        synchronize_session=False
    )
    db.commit()
    return bool(deleted)


def purge_expired_sessions(db: Session, now: Optional[datetime] = None) -> int:
    now = now or models.now_utc()
    deleted = db.query(models.AdminSession).filter(models.AdminSession.expires_at <= now).delete(
        synchronize_session=False
    )
    db.commit()
    return deleted
