"""
Site-wide settings repository.

Both settings tables hold a single row; reads never create it, writes upsert.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from storefront.db import models, schemas

_READ_ONLY_COLUMNS = {"id", "created_at", "updated_at"}


def settings_columns() -> set[str]:
    return {c.name for c in models.SiteSettings.__table__.columns} - _READ_ONLY_COLUMNS


def get_site_settings(db: Session) -> Optional[models.SiteSettings]:
    return db.query(models.SiteSettings).order_by(models.SiteSettings.created_at).first()


def upsert_site_settings(db: Session, values: Dict[str, Any]) -> models.SiteSettings:
    """Apply known columns from ``values``; unknown keys are ignored."""
    allowed = settings_columns()
    row = get_site_settings(db)
    if row is None:
        row = models.SiteSettings()
        db.add(row)
    for key, value in values.items():
        if key in allowed:
            setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def settings_to_dict(row: Optional[models.SiteSettings]) -> Dict[str, Any]:
    if row is None:
        return {}
    return {c.name: getattr(row, c.name) for c in models.SiteSettings.__table__.columns}


def get_blog_settings(db: Session) -> models.BlogSettings:
    row = db.query(models.BlogSettings).filter(models.BlogSettings.id == 'default').first()
    if row is None:
        row = models.BlogSettings(id='default')
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def update_blog_settings(db: Session, update: schemas.BlogSettingsUpdate) -> models.BlogSettings:
    row = get_blog_settings(db)
    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row
