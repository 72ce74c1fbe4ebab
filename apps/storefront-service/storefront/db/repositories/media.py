"""Media library rows (assets hosted on Cloudinary)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from storefront.db import models, schemas


def list_media(
    db: Session,
    *,
    folder: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[models.MediaFile], int]:
    q = db.query(models.MediaFile)
    if folder and folder != 'all':
        q = q.filter(models.MediaFile.folder == folder)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(models.MediaFile.filename.ilike(pattern), models.MediaFile.alt_text.ilike(pattern)))
    total = q.count()
    rows = (
        q.order_by(models.MediaFile.created_at.desc())
        .offset((max(page, 1) - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def folder_counts(db: Session) -> Dict[str, int]:
    rows = db.query(models.MediaFile.folder, func.count(models.MediaFile.id)).group_by(models.MediaFile.folder).all()
    return {(folder or 'general'): count for folder, count in rows}


def get_media(db: Session, media_id: str) -> Optional[models.MediaFile]:
    return db.query(models.MediaFile).filter(models.MediaFile.id == media_id).first()


def create_media(db: Session, values: Dict[str, Any]) -> models.MediaFile:
    db_media = models.MediaFile(**values)
    db.add(db_media)
    db.commit()
    db.refresh(db_media)
    return db_media


def update_media(db: Session, media_id: str, update: schemas.MediaUpdate) -> Optional[models.MediaFile]:
    db_media = get_media(db, media_id)
    if not db_media:
        return None
    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(db_media, key, value)
    db.commit()
    db.refresh(db_media)
    return db_media


def delete_media(db: Session, media_id: str) -> bool:
    try:
        db_media = get_media(db, media_id)
        if not db_media:
            return False
        db.delete(db_media)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete media file {media_id}: {str(e)}")
