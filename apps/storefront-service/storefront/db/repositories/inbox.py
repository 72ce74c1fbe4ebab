"""Contact form submissions (admin inbox)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.db import models, schemas


def create_submission(db: Session, values: Dict[str, Any]) -> models.ContactSubmission:
    db_submission = models.ContactSubmission(**values)
    db.add(db_submission)
    db.commit()
    db.refresh(db_submission)
    return db_submission


def list_submissions(db: Session, status: Optional[str] = None) -> List[models.ContactSubmission]:
    q = db.query(models.ContactSubmission)
    if status:
        q = q.filter(models.ContactSubmission.status == status)
    return q.order_by(models.ContactSubmission.created_at.desc()).all()


def unread_count(db: Session) -> int:
    return (
        db.query(func.count(models.ContactSubmission.id))
        .filter(models.ContactSubmission.is_read.is_(False))
        .scalar()
        or 0
    )


def get_submission(db: Session, submission_id: str) -> Optional[models.ContactSubmission]:
    return db.query(models.ContactSubmission).filter(models.ContactSubmission.id == submission_id).first()


def update_submission(
    db: Session, submission_id: str, update: schemas.InboxUpdate
) -> Optional[models.ContactSubmission]:
    db_submission = get_submission(db, submission_id)
    if not db_submission:
        return None
    for key, value in update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(db_submission, key, value)
    db.commit()
    db.refresh(db_submission)
    return db_submission


def delete_submission(db: Session, submission_id: str) -> bool:
    db_submission = get_submission(db, submission_id)
    if not db_submission:
        return False
    db.delete(db_submission)
    db.commit()
    return True
