"""Custom popup repository functions."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.db import models, schemas


def get_popups(db: Session) -> List[models.CustomPopup]:
    return db.query(models.CustomPopup).order_by(models.CustomPopup.created_at.desc()).all()


def get_live_popups(db: Session) -> List[models.CustomPopup]:
    """Live popups, highest priority first; newest wins a priority tie."""
    return (
        db.query(models.CustomPopup)
        .filter(models.CustomPopup.status == 'live')
        .order_by(models.CustomPopup.priority.desc(), models.CustomPopup.created_at.desc())
        .all()
    )


def get_popup(db: Session, popup_id: str) -> Optional[models.CustomPopup]:
    return db.query(models.CustomPopup).filter(models.CustomPopup.id == popup_id).first()


def create_popup(db: Session, popup: schemas.CustomPopupCreate) -> models.CustomPopup:
    data = popup.model_dump()
    data["name"] = (popup.name or "").strip()
    db_popup = models.CustomPopup(**data)
    db.add(db_popup)
    db.commit()
    db.refresh(db_popup)
    return db_popup


def update_popup(db: Session, popup_id: str, popup: schemas.CustomPopupUpdate) -> Optional[models.CustomPopup]:
    db_popup = get_popup(db, popup_id)
    if not db_popup:
        return None
    for key, value in popup.model_dump(exclude_unset=True).items():
        if key == "name" and not (value or "").strip():
            continue
        setattr(db_popup, key, value)
    db.commit()
    db.refresh(db_popup)
    return db_popup


def increment_counter(db: Session, popup_id: str, field: str) -> bool:
    """Atomically bump ``view_count`` or ``conversion_count``."""
    if field not in ("view_count", "conversion_count"):
        raise ValueError(f"Unknown popup counter: {field}")
    column = getattr(models.CustomPopup, field)
    updated = (
        db.query(models.CustomPopup)
        .filter(models.CustomPopup.id == popup_id)
        .update({column: column + 1}, synchronize_session=False)
    )
    db.commit()
    return bool(updated)


def delete_popup(db: Session, popup_id: str) -> bool:
    try:
        db_popup = get_popup(db, popup_id)
        if not db_popup:
            return False
        db.delete(db_popup)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete popup {popup_id}: {str(e)}")
