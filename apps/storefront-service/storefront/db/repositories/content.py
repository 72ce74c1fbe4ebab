"""
Generic repository for the globally managed content lists.

Hero slides, testimonials, video testimonials, Instagram posts, FAQs,
navigation items and footer links all share the same shape: an ``is_active``
flag plus a ``sort_order`` that the admin drag-and-drop list rewrites.
"""
from __future__ import annotations

from typing import List, Type

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.db import models


def list_items(db: Session, model: Type[models.Base], *, active_only: bool = False) -> List:
    q = db.query(model)
    if active_only:
        q = q.filter(model.is_active.is_(True))
    return q.order_by(model.sort_order, model.created_at).all()


def get_item(db: Session, model: Type[models.Base], item_id: str):
    return db.query(model).filter(model.id == item_id).first()


def create_item(db: Session, model: Type[models.Base], payload: BaseModel):
    data = payload.model_dump()
    if data.get("sort_order") is None:
        # Append to the end of the list
        current_max = db.query(func.max(model.sort_order)).scalar()
        data["sort_order"] = 0 if current_max is None else current_max + 1
    item = model(**data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, model: Type[models.Base], item_id: str, payload: BaseModel):
    item = get_item(db, model, item_id)
    if not item:
        return None
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(item, key, value)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, model: Type[models.Base], item_id: str) -> bool:
    try:
        item = get_item(db, model, item_id)
        if not item:
            return False
        db.delete(item)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete {model.__tablename__} {item_id}: {str(e)}")


def reorder_items(db: Session, model: Type[models.Base], ids: List[str]) -> None:
    for index, item_id in enumerate(ids):
        db.query(model).filter(model.id == item_id).update({model.sort_order: index}, synchronize_session=False)
    db.commit()


def count_items(db: Session, model: Type[models.Base], *, active_only: bool = False) -> int:
    q = db.query(func.count(model.id))
    if active_only:
        q = q.filter(model.is_active.is_(True))
    return int(q.scalar() or 0)


def get_footer_columns(db: Session) -> dict:
    """Active footer links grouped by column header, in sort order."""
    columns: dict = {}
    for link in list_items(db, models.FooterLink, active_only=True):
        columns.setdefault(link.column or "Shop", []).append(link)
    return columns
