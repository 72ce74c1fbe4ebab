"""
Page repository functions.

Slugs are stored without surrounding slashes; the widget list is kept as the
JSON array the page editor submits.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.db import models, schemas
from storefront.utils.text import normalize_page_slug, slugify


def _widgets_payload(widgets) -> List[Dict[str, Any]]:
    return [w.model_dump(by_alias=True) for w in widgets]


def get_pages(db: Session) -> List[models.Page]:
    return db.query(models.Page).order_by(models.Page.title).all()


def get_page(db: Session, page_id: str) -> Optional[models.Page]:
    return db.query(models.Page).filter(models.Page.id == page_id).first()


def get_page_by_slug(db: Session, slug: str) -> Optional[models.Page]:
    return db.query(models.Page).filter(models.Page.slug == normalize_page_slug(slug)).first()


def get_nav_pages(db: Session) -> List[models.Page]:
    return (
        db.query(models.Page)
        .filter(models.Page.is_active.is_(True))
        .order_by(models.Page.nav_order)
        .all()
    )


def create_page(db: Session, page: schemas.PageCreate) -> models.Page:
    data = page.model_dump(exclude={"widgets"})
    data["slug"] = normalize_page_slug(page.slug) if page.slug else slugify(page.title)
    db_page = models.Page(**data, widgets=_widgets_payload(page.widgets))
    db.add(db_page)
    db.commit()
    db.refresh(db_page)
    return db_page


def update_page(db: Session, page_id: str, page: schemas.PageUpdate) -> Optional[models.Page]:
    db_page = get_page(db, page_id)
    if not db_page:
        return None
    data = page.model_dump(exclude_unset=True, exclude={"widgets"})
    if data.get("slug"):
        data["slug"] = normalize_page_slug(data["slug"])
    for key, value in data.items():
        setattr(db_page, key, value)
    if page.widgets is not None:
        db_page.widgets = _widgets_payload(page.widgets)
    db.commit()
    db.refresh(db_page)
    return db_page


def replace_page_widgets(db: Session, page_id: str, widgets: List[schemas.PageWidget]) -> Optional[models.Page]:
    db_page = get_page(db, page_id)
    if not db_page:
        return None
    db_page.widgets = _widgets_payload(widgets)
    db.commit()
    db.refresh(db_page)
    return db_page


def delete_page(db: Session, page_id: str) -> bool:
    try:
        db_page = get_page(db, page_id)
        if not db_page:
            return False
        db.delete(db_page)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete page {page_id}: {str(e)}")
