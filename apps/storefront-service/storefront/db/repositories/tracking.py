"""Anonymous analytics rows and the dashboard summary queries."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.db import models


def record_page_view(db: Session, values: Dict[str, Any]) -> models.PageView:
    row = models.PageView(**values)
    db.add(row)
    db.commit()
    return row


def record_click(db: Session, values: Dict[str, Any]) -> models.ClickTracking:
    row = models.ClickTracking(**values)
    db.add(row)
    db.commit()
    return row


def page_view_count(db: Session, since: datetime) -> int:
    return db.query(func.count(models.PageView.id)).filter(models.PageView.created_at >= since).scalar() or 0


def unique_visitor_count(db: Session, since: datetime) -> int:
    return (
        db.query(func.count(func.distinct(models.PageView.visitor_id)))
        .filter(models.PageView.created_at >= since, models.PageView.visitor_id.isnot(None))
        .scalar()
        or 0
    )


def click_count(db: Session, since: datetime) -> int:
    return (
        db.query(func.count(models.ClickTracking.id))
        .filter(models.ClickTracking.created_at >= since)
        .scalar()
        or 0
    )


def top_pages(db: Session, since: datetime, limit: int = 10) -> List[Dict[str, Any]]:
    views = func.count(models.PageView.id).label("views")
    rows = (
        db.query(models.PageView.path, views)
        .filter(models.PageView.created_at >= since)
        .group_by(models.PageView.path)
        .order_by(views.desc(), models.PageView.path)
        .limit(limit)
        .all()
    )
    return [{"path": path, "views": count} for path, count in rows]


def top_clicked_products(db: Session, since: datetime, limit: int = 10) -> List[Dict[str, Any]]:
    clicks = func.count(models.ClickTracking.id).label("clicks")
    rows = (
        db.query(models.ClickTracking.product_slug, clicks)
        .filter(models.ClickTracking.created_at >= since, models.ClickTracking.product_slug.isnot(None))
        .group_by(models.ClickTracking.product_slug)
        .order_by(clicks.desc(), models.ClickTracking.product_slug)
        .limit(limit)
        .all()
    )
    return [{"productSlug": slug, "clicks": count} for slug, count in rows]


def device_breakdown(db: Session, since: datetime) -> Dict[str, int]:
    rows = (
        db.query(models.PageView.device, func.count(models.PageView.id))
        .filter(models.PageView.created_at >= since)
        .group_by(models.PageView.device)
        .all()
    )
    return {(device or "unknown"): count for device, count in rows}
