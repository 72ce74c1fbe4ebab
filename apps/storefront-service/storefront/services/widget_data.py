"""
Widget data aggregation.

Given the widget types visible on a page, load only the shared rows those
widgets render. Results are plain dicts so composed pages can be cached and
reused across requests.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.db import models

logger = logging.getLogger(__name__)


def row_to_dict(row) -> Dict[str, Any]:
    """Column values of an ORM row keyed by column name."""
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


def _active(db: Session, model) -> List[Dict[str, Any]]:
    rows = (
        db.query(model)
        .filter(model.is_active.is_(True))
        .order_by(model.sort_order)
        .all()
    )
    return [row_to_dict(r) for r in rows]


def _review_collections(reviews: List[Dict[str, Any]]) -> List[str]:
    names: List[str] = []
    for review in reviews:
        name = review.get("collection_name")
        if name and name not in names:
            names.append(name)
    return names


def _all_keywords(db: Session) -> List[Dict[str, Any]]:
    rows = db.query(models.ReviewKeyword).order_by(models.ReviewKeyword.sort_order).all()
    return [row_to_dict(r) for r in rows]


# widget type -> [(data key, loader)]
_LOADERS: Dict[str, List[tuple]] = {
    "hero_carousel": [("heroSlides", lambda db: _active(db, models.HeroSlide))],
    "product_grid": [("products", lambda db: _active(db, models.Product))],
    "testimonials": [("testimonials", lambda db: _active(db, models.Testimonial))],
    "video_testimonials": [("videos", lambda db: _active(db, models.VideoTestimonial))],
    "instagram": [("instagramPosts", lambda db: _active(db, models.InstagramPost))],
    "faqs": [("faqs", lambda db: _active(db, models.Faq))],
    "reviews": [
        ("reviews", lambda db: _active(db, models.Review)),
        ("reviewKeywords", _all_keywords),
    ],
}


def _load(db: Session, key: str, loader: Callable[[Session], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    try:
        return loader(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("widget_data_fetch_failed: key=%s error=%s", key, e)
        return []


def get_widget_data(db: Session, widget_types: Iterable[str]) -> Dict[str, Any]:
    """Fetch data for the global widgets among ``widget_types``.

    Keys for widget types that are not present are left out entirely; a
    failing query yields an empty list for its key so the page still renders.
    """
    present = set(widget_types)
    data: Dict[str, Any] = {}
    for widget_type, loaders in _LOADERS.items():
        if widget_type not in present:
            continue
        for key, loader in loaders:
            data[key] = _load(db, key, loader)
    if "reviews" in data:
        data["reviewCollections"] = _review_collections(data["reviews"])
    if "heroSlides" in data and not data["heroSlides"]:
        logger.warning("widget_data_empty: key=heroSlides")
    return data
