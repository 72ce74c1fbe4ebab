"""
Review and review-keyword repository functions.

Reviews belong to a product or to a named collection (shared across pages);
keyword chips are stored per owner with an aggregated count.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.db import models, schemas


def _owner_filter(q, model, product_id: Optional[str], collection_name: Optional[str]):
    if product_id:
        q = q.filter(model.product_id == product_id)
    if collection_name:
        q = q.filter(model.collection_name == collection_name)
    return q


def derive_author_initial(first_name: str, last_name: Optional[str]) -> str:
    """"Jane" + "Doe" -> "Jane D."; first name alone when no last name."""
    first = (first_name or "").strip()
    last = (last_name or "").strip()
    if last:
        return f"{first} {last[0].upper()}."
    return first


def get_reviews(
    db: Session,
    *,
    product_id: Optional[str] = None,
    collection_name: Optional[str] = None,
    active_only: bool = False,
) -> List[models.Review]:
    q = _owner_filter(db.query(models.Review), models.Review, product_id, collection_name)
    if active_only:
        q = q.filter(models.Review.is_active.is_(True))
    return q.order_by(models.Review.sort_order, models.Review.created_at.desc()).all()


def get_review(db: Session, review_id: str) -> Optional[models.Review]:
    return db.query(models.Review).filter(models.Review.id == review_id).first()


def create_review(db: Session, review: schemas.ReviewCreate) -> models.Review:
    data = review.model_dump()
    if data.get("sort_order") is None:
        data["sort_order"] = 0
    if not data.get("author_initial"):
        parts = review.author_name.strip().split(" ", 1)
        data["author_initial"] = derive_author_initial(parts[0], parts[1] if len(parts) > 1 else None)
    db_review = models.Review(**data)
    db.add(db_review)
    db.commit()
    db.refresh(db_review)
    return db_review


def add_reviews(db: Session, rows: List[dict]) -> int:
    """Bulk insert pre-validated review dicts in one transaction."""
    for row in rows:
        db.add(models.Review(**row))
    db.commit()
    return len(rows)


def update_review(db: Session, review_id: str, review: schemas.ReviewUpdate) -> Optional[models.Review]:
    db_review = get_review(db, review_id)
    if not db_review:
        return None
    for key, value in review.model_dump(exclude_unset=True).items():
        setattr(db_review, key, value)
    db.commit()
    db.refresh(db_review)
    return db_review


def delete_review(db: Session, review_id: str) -> bool:
    try:
        db_review = get_review(db, review_id)
        if not db_review:
            return False
        db.delete(db_review)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete review {review_id}: {str(e)}")


def delete_reviews_for_owner(db: Session, *, product_id: Optional[str], collection_name: Optional[str]) -> int:
    q = _owner_filter(db.query(models.Review), models.Review, product_id, collection_name)
    deleted = q.delete(synchronize_session=False)
    db.commit()
    return deleted


def get_collection_names(db: Session) -> List[str]:
    """Distinct collection names in first-seen (sort) order."""
    rows = (
        db.query(models.Review.collection_name)
        .filter(models.Review.collection_name.isnot(None))
        .order_by(models.Review.sort_order, models.Review.created_at)
        .all()
    )
    seen: List[str] = []
    for (name,) in rows:
        if name and name not in seen:
            seen.append(name)
    return seen


# Keywords
def get_keywords(
    db: Session,
    *,
    product_id: Optional[str] = None,
    collection_name: Optional[str] = None,
) -> List[models.ReviewKeyword]:
    q = _owner_filter(db.query(models.ReviewKeyword), models.ReviewKeyword, product_id, collection_name)
    return q.order_by(models.ReviewKeyword.sort_order, models.ReviewKeyword.keyword).all()


def get_keyword(db: Session, keyword_id: str) -> Optional[models.ReviewKeyword]:
    return db.query(models.ReviewKeyword).filter(models.ReviewKeyword.id == keyword_id).first()


def create_keyword(db: Session, keyword: schemas.ReviewKeywordCreate) -> models.ReviewKeyword:
    data = keyword.model_dump()
    if data.get("sort_order") is None:
        data["sort_order"] = 0
    db_keyword = models.ReviewKeyword(**data)
    db.add(db_keyword)
    db.commit()
    db.refresh(db_keyword)
    return db_keyword


def update_keyword(db: Session, keyword_id: str, keyword: schemas.ReviewKeywordUpdate) -> Optional[models.ReviewKeyword]:
    db_keyword = get_keyword(db, keyword_id)
    if not db_keyword:
        return None
    for key, value in keyword.model_dump(exclude_unset=True).items():
        setattr(db_keyword, key, value)
    db.commit()
    db.refresh(db_keyword)
    return db_keyword


def delete_keyword(db: Session, keyword_id: str) -> bool:
    db_keyword = get_keyword(db, keyword_id)
    if not db_keyword:
        return False
    db.delete(db_keyword)
    db.commit()
    return True


def merge_keyword_counts(
    db: Session,
    counts: Dict[str, int],
    *,
    product_id: Optional[str],
    collection_name: Optional[str],
    replace: bool = False,
) -> List[models.ReviewKeyword]:
    """Add ``counts`` to existing keyword rows for the owner (or reset them first)."""
    existing = {k.keyword.lower(): k for k in get_keywords(db, product_id=product_id, collection_name=collection_name)}
    if replace:
        for row in existing.values():
            db.delete(row)
        existing = {}
    next_order = len(existing)
    for keyword, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        row = existing.get(keyword.lower())
        if row:
            row.count = (row.count or 0) + count
            continue
        db.add(models.ReviewKeyword(
            product_id=product_id,
            collection_name=collection_name,
            keyword=keyword,
            count=count,
            sort_order=next_order,
        ))
        next_order += 1
    db.commit()
    return get_keywords(db, product_id=product_id, collection_name=collection_name)
