"""
Blog repository functions.

Slugs derive from titles, reading time from the content word count, and the
first transition to ``published`` stamps ``published_at``.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.db import models, schemas
from storefront.utils.text import calculate_reading_time, slugify

DEFAULT_AUTHOR = "Archie's Remedies"


def _resolve_tags(db: Session, tag_ids: List[str]) -> List[models.BlogTag]:
    if not tag_ids:
        return []
    return db.query(models.BlogTag).filter(models.BlogTag.id.in_(tag_ids)).all()


def get_posts(db: Session, *, status: Optional[str] = None) -> List[models.BlogPost]:
    # Tags are batch-loaded for the whole page of posts
    q = db.query(models.BlogPost).options(selectinload(models.BlogPost.tags))
    if status:
        q = q.filter(models.BlogPost.status == status)
    return q.order_by(models.BlogPost.sort_order, models.BlogPost.created_at.desc()).all()


def get_published_posts(db: Session, *, tag_slug: Optional[str] = None) -> List[models.BlogPost]:
    q = (
        db.query(models.BlogPost)
        .options(selectinload(models.BlogPost.tags))
        .filter(models.BlogPost.status == 'published')
    )
    if tag_slug:
        q = q.filter(models.BlogPost.tags.any(models.BlogTag.slug == tag_slug))
    return q.order_by(models.BlogPost.published_at.desc()).all()


def get_post(db: Session, post_id: str) -> Optional[models.BlogPost]:
    return db.query(models.BlogPost).filter(models.BlogPost.id == post_id).first()


def get_post_by_slug(db: Session, slug: str) -> Optional[models.BlogPost]:
    return db.query(models.BlogPost).filter(models.BlogPost.slug == slug).first()


def create_post(db: Session, post: schemas.BlogPostCreate) -> models.BlogPost:
    data = post.model_dump(exclude={"tag_ids"})
    data["slug"] = slugify(post.slug or post.title)
    data["author_name"] = post.author_name or DEFAULT_AUTHOR
    data["reading_time"] = calculate_reading_time(post.content)
    if post.status == 'published':
        data["published_at"] = models.now_utc()
    db_post = models.BlogPost(**data)
    db_post.tags = _resolve_tags(db, post.tag_ids)
    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    return db_post


def update_post(db: Session, post_id: str, post: schemas.BlogPostUpdate) -> Optional[models.BlogPost]:
    db_post = get_post(db, post_id)
    if not db_post:
        return None
    data = post.model_dump(exclude_unset=True, exclude={"tag_ids"})
    if data.get("slug"):
        data["slug"] = slugify(data["slug"])
    if "content" in data:
        data["reading_time"] = calculate_reading_time(data["content"])
    if data.get("status") == 'published' and db_post.published_at is None:
        data["published_at"] = models.now_utc()
    for key, value in data.items():
        setattr(db_post, key, value)
    if post.tag_ids is not None:
        db_post.tags = _resolve_tags(db, post.tag_ids)
    db.commit()
    db.refresh(db_post)
    return db_post


def delete_post(db: Session, post_id: str) -> bool:
    try:
        db_post = get_post(db, post_id)
        if not db_post:
            return False
        db.delete(db_post)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete blog post {post_id}: {str(e)}")


def reorder_posts(db: Session, ids: List[str]) -> None:
    for index, post_id in enumerate(ids):
        db.query(models.BlogPost).filter(models.BlogPost.id == post_id).update(
            {models.BlogPost.sort_order: index}, synchronize_session=False
        )
    db.commit()


# Tags
def get_tags(db: Session) -> List[models.BlogTag]:
    return db.query(models.BlogTag).order_by(models.BlogTag.name).all()


def get_tag(db: Session, tag_id: str) -> Optional[models.BlogTag]:
    return db.query(models.BlogTag).filter(models.BlogTag.id == tag_id).first()


def get_tag_by_slug(db: Session, slug: str) -> Optional[models.BlogTag]:
    return db.query(models.BlogTag).filter(models.BlogTag.slug == slug).first()


def create_tag(db: Session, tag: schemas.BlogTagCreate) -> models.BlogTag:
    db_tag = models.BlogTag(name=tag.name.strip(), slug=slugify(tag.slug or tag.name), color=tag.color)
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)
    return db_tag


def update_tag(db: Session, tag_id: str, tag: schemas.BlogTagUpdate) -> Optional[models.BlogTag]:
    db_tag = get_tag(db, tag_id)
    if not db_tag:
        return None
    data = tag.model_dump(exclude_unset=True)
    if data.get("slug"):
        data["slug"] = slugify(data["slug"])
    for key, value in data.items():
        setattr(db_tag, key, value)
    db.commit()
    db.refresh(db_tag)
    return db_tag


def delete_tag(db: Session, tag_id: str) -> bool:
    db_tag = get_tag(db, tag_id)
    if not db_tag:
        return False
    db.delete(db_tag)
    db.commit()
    return True
