"""Admin blog endpoints: posts, tags and blog settings."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import blog as blog_repo
from storefront.db.repositories import settings as settings_repo
from storefront.utils.cache import BLOG_DATA, page_cache
from storefront.utils.text import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/blog", tags=["admin-blog"], dependencies=[Depends(get_current_admin)])


def _post_slug_free(db: Session, slug: str, post_id: Optional[str] = None) -> None:
    existing = blog_repo.get_post_by_slug(db, slug)
    if existing is not None and existing.id != post_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A post with this slug already exists")


def _tag_slug_free(db: Session, slug: str, tag_id: Optional[str] = None) -> None:
    existing = blog_repo.get_tag_by_slug(db, slug)
    if existing is not None and existing.id != tag_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A tag with this slug already exists")


# Posts
@router.get("/posts", response_model=list[schemas.BlogPost])
def list_posts(status_filter: Optional[str] = Query(None, alias="status"), db: Session = Depends(get_db)):
    return blog_repo.get_posts(db, status=status_filter)


@router.post("/posts", response_model=schemas.BlogPost, status_code=status.HTTP_201_CREATED)
def create_post(post: schemas.BlogPostCreate, db: Session = Depends(get_db)):
    slug = slugify(post.slug or post.title)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    _post_slug_free(db, slug)
    created = blog_repo.create_post(db, post)
    page_cache.invalidate_tag(BLOG_DATA)
    logger.info("blog_post_created: id=%s status=%s", created.id, created.status)
    return created


@router.post("/posts/reorder")
def reorder_posts(payload: schemas.ReorderRequest, db: Session = Depends(get_db)):
    blog_repo.reorder_posts(db, payload.ids)
    page_cache.invalidate_tag(BLOG_DATA)
    return {"success": True}


@router.get("/posts/{post_id}", response_model=schemas.BlogPost)
def get_post(post_id: str, db: Session = Depends(get_db)):
    post = blog_repo.get_post(db, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.put("/posts/{post_id}", response_model=schemas.BlogPost)
def update_post(post_id: str, post: schemas.BlogPostUpdate, db: Session = Depends(get_db)):
    if post.slug:
        _post_slug_free(db, slugify(post.slug), post_id)
    updated = blog_repo.update_post(db, post_id, post)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    page_cache.invalidate_tag(BLOG_DATA)
    return updated


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: str, db: Session = Depends(get_db)):
    if not blog_repo.delete_post(db, post_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    page_cache.invalidate_tag(BLOG_DATA)


# Tags
@router.get("/tags", response_model=list[schemas.BlogTag])
def list_tags(db: Session = Depends(get_db)):
    return blog_repo.get_tags(db)


@router.post("/tags", response_model=schemas.BlogTag, status_code=status.HTTP_201_CREATED)
def create_tag(tag: schemas.BlogTagCreate, db: Session = Depends(get_db)):
    slug = slugify(tag.slug or tag.name)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")
    _tag_slug_free(db, slug)
    created = blog_repo.create_tag(db, tag)
    page_cache.invalidate_tag(BLOG_DATA)
    return created


@router.put("/tags/{tag_id}", response_model=schemas.BlogTag)
def update_tag(tag_id: str, tag: schemas.BlogTagUpdate, db: Session = Depends(get_db)):
    if tag.slug:
        _tag_slug_free(db, slugify(tag.slug), tag_id)
    updated = blog_repo.update_tag(db, tag_id, tag)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    page_cache.invalidate_tag(BLOG_DATA)
    return updated


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: str, db: Session = Depends(get_db)):
    if not blog_repo.delete_tag(db, tag_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    page_cache.invalidate_tag(BLOG_DATA)


# Settings
@router.get("/settings", response_model=schemas.BlogSettings)
def get_blog_settings(db: Session = Depends(get_db)):
    return settings_repo.get_blog_settings(db)


@router.put("/settings", response_model=schemas.BlogSettings)
def update_blog_settings(update: schemas.BlogSettingsUpdate, db: Session = Depends(get_db)):
    updated = settings_repo.update_blog_settings(db, update)
    page_cache.invalidate_tag(BLOG_DATA)
    return updated
