"""
Admin page endpoints.

Pages and their widget lists. Every write drops the cached page contexts so
the next render reflects the change.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront import widget_library
from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import pages as pages_repo
from storefront.services.page_renderer import parse_widgets
from storefront.utils.cache import invalidate_page
from storefront.utils.text import normalize_page_slug, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/pages", tags=["admin-pages"], dependencies=[Depends(get_current_admin)])


def _get_or_404(db: Session, page_id: str):
    page = pages_repo.get_page(db, page_id)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page


def _log_unknown_widgets(widgets) -> None:
    for widget in widgets:
        if not widget_library.is_known_type(widget.type):
            logger.warning("page_widget_unknown_type: type=%s id=%s", widget.type, widget.id)


def _ensure_slug_free(db: Session, slug: str, page_id: str | None = None) -> None:
    existing = pages_repo.get_page_by_slug(db, slug)
    if existing is not None and existing.id != page_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A page with this slug already exists")


@router.get("", response_model=list[schemas.Page])
def list_pages(db: Session = Depends(get_db)):
    return pages_repo.get_pages(db)


@router.post("", response_model=schemas.Page, status_code=status.HTTP_201_CREATED)
def create_page(page: schemas.PageCreate, db: Session = Depends(get_db)):
    slug = normalize_page_slug(page.slug) if page.slug else slugify(page.title)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title or slug is required")
    _ensure_slug_free(db, slug)
    _log_unknown_widgets(page.widgets)
    created = pages_repo.create_page(db, page)
    invalidate_page(created.slug)
    logger.info("page_created: id=%s slug=%s", created.id, created.slug)
    return created


@router.get("/{page_id}", response_model=schemas.Page)
def get_page(page_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, page_id)


def _update(db: Session, page_id: str, page: schemas.PageUpdate):
    current = _get_or_404(db, page_id)
    if "slug" in page.model_fields_set:
        slug = normalize_page_slug(page.slug or "")
        if not slug:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A valid slug is required")
        _ensure_slug_free(db, slug, page_id)
    if page.widgets is not None:
        _log_unknown_widgets(page.widgets)
    old_slug = current.slug
    updated = pages_repo.update_page(db, page_id, page)
    invalidate_page(old_slug)
    if updated.slug != old_slug:
        invalidate_page(updated.slug)
    return updated


@router.put("/{page_id}", response_model=schemas.Page)
def update_page(page_id: str, page: schemas.PageUpdate, db: Session = Depends(get_db)):
    return _update(db, page_id, page)


@router.patch("/{page_id}", response_model=schemas.Page)
def patch_page(page_id: str, page: schemas.PageUpdate, db: Session = Depends(get_db)):
    return _update(db, page_id, page)


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(page_id: str, db: Session = Depends(get_db)):
    page = _get_or_404(db, page_id)
    slug = page.slug
    pages_repo.delete_page(db, page_id)
    invalidate_page(slug)


@router.get("/{page_id}/widgets")
def get_page_widgets(page_id: str, db: Session = Depends(get_db)):
    page = _get_or_404(db, page_id)
    return {"widgets": parse_widgets(page.widgets)}


@router.put("/{page_id}/widgets")
def replace_page_widgets(page_id: str, payload: schemas.PageWidgetsUpdate, db: Session = Depends(get_db)):
    page = _get_or_404(db, page_id)
    _log_unknown_widgets(payload.widgets)
    updated = pages_repo.replace_page_widgets(db, page.id, payload.widgets)
    invalidate_page(updated.slug)
    return {"widgets": parse_widgets(updated.widgets)}
