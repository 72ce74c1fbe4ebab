"""
Server-rendered storefront pages.

Every full page shares the same chrome: header and footer props, plus the
popup context when popups are enabled. While the site is in draft mode,
visitors without a preview or admin cookie are sent to the coming-soon page.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import ADMIN_SESSION_COOKIE, has_preview_access
from storefront.api.templating import templates
from storefront.db import models
from storefront.db.database import get_db
from storefront.db.repositories import admin as admin_repo
from storefront.db.repositories import blog as blog_repo
from storefront.db.repositories import content as content_repo
from storefront.db.repositories import inbox as inbox_repo
from storefront.db.repositories import popups as popups_repo
from storefront.services import page_renderer
from storefront.services.popup_targeting import get_popup_settings, render_context, select_popup
from storefront.services.widget_data import row_to_dict
from storefront.utils.feature_flags import blog_enabled, popups_enabled
from storefront.utils.runtime import dev_mode_active
from storefront.utils.security import is_valid_token_format
from storefront.utils.text import normalize_page_slug

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site"], include_in_schema=False)

COMING_SOON_PATH = "/coming-soon"


def _draft_redirect(request: Request, settings: Dict[str, Any]) -> Optional[RedirectResponse]:
    if settings.get("site_in_draft_mode") and not has_preview_access(request):
        return RedirectResponse(COMING_SOON_PATH, status_code=307)
    return None


def _popup_context(db: Session, settings: Dict[str, Any], path: str, product_id: Optional[str]):
    if not popups_enabled():
        return None
    custom = None
    try:
        custom = select_popup(popups_repo.get_live_popups(db), path, product_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("popup_select_failed: path=%s error=%s", path, e)
    return render_context(get_popup_settings(settings or None), custom)


def _site_context(
    request: Request,
    db: Session,
    settings: Dict[str, Any],
    *,
    product_id: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    path = request.url.path
    context = {
        "settings": settings,
        "header": page_renderer.get_header_props(db, settings),
        "footer": page_renderer.get_footer_props(db, settings),
        "popups": _popup_context(db, settings, path, product_id),
        "path": path,
    }
    context.update(extra)
    return context


def _render(request: Request, name: str, context: Dict[str, Any], status_code: int = 200):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


@router.get("/")
def home(request: Request, db: Session = Depends(get_db)):
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    data = page_renderer.load_home(db)
    return _render(request, "home.html", _site_context(request, db, settings, **data))


@router.get("/products/{slug}")
def product_detail(slug: str, request: Request, db: Session = Depends(get_db)):
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    data = page_renderer.load_product(db, slug)
    if data is None:
        raise HTTPException(status_code=404, detail="Product not found")
    context = _site_context(request, db, settings, product_id=data["product"]["id"], **data)
    return _render(request, "product.html", context)


@router.get("/blog")
def blog_index(request: Request, db: Session = Depends(get_db)):
    if not blog_enabled():
        raise HTTPException(status_code=404, detail="Not found")
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    data = page_renderer.load_blog_index(db)
    return _render(request, "blog/index.html", _site_context(request, db, settings, active_tag=None, **data))


@router.get("/blog/tag/{slug}")
def blog_tag(slug: str, request: Request, db: Session = Depends(get_db)):
    if not blog_enabled():
        raise HTTPException(status_code=404, detail="Not found")
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    tag = blog_repo.get_tag_by_slug(db, slug)
    if tag is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    data = page_renderer.load_blog_index(db, tag_slug=slug)
    context = _site_context(request, db, settings, active_tag=row_to_dict(tag), **data)
    return _render(request, "blog/tag.html", context)


@router.get("/blog/{slug}")
def blog_post(slug: str, request: Request, db: Session = Depends(get_db)):
    if not blog_enabled():
        raise HTTPException(status_code=404, detail="Not found")
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    data = page_renderer.load_blog_post(db, slug)
    if data is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return _render(request, "blog/post.html", _site_context(request, db, settings, **data))


@router.get("/faq")
def faq(request: Request, db: Session = Depends(get_db)):
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    groups: Dict[str, list] = {}
    for item in content_repo.list_items(db, models.Faq, active_only=True):
        groups.setdefault(item.category or "General", []).append(row_to_dict(item))
    return _render(request, "faq.html", _site_context(request, db, settings, faq_groups=groups))


@router.get("/contact")
def contact(request: Request, db: Session = Depends(get_db)):
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    return _render(request, "contact.html", _site_context(request, db, settings))


@router.get(COMING_SOON_PATH)
def coming_soon(request: Request, db: Session = Depends(get_db)):
    settings = page_renderer.get_settings_dict(db)
    return _render(request, "coming_soon.html", {"settings": settings})


# Admin shell
def _admin_signed_in(request: Request, db: Session) -> bool:
    if dev_mode_active():
        return True
    token = request.cookies.get(ADMIN_SESSION_COOKIE)
    if not token or not is_valid_token_format(token):
        return False
    return admin_repo.get_active_session(db, token) is not None


@router.get("/admin/login")
def admin_login(request: Request, db: Session = Depends(get_db)):
    if _admin_signed_in(request, db):
        return RedirectResponse("/admin", status_code=303)
    return _render(request, "admin/login.html", {"needs_bootstrap": admin_repo.count_admins(db) == 0})


@router.get("/admin")
def admin_dashboard(request: Request, db: Session = Depends(get_db)):
    if not _admin_signed_in(request, db):
        return RedirectResponse("/admin/login", status_code=303)
    counts = {
        "Pages": db.query(models.Page).count(),
        "Products": db.query(models.Product).count(),
        "Popups": db.query(models.CustomPopup).count(),
        "Blog posts": db.query(models.BlogPost).count(),
        "Subscribers": db.query(models.Contact).count(),
        "Unread messages": inbox_repo.unread_count(db),
    }
    return _render(request, "admin/dashboard.html", {"counts": counts})


# Catch-all for CMS pages; keep this route last
@router.get("/{slug:path}")
def dynamic_page(slug: str, request: Request, db: Session = Depends(get_db)):
    slug = normalize_page_slug(slug)
    if not slug or slug.startswith(("api/", "static/")):
        raise HTTPException(status_code=404, detail="Not found")
    settings = page_renderer.get_settings_dict(db)
    redirect = _draft_redirect(request, settings)
    if redirect:
        return redirect
    data = page_renderer.load_page(db, slug)
    if data is None:
        raise HTTPException(status_code=404, detail="Page not found")
    if data["page"].get("is_draft") and not has_preview_access(request):
        raise HTTPException(status_code=404, detail="Page not found")
    return _render(request, "page.html", _site_context(request, db, settings, **data))
