"""
Page composition for the server-rendered site.

A page is a list of widgets stored as JSON. Composition parses that list,
loads the shared data its visible widgets need, derives the layout flags the
templates branch on, and returns one render context. Contexts are cached per
page key and dropped by tag when admins edit content.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront import widget_library
from storefront.db import models
from storefront.db.repositories import blog as blog_repo
from storefront.db.repositories import catalog as catalog_repo
from storefront.db.repositories import content as content_repo
from storefront.db.repositories import pages as pages_repo
from storefront.db.repositories import settings as settings_repo
from storefront.services.widget_data import get_widget_data, row_to_dict
from storefront.utils import cache
from storefront.utils.media import is_video_url
from storefront.utils.text import looks_like_html

logger = logging.getLogger(__name__)

HOME_SLUG = "home"
DEFAULT_HOME_WIDGETS = ("hero_carousel", "product_grid", "testimonials")

DEFAULT_NAV_CTA_TEXT = "Shop Now"
DEFAULT_NAV_CTA_URL = "/products/eye-drops"
DEFAULT_MARKETING_TILE = {
    "title": "Clean Formulas",
    "description": "No preservatives, phthalates, parabens, or sulfates.",
    "badge1": "Preservative-Free",
    "badge2": "Paraben-Free",
    "badge3": "Sulfate-Free",
}


def parse_widgets(raw) -> List[Dict[str, Any]]:
    """Normalize a stored widget list.

    Accepts a JSON string, a list, or None. Malformed JSON and non-lists give
    ``[]``; entries without a ``type`` are dropped and missing fields filled in.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("widgets_parse_failed: length=%d", len(raw))
            return []
    if not isinstance(raw, list):
        return []

    widgets: List[Dict[str, Any]] = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("type"):
            continue
        widget = dict(entry)
        widget["id"] = str(widget.get("id") or models.new_id())
        is_visible = widget.pop("is_visible", None)
        if "isVisible" not in widget:
            widget["isVisible"] = True if is_visible is None else bool(is_visible)
        if not isinstance(widget.get("config"), dict):
            widget["config"] = {}
        widgets.append(widget)
    return widgets


def visible_widget_types(widgets: List[Dict[str, Any]]) -> List[str]:
    return [w["type"] for w in widgets if w.get("isVisible", True)]


def default_home_widgets() -> List[Dict[str, Any]]:
    return [
        {"id": f"default-{t}", "type": t, "config": widget_library.get_default_config(t), "isVisible": True}
        for t in DEFAULT_HOME_WIDGETS
    ]


def page_flags(page: Dict[str, Any], visible_count: int) -> Dict[str, bool]:
    """Layout switches for ``page.html``."""
    hero_image = page.get("hero_image_url")
    has_hero = bool(hero_image or page.get("hero_title"))
    has_page_header = bool((page.get("page_title") or "").strip()) and not has_hero
    content = page.get("content") or ""
    has_content = bool(content.strip())
    return {
        "has_hero": has_hero,
        "hero_is_video": is_video_url(hero_image),
        "has_page_header": has_page_header,
        "has_content": has_content,
        "content_is_html": looks_like_html(content),
        "is_widget_only_page": not has_hero and not has_page_header and not has_content and visible_count > 0,
    }


def compose_widgets(db: Session, raw_widgets, settings: Dict[str, Any]) -> Dict[str, Any]:
    widgets = parse_widgets(raw_widgets)
    visible = [w for w in widgets if w.get("isVisible", True)]
    data = get_widget_data(db, visible_widget_types(widgets))
    data["instagramUrl"] = settings.get("instagram_url")
    data["settings"] = settings
    return {"widgets": visible, "widget_data": data}


def compose_page(db: Session, page: models.Page) -> Dict[str, Any]:
    settings = get_settings_dict(db)
    page_dict = row_to_dict(page)
    composed = compose_widgets(db, page.widgets, settings)
    return {
        "page": page_dict,
        **composed,
        "flags": page_flags(page_dict, len(composed["widgets"])),
    }


def compose_home(db: Session) -> Dict[str, Any]:
    page = pages_repo.get_page_by_slug(db, HOME_SLUG)
    if page is not None and page.is_active:
        return compose_page(db, page)
    settings = get_settings_dict(db)
    composed = compose_widgets(db, default_home_widgets(), settings)
    return {"page": None, **composed, "flags": page_flags({}, len(composed["widgets"]))}


def compose_product(db: Session, product: models.Product) -> Dict[str, Any]:
    settings = get_settings_dict(db)
    product_dict = row_to_dict(product)
    product_dict["variants"] = [row_to_dict(v) for v in product.variants]
    product_dict["images"] = [row_to_dict(i) for i in product.images]
    product_dict["benefits"] = [row_to_dict(b) for b in product.benefits]
    composed = compose_widgets(db, product.widgets, settings)
    return {"product": product_dict, **composed}


# Cached entry points
def get_settings_dict(db: Session) -> Dict[str, Any]:
    return cache.page_cache.get_or_set(
        "settings",
        lambda: settings_repo.settings_to_dict(settings_repo.get_site_settings(db)),
        tags=(cache.SETTINGS_DATA,),
    )


def load_home(db: Session) -> Dict[str, Any]:
    return cache.page_cache.get_or_set(
        "home", lambda: compose_home(db), tags=(cache.HOMEPAGE_DATA, cache.PAGE_DATA)
    )


def load_page(db: Session, slug: str) -> Optional[Dict[str, Any]]:
    """Composed context for an active page, or None. Draft pages are included."""
    def _build():
        page = pages_repo.get_page_by_slug(db, slug)
        if page is None or not page.is_active:
            return None
        return compose_page(db, page)

    return cache.page_cache.get_or_set(
        f"page:{slug}", _build, tags=(cache.PAGE_DATA, cache.DYNAMIC_PAGE_DATA)
    )


def load_product(db: Session, slug: str) -> Optional[Dict[str, Any]]:
    def _build():
        product = catalog_repo.get_product_by_slug(db, slug)
        if product is None or not product.is_active:
            return None
        return compose_product(db, product)

    return cache.page_cache.get_or_set(f"product:{slug}", _build, tags=(cache.PRODUCT_DATA,))


# Layout chrome
def get_header_props(db: Session, settings: Dict[str, Any]) -> Dict[str, Any]:
    products = [row_to_dict(p) for p in catalog_repo.get_products(db, active_only=True)]
    nav_pages = [
        {
            "id": p.id,
            "slug": p.slug,
            "title": p.title,
            "show_in_nav": p.show_in_nav,
            "nav_order": p.nav_order,
            "nav_show_on_desktop": p.nav_show_on_desktop,
            "nav_show_on_mobile": p.nav_show_on_mobile,
        }
        for p in pages_repo.get_nav_pages(db)
    ]
    props: Dict[str, Any] = {
        "logo": settings.get("logo_url"),
        "products": products,
        "nav_pages": nav_pages,
        "nav_items": [row_to_dict(n) for n in content_repo.list_items(db, models.NavigationItem, active_only=True)],
        "bumper": None,
        "social_stats": None,
        "global_nav": None,
    }
    if not settings:
        return props
    props["bumper"] = {
        "enabled": bool(settings.get("bumper_enabled")),
        "text": settings.get("bumper_text"),
        "link_url": settings.get("bumper_link_url"),
        "link_text": settings.get("bumper_link_text"),
        "theme": settings.get("bumper_theme") or "light",
    }
    props["social_stats"] = {
        "total_reviews": settings.get("total_reviews"),
        "total_customers": settings.get("total_customers"),
        "instagram_followers": settings.get("instagram_followers"),
        "facebook_followers": settings.get("facebook_followers"),
    }
    cta_enabled = settings.get("nav_cta_enabled")
    props["global_nav"] = {
        "logo_position": settings.get("nav_logo_position") or "left",
        "cta_enabled": True if cta_enabled is None else cta_enabled,
        "cta_text": settings.get("nav_cta_text") or DEFAULT_NAV_CTA_TEXT,
        "cta_url": settings.get("nav_cta_url") or DEFAULT_NAV_CTA_URL,
        "marketing_tile": {
            key: settings.get(f"nav_marketing_tile_{key}") or fallback
            for key, fallback in DEFAULT_MARKETING_TILE.items()
        },
    }
    return props


def get_footer_props(db: Session, settings: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "logo": settings.get("logo_url"),
        "instagram_url": settings.get("instagram_url"),
        "facebook_url": settings.get("facebook_url"),
        "tiktok_url": settings.get("tiktok_url"),
        "amazon_store_url": settings.get("amazon_store_url"),
        "massive_footer_logo_url": settings.get("massive_footer_logo_url"),
        "theme": settings.get("footer_theme") or "dark",
        "columns": {
            column: [row_to_dict(link) for link in links]
            for column, links in content_repo.get_footer_columns(db).items()
        },
    }


# Blog
def post_to_dict(post: models.BlogPost) -> Dict[str, Any]:
    data = row_to_dict(post)
    data["tags"] = [row_to_dict(tag) for tag in post.tags]
    return data


def load_blog_index(db: Session, tag_slug: Optional[str] = None) -> Dict[str, Any]:
    def _build():
        return {
            "blog": row_to_dict(settings_repo.get_blog_settings(db)),
            "posts": [post_to_dict(p) for p in blog_repo.get_published_posts(db, tag_slug=tag_slug)],
            "tags": [row_to_dict(t) for t in blog_repo.get_tags(db)],
        }

    return cache.page_cache.get_or_set(f"blog:index:{tag_slug or ''}", _build, tags=(cache.BLOG_DATA,))


def load_blog_post(db: Session, slug: str) -> Optional[Dict[str, Any]]:
    """Published post plus up to three related posts; None when missing or unpublished."""
    def _build():
        post = blog_repo.get_post_by_slug(db, slug)
        if post is None or post.status != "published":
            return None
        settings = get_settings_dict(db)
        tag_ids = {tag.id for tag in post.tags}
        others = [p for p in blog_repo.get_published_posts(db) if p.id != post.id]
        related = [p for p in others if tag_ids & {t.id for t in p.tags}] or others
        return {
            "post": post_to_dict(post),
            "related": [post_to_dict(p) for p in related[:3]],
            **compose_widgets(db, post.widgets, settings),
        }

    return cache.page_cache.get_or_set(f"blog:post:{slug}", _build, tags=(cache.BLOG_DATA,))
