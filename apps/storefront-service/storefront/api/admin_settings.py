"""
Admin site-wide endpoints: settings, preview tokens, the analytics
dashboard and the widget library.
"""
import logging
import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.encoders import jsonable_encoder
from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy.orm import Session

from storefront import widget_library
from storefront.activity import ActivityType
from storefront.api.deps import PREVIEW_TOKEN_COOKIE, get_current_admin
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import contacts as contacts_repo
from storefront.db.repositories import inbox as inbox_repo
from storefront.db.repositories import pages as pages_repo
from storefront.db.repositories import settings as settings_repo
from storefront.db.repositories import tracking as tracking_repo
from storefront.services.page_renderer import parse_widgets
from storefront.utils.cache import invalidate_site_content
from storefront.utils.runtime import cookies_secure
from storefront.utils.urls import build_preview_link

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-settings"], dependencies=[Depends(get_current_admin)])


def _settings_payload(row: Optional[models.SiteSettings]) -> Dict[str, Any]:
    data = settings_repo.settings_to_dict(row)
    return jsonable_encoder({to_camel(key): value for key, value in data.items()})


@router.get("/settings")
def get_settings(db: Session = Depends(get_db)):
    return _settings_payload(settings_repo.get_site_settings(db))


@router.put("/settings")
def update_settings(body: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    values = {to_snake(key): value for key, value in body.items()}
    row = settings_repo.upsert_site_settings(db, values)
    invalidate_site_content()
    logger.info("settings_updated: keys=%d", len(values))
    return _settings_payload(row)


@router.post("/preview-token")
def create_preview_token(response: Response, payload: Optional[Dict[str, Any]] = Body(None)):
    """Issue a preview token for viewing the draft site; also set as a session cookie."""
    token = secrets.token_hex(32)
    path = (payload or {}).get("path") or "/"
    response.set_cookie(
        PREVIEW_TOKEN_COOKIE, token, httponly=True, samesite="lax", secure=cookies_secure(), path="/",
    )
    return {"success": True, "token": token, "url": build_preview_link(token=token, path=path)}


@router.get("/analytics")
def analytics(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    since = models.now_utc() - timedelta(days=days)
    return {
        "days": days,
        "pageViews": tracking_repo.page_view_count(db, since),
        "uniqueVisitors": tracking_repo.unique_visitor_count(db, since),
        "clicks": tracking_repo.click_count(db, since),
        "topPages": tracking_repo.top_pages(db, since),
        "topProducts": tracking_repo.top_clicked_products(db, since),
        "devices": tracking_repo.device_breakdown(db, since),
        "newContacts": contacts_repo.count_contacts_since(db, since),
        "contactStats": jsonable_encoder(
            schemas.SubscriberStats.model_validate(contacts_repo.contact_stats(db)).model_dump(by_alias=True)
        ),
        "popups": {
            "views": contacts_repo.count_activity(db, ActivityType.POPUP_VIEW.value, since),
            "submissions": contacts_repo.count_activity(db, ActivityType.POPUP_SUBMIT.value, since),
        },
        "unreadMessages": inbox_repo.unread_count(db),
    }


@router.get("/widgets")
def widget_library_listing(db: Session = Depends(get_db)):
    usage: Dict[str, int] = {}
    for page in pages_repo.get_pages(db):
        for widget in parse_widgets(page.widgets):
            usage[widget["type"]] = usage.get(widget["type"], 0) + 1
    widgets = []
    for widget in widget_library.WIDGET_TYPES:
        entry = {to_camel(key): value for key, value in widget.to_dict().items()}
        entry["defaultConfig"] = widget_library.get_default_config(widget.type)
        entry["usageCount"] = usage.get(widget.type, 0)
        widgets.append(entry)
    categories = [
        {"name": c.name, "description": c.description}
        for c in widget_library.WIDGET_CATEGORIES
        if c.name in widget_library.get_ordered_categories()
    ]
    return {"widgets": widgets, "categories": categories}
