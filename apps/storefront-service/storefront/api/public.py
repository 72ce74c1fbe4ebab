"""
Public JSON endpoints used by the rendered site.

Popup lookup/submit/track, newsletter and coming-soon capture, the contact
form, anonymous analytics and public branding settings.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import get_visitor_ids, rate_limited, visitor_cookies
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import catalog as catalog_repo
from storefront.db.repositories import inbox as inbox_repo
from storefront.db.repositories import popups as popups_repo
from storefront.db.repositories import tracking as tracking_repo
from storefront.services import contacts_service
from storefront.services.page_renderer import get_settings_dict
from storefront.services.popup_targeting import popup_to_payload, select_popup
from storefront.utils.feature_flags import popups_enabled, tracking_enabled
from storefront.utils.forms import is_simple_email, normalize_email, split_full_name
from storefront.utils.rate_limit import RATE_LIMITS
from storefront.utils.user_agent import detect_browser, detect_device

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["public"])

DEFAULT_SITE_NAME = "Archie's Remedies"
DEFAULT_PRIMARY_COLOR = "#bbdae9"


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    message = errors[0].get("msg") or "Invalid request"
    # pydantic prefixes messages raised from validators
    return message.removeprefix("Value error, ")


# Popups
@router.get("/popup")
def get_popup(
    page: Optional[str] = Query(None),
    product_id: Optional[str] = Query(None, alias="productId"),
    db: Session = Depends(get_db),
):
    if not popups_enabled():
        return {"popup": None}
    try:
        popup = select_popup(popups_repo.get_live_popups(db), page, product_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("popup_lookup_failed: page=%s error=%s", page, exc)
        return {"popup": None}
    return {"popup": popup_to_payload(popup) if popup is not None else None}


@router.post("/popup/submit", dependencies=[Depends(rate_limited("popup", RATE_LIMITS.POPUP))])
def submit_popup(
    request: Request,
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    try:
        submission = schemas.PopupSubmit.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_first_error(exc))
    visitor_id, session_id = get_visitor_ids(request)
    contact_id = contacts_service.submit_popup(db, submission, visitor_id=visitor_id, session_id=session_id)
    return {"success": True, "contactId": contact_id}


@router.post("/popup/track")
def track_popup(event: schemas.PopupTrack, request: Request, db: Session = Depends(get_db)):
    visitor_id, session_id = get_visitor_ids(request)
    try:
        contacts_service.track_popup(db, event, visitor_id=visitor_id, session_id=session_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("popup_track_failed: popup_id=%s error=%s", event.popup_id, exc)
    return {"success": True}


# Lead capture
@router.post("/subscribe", dependencies=[Depends(rate_limited("subscribe", RATE_LIMITS.SUBSCRIBE))])
def subscribe(
    payload: schemas.SubscribeRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    visitor_id, _session_id = get_visitor_ids(request)
    try:
        result = contacts_service.subscribe_email(db, payload.email, payload.source, visitor_id=visitor_id)
    except contacts_service.ContactError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if result.created:
        response.status_code = status.HTTP_201_CREATED
        return {"message": "Successfully subscribed", "contactId": result.contact.id}
    return {"message": "Already subscribed", "contactId": result.contact.id}


@router.post("/contacts/subscribe", dependencies=[Depends(rate_limited("subscribe", RATE_LIMITS.SUBSCRIBE))])
def coming_soon_subscribe(payload: schemas.ContactsSubscribeRequest, db: Session = Depends(get_db)):
    try:
        result = contacts_service.capture_contact(db, payload.email, payload.phone, payload.source)
    except contacts_service.DuplicateContactError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except contacts_service.ContactError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    message = "Thanks for signing up!" if result.created else "You're already on the list!"
    return {"success": True, "message": message, "contactId": result.contact.id}


@router.post(
    "/contact",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited("contact", RATE_LIMITS.CONTACT))],
)
def contact_form(payload: schemas.ContactFormRequest, db: Session = Depends(get_db)):
    first_name = (payload.first_name or "").strip()
    last_name = (payload.last_name or "").strip()
    if not first_name and payload.name:
        first_name, last_name = split_full_name(payload.name)
    full_name = " ".join(part for part in (first_name, last_name) if part)
    email = (payload.email or "").strip()
    message = (payload.message or "").strip()
    if not full_name or not email or not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name, email, and message are required")
    if not is_simple_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    submission = inbox_repo.create_submission(db, {
        "first_name": first_name,
        "last_name": last_name or None,
        "name": full_name,
        "email": normalize_email(email),
        "subject": (payload.subject or "").strip() or None,
        "message": message,
    })
    logger.info("contact_submission: id=%s", submission.id)
    return {"success": True, "id": submission.id}


# Analytics
@router.post("/track")
def track(event: schemas.TrackEvent, request: Request, response: Response, db: Session = Depends(get_db)):
    visitor_id, session_id = visitor_cookies(request, response)
    if not tracking_enabled():
        return {"success": True}
    user_agent = request.headers.get("user-agent")
    referrer = event.referrer or request.headers.get("referer")
    try:
        if event.type == "pageview":
            tracking_repo.record_page_view(db, {
                "path": event.path or "/",
                "referrer": referrer,
                "user_agent": user_agent,
                "visitor_id": visitor_id,
                "session_id": session_id,
                "device": detect_device(user_agent),
                "browser": detect_browser(user_agent),
            })
        else:
            if not event.destination_url:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="destinationUrl is required")
            product_id = event.product_id
            if product_id and catalog_repo.get_product(db, product_id) is None:
                product_id = None
            tracking_repo.record_click(db, {
                "product_id": product_id,
                "product_slug": event.product_slug,
                "destination_url": event.destination_url,
                "visitor_id": visitor_id,
                "session_id": session_id,
                "referrer": referrer,
                "user_agent": user_agent,
            })
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("track_failed: type=%s error=%s", event.type, exc)
    return {"success": True}


@router.get("/public/settings")
def public_settings(db: Session = Depends(get_db)):
    settings = get_settings_dict(db)
    return {
        "siteName": settings.get("site_name") or DEFAULT_SITE_NAME,
        "logoUrl": settings.get("logo_url"),
        "primaryColor": settings.get("primary_color") or DEFAULT_PRIMARY_COLOR,
    }
