"""
Contact activity helpers and enums.

Single place that persists CRM timeline rows with a consistent shape; the
wrappers cover the popup and subscription flows.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from storefront.db import models
from storefront.db.repositories import contacts as contacts_repo

logger = logging.getLogger(__name__)


class ActivityType(str, Enum):
    # Popups
    POPUP_VIEW = "popup_view"
    POPUP_DISMISS = "popup_dismiss"
    POPUP_SUBMIT = "popup_submit"
    # Subscriptions
    EMAIL_SUBSCRIBE = "email_subscribe"
    EMAIL_RESUBSCRIBE = "email_resubscribe"
    SMS_SUBSCRIBE = "sms_subscribe"
    # CRM
    CONTACT_IMPORT = "contact_import"
    CONTACT_UPDATE = "contact_update"


def record(
    db: Session,
    *,
    activity_type: ActivityType | str,
    contact_id: Optional[str] = None,
    popup_id: Optional[str] = None,
    page_slug: Optional[str] = None,
    product_id: Optional[str] = None,
    download_file_url: Optional[str] = None,
    download_file_name: Optional[str] = None,
    visitor_id: Optional[str] = None,
    session_id: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Optional[models.ContactActivity]:
    """Persist one activity row.

    Activity is a side effect of the request that triggered it, so a failed
    write is logged and swallowed (returns None).
    """
    type_value = activity_type.value if isinstance(activity_type, ActivityType) else str(activity_type)
    try:
        return contacts_repo.add_activity(db, {
            "contact_id": contact_id,
            "activity_type": type_value,
            "activity_data": data or {},
            "popup_id": popup_id,
            "page_slug": page_slug,
            "product_id": product_id,
            "download_file_url": download_file_url,
            "download_file_name": download_file_name,
            "visitor_id": visitor_id,
            "session_id": session_id,
        })
    except Exception as e:
        db.rollback()
        logger.warning("activity_record_failed: type=%s contact_id=%s error=%s", type_value, contact_id, e)
        return None


__all__ = ["ActivityType", "record"]


def record_popup_submit(
    db: Session,
    *,
    contact_id: str,
    popup_type: str,
    cta_type: str,
    popup_id: Optional[str] = None,
    download_file_url: Optional[str] = None,
    download_file_name: Optional[str] = None,
    visitor_id: Optional[str] = None,
):
    return record(
        db,
        activity_type=ActivityType.POPUP_SUBMIT,
        contact_id=contact_id,
        popup_id=popup_id,
        download_file_url=download_file_url,
        download_file_name=download_file_name,
        visitor_id=visitor_id,
        data={"popupType": popup_type, "ctaType": cta_type},
    )


def record_popup_view(
    db: Session,
    *,
    popup_type: Optional[str],
    popup_id: Optional[str] = None,
    contact_id: Optional[str] = None,
    page_slug: Optional[str] = None,
    visitor_id: Optional[str] = None,
    session_id: Optional[str] = None,
):
    return record(
        db,
        activity_type=ActivityType.POPUP_VIEW,
        contact_id=contact_id,
        popup_id=popup_id,
        page_slug=page_slug,
        visitor_id=visitor_id,
        session_id=session_id,
        data={"popupType": popup_type} if popup_type else None,
    )


__all__.extend(["record_popup_submit", "record_popup_view"])
