"""
Lead capture and CRM flows.

Each public capture point (newsletter subscribe, coming-soon capture, popup
submit) upserts a Contact with its own merge rules and records activity on
the contact's timeline. CSV export and import for the admin live here too.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront import activity
from storefront.db import models, schemas
from storefront.db.repositories import contacts as contacts_repo
from storefront.db.repositories import popups as popups_repo
from storefront.utils.forms import get_phone_digits, is_simple_email, normalize_email

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIBE_SOURCE = "website"
DEFAULT_POPUP_SOURCE = "popup"

EXPORT_HEADERS = [
    "Email",
    "Phone",
    "First Name",
    "Last Name",
    "Address",
    "City",
    "State",
    "Zip Code",
    "Country",
    "Email Status",
    "SMS Status",
    "Source",
    "Created At",
]
_EXPORT_FIELDS = [
    "email", "phone", "first_name", "last_name", "address", "city", "state",
    "zip_code", "country", "email_status", "sms_status", "source", "created_at",
]


class ContactError(ValueError):
    """Input rejected by a capture flow; the message is safe to show."""


class DuplicateContactError(ContactError):
    pass


@dataclass
class UpsertResult:
    contact: models.Contact
    created: bool


# Public capture flows
def subscribe_email(
    db: Session,
    email: Optional[str],
    source: Optional[str] = None,
    visitor_id: Optional[str] = None,
) -> UpsertResult:
    """Newsletter signup: create, or reactivate an existing email contact."""
    if not email or not isinstance(email, str):
        raise ContactError("Email is required")
    if not is_simple_email(email.strip()):
        raise ContactError("Invalid email format")
    normalized = normalize_email(email)
    source = source or DEFAULT_SUBSCRIBE_SOURCE
    now = models.now_utc()

    existing = contacts_repo.get_contact_by_email(db, normalized)
    if existing:
        contacts_repo.update_contact(db, existing, {
            "visitor_id": visitor_id or existing.visitor_id,
            "email_status": "active",
            "email_consent_at": existing.email_consent_at or now,
        })
        activity.record(
            db,
            activity_type=activity.ActivityType.EMAIL_RESUBSCRIBE,
            contact_id=existing.id,
            visitor_id=visitor_id,
            data={"source": source},
        )
        logger.info("email_resubscribe: contact_id=%s source=%s", existing.id, source)
        return UpsertResult(existing, created=False)

    contact = contacts_repo.create_contact(db, {
        "email": normalized,
        "email_status": "active",
        "email_consent_at": now,
        "source": source,
        "visitor_id": visitor_id,
    })
    activity.record(
        db,
        activity_type=activity.ActivityType.EMAIL_SUBSCRIBE,
        contact_id=contact.id,
        visitor_id=visitor_id,
        data={"source": source},
    )
    logger.info("email_subscribe: contact_id=%s source=%s", contact.id, source)
    return UpsertResult(contact, created=True)


def capture_contact(
    db: Session,
    email: Optional[str],
    phone: Optional[str],
    source: str = "coming-soon",
) -> UpsertResult:
    """Coming-soon capture of an email and/or phone, merged by either channel."""
    if not email and not phone:
        raise ContactError("Email or phone number is required")
    if email and not is_simple_email(email.strip()):
        raise ContactError("Please enter a valid email address")
    digits = get_phone_digits(phone) if phone else ""
    if phone and len(digits) < 10:
        raise ContactError("Please enter a valid phone number")

    clean_email = normalize_email(email)
    clean_phone = digits or None
    now = models.now_utc()

    existing = contacts_repo.find_contact(db, email=clean_email, phone=clean_phone)
    if existing:
        values: Dict[str, Any] = {"source": source}
        if clean_email and not existing.email:
            values.update(email=clean_email, email_status="active", email_consent_at=now)
        elif clean_email and existing.email == clean_email:
            values["email_status"] = "active"
        if clean_phone and not existing.phone:
            values.update(phone=clean_phone, sms_status="active", sms_consent_at=now)
        elif clean_phone and existing.phone == clean_phone:
            values["sms_status"] = "active"
        try:
            contacts_repo.update_contact(db, existing, values)
        except IntegrityError:
            # The email and phone belong to two different contacts
            db.rollback()
            raise DuplicateContactError("This email and phone number are already on the list separately")
        return UpsertResult(existing, created=False)

    contact = contacts_repo.create_contact(db, {
        "email": clean_email,
        "phone": clean_phone,
        "source": source,
        "email_status": "active" if clean_email else "none",
        "sms_status": "active" if clean_phone else "none",
        "email_consent_at": now if clean_email else None,
        "sms_consent_at": now if clean_phone else None,
    })
    if clean_phone:
        activity.record(db, activity_type=activity.ActivityType.SMS_SUBSCRIBE, contact_id=contact.id,
                        data={"source": source})
    return UpsertResult(contact, created=True)


def popup_source(popup_type: str, popup_id: Optional[str], source: Optional[str]) -> str:
    if popup_type == "welcome":
        return "welcome_popup"
    if popup_type == "exit":
        return "exit_popup"
    if popup_id:
        return f"custom_popup_{popup_id}"
    return source or DEFAULT_POPUP_SOURCE


def submit_popup(
    db: Session,
    submission: schemas.PopupSubmit,
    visitor_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> Optional[str]:
    """Record a popup form submission; returns the contact id, if any."""
    now = models.now_utc()
    contact: Optional[models.Contact] = None
    new_values = {
        "source": popup_source(submission.popup_type, submission.popup_id, submission.source),
        "source_popup_id": submission.popup_id,
        "visitor_id": visitor_id,
    }
    if submission.popup_id and popups_repo.get_popup(db, submission.popup_id) is None:
        # Unknown ids would violate the foreign key
        new_values["source_popup_id"] = None

    if submission.cta_type == "email" and submission.email:
        email = normalize_email(submission.email)
        contact = contacts_repo.get_contact_by_email(db, email)
        if contact:
            contacts_repo.update_contact(db, contact, {"visitor_id": visitor_id or contact.visitor_id})
        else:
            contact = contacts_repo.create_contact(db, {
                **new_values,
                "email": email,
                "email_status": "active",
                "email_consent_at": now,
            })
    elif submission.cta_type == "sms" and submission.phone:
        phone = get_phone_digits(submission.phone) or submission.phone
        contact = contacts_repo.get_contact_by_phone(db, phone)
        if contact:
            contacts_repo.update_contact(db, contact, {
                "sms_status": "active",
                "sms_consent_at": now,
                "visitor_id": visitor_id or contact.visitor_id,
            })
        else:
            contact = contacts_repo.create_contact(db, {
                **new_values,
                "phone": phone,
                "sms_status": "active",
                "sms_consent_at": now,
            })

    download_url = str(submission.download_file_url) if submission.download_file_url else None
    if contact is not None:
        data: Dict[str, Any] = {"popupType": submission.popup_type, "ctaType": submission.cta_type}
        if download_url:
            data["downloadFileUrl"] = download_url
        if submission.download_file_name:
            data["downloadFileName"] = submission.download_file_name
        activity.record(
            db,
            activity_type=activity.ActivityType.POPUP_SUBMIT,
            contact_id=contact.id,
            popup_id=submission.popup_id,
            download_file_url=download_url,
            download_file_name=submission.download_file_name,
            visitor_id=visitor_id,
            session_id=session_id,
            data=data,
        )

    if submission.popup_id:
        popups_repo.increment_counter(db, submission.popup_id, "conversion_count")

    logger.info(
        "popup_submit: popup_type=%s cta_type=%s contact_id=%s",
        submission.popup_type, submission.cta_type, contact.id if contact else None,
    )
    return contact.id if contact else None


def track_popup(
    db: Session,
    event: schemas.PopupTrack,
    visitor_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> None:
    if event.action != "view":
        return
    contact = contacts_repo.get_contact_by_visitor(db, visitor_id) if visitor_id else None
    activity.record_popup_view(
        db,
        popup_type=event.popup_type,
        popup_id=event.popup_id,
        contact_id=contact.id if contact else None,
        page_slug=event.page_slug,
        visitor_id=visitor_id,
        session_id=session_id,
    )
    if event.popup_id:
        popups_repo.increment_counter(db, event.popup_id, "view_count")


# Admin
def create_contact(db: Session, payload: schemas.ContactCreate) -> models.Contact:
    values = payload.model_dump()
    values["email"] = normalize_email(payload.email)
    values["phone"] = get_phone_digits(payload.phone) or None
    now = models.now_utc()
    if values["email"] and values.get("email_status") == "active":
        values["email_consent_at"] = now
    if values["phone"]:
        if values.get("sms_status") in (None, "none"):
            values["sms_status"] = "active"
        values["sms_consent_at"] = now
    if not values["email"]:
        values["email_status"] = "none"
    if contacts_repo.find_contact(db, email=values["email"], phone=values["phone"]):
        raise DuplicateContactError("A contact with this email or phone already exists")
    try:
        return contacts_repo.create_contact(db, values)
    except IntegrityError:
        db.rollback()
        raise DuplicateContactError("A contact with this email or phone already exists")


def update_contact(db: Session, contact: models.Contact, payload: schemas.ContactUpdate) -> models.Contact:
    values = payload.model_dump(exclude_unset=True)
    if "email" in values:
        values["email"] = normalize_email(values["email"])
    if values.get("phone"):
        values["phone"] = get_phone_digits(values["phone"]) or values["phone"]
    try:
        return contacts_repo.update_contact(db, contact, values)
    except IntegrityError:
        db.rollback()
        raise DuplicateContactError("A contact with this email or phone already exists")


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def export_csv(contacts: Iterable[models.Contact]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for contact in contacts:
        writer.writerow([_csv_value(getattr(contact, name)) for name in _EXPORT_FIELDS])
    return buffer.getvalue()


# Header spellings accepted by the importer, after lowercasing and
# collapsing "_" / "-" to spaces
IMPORT_HEADER_ALIASES: Dict[str, Tuple[str, ...]] = {
    "email": ("email", "email address", "e mail"),
    "phone": ("phone", "phone number", "mobile", "sms", "cell"),
    "first_name": ("first name", "firstname", "first"),
    "last_name": ("last name", "lastname", "last", "surname"),
    "address": ("address", "street", "address 1"),
    "city": ("city",),
    "state": ("state", "province", "region"),
    "zip_code": ("zip code", "zip", "zipcode", "postal code"),
    "country": ("country",),
    "email_status": ("email status",),
    "sms_status": ("sms status",),
    "source": ("source",),
    "notes": ("notes", "note"),
}
_VALID_EMAIL_STATUS = {"active", "inactive", "bounced", "none"}
_VALID_SMS_STATUS = {"active", "inactive", "none"}


def _normalize_header(header: str) -> str:
    return " ".join((header or "").strip().lower().replace("_", " ").replace("-", " ").split())


def map_import_headers(headers: Iterable[str]) -> Dict[str, str]:
    """Map CSV header -> contact field for recognised columns."""
    lookup = {alias: name for name, aliases in IMPORT_HEADER_ALIASES.items() for alias in aliases}
    mapping: Dict[str, str] = {}
    for header in headers:
        target = lookup.get(_normalize_header(header))
        if target and target not in mapping.values():
            mapping[header] = target
    return mapping


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def import_csv(db: Session, text: str) -> ImportResult:
    result = ImportResult()
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    mapping = map_import_headers(reader.fieldnames or [])
    if "email" not in mapping.values() and "phone" not in mapping.values():
        result.errors.append("CSV must include an email or phone column")
        return result

    now = models.now_utc()
    for line_number, raw in enumerate(reader, start=2):
        row = {field: (raw.get(header) or "").strip() for header, field in mapping.items()}
        email = normalize_email(row.pop("email", None))
        phone = get_phone_digits(row.pop("phone", None)) or None
        if email and not is_simple_email(email):
            result.errors.append(f"Row {line_number}: invalid email {email}")
            email = None
        if not email and not phone:
            result.skipped += 1
            continue

        values = {k: v for k, v in row.items() if v}
        if values.get("email_status") not in _VALID_EMAIL_STATUS:
            values.pop("email_status", None)
        if values.get("sms_status") not in _VALID_SMS_STATUS:
            values.pop("sms_status", None)

        existing = contacts_repo.find_contact(db, email=email, phone=phone)
        try:
            if existing:
                merged = {k: v for k, v in values.items() if not getattr(existing, k)}
                if email and not existing.email:
                    merged.update(email=email, email_status="active", email_consent_at=now)
                if phone and not existing.phone:
                    merged.update(phone=phone, sms_status="active", sms_consent_at=now)
                contacts_repo.update_contact(db, existing, merged)
                result.updated += 1
            else:
                values.setdefault("source", "import")
                contacts_repo.create_contact(db, {
                    **values,
                    "email": email,
                    "phone": phone,
                    "email_status": values.get("email_status") or ("active" if email else "none"),
                    "sms_status": values.get("sms_status") or ("active" if phone else "none"),
                    "email_consent_at": now if email else None,
                    "sms_consent_at": now if phone else None,
                })
                result.created += 1
        except IntegrityError:
            db.rollback()
            result.errors.append(f"Row {line_number}: conflicts with an existing contact")
    logger.info(
        "contacts_import: created=%d updated=%d skipped=%d errors=%d",
        result.created, result.updated, result.skipped, len(result.errors),
    )
    return result
