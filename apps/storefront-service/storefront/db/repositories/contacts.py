"""
Contact (CRM) repository functions.

Contacts are matched by email or by phone; both are unique when present.
Activity rows hang off a contact but may also be anonymous (contact_id NULL).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from storefront.db import models


def get_contact(db: Session, contact_id: str) -> Optional[models.Contact]:
    return db.query(models.Contact).filter(models.Contact.id == contact_id).first()


def get_contact_by_email(db: Session, email: str) -> Optional[models.Contact]:
    return db.query(models.Contact).filter(models.Contact.email == email).first()


def get_contact_by_phone(db: Session, phone: str) -> Optional[models.Contact]:
    return db.query(models.Contact).filter(models.Contact.phone == phone).first()


def get_contact_by_visitor(db: Session, visitor_id: str) -> Optional[models.Contact]:
    if not visitor_id:
        return None
    return (
        db.query(models.Contact)
        .filter(models.Contact.visitor_id == visitor_id)
        .order_by(models.Contact.created_at.desc())
        .first()
    )


def find_contact(db: Session, *, email: Optional[str] = None, phone: Optional[str] = None) -> Optional[models.Contact]:
    """First contact matching the email OR the phone."""
    clauses = []
    if email:
        clauses.append(models.Contact.email == email)
    if phone:
        clauses.append(models.Contact.phone == phone)
    if not clauses:
        return None
    return db.query(models.Contact).filter(or_(*clauses)).order_by(models.Contact.created_at).first()


def create_contact(db: Session, values: Dict[str, Any]) -> models.Contact:
    db_contact = models.Contact(**values)
    db.add(db_contact)
    db.commit()
    db.refresh(db_contact)
    return db_contact


def update_contact(db: Session, db_contact: models.Contact, values: Dict[str, Any]) -> models.Contact:
    for key, value in values.items():
        setattr(db_contact, key, value)
    db.commit()
    db.refresh(db_contact)
    return db_contact


def delete_contact(db: Session, contact_id: str) -> bool:
    try:
        db_contact = get_contact(db, contact_id)
        if not db_contact:
            return False
        db.delete(db_contact)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete contact {contact_id}: {str(e)}")


def _filtered(
    db: Session,
    *,
    channel: str = 'all',
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[datetime] = None,
):
    q = db.query(models.Contact)
    if channel == 'email':
        q = q.filter(models.Contact.email.isnot(None))
        if status:
            q = q.filter(models.Contact.email_status == status)
    elif channel == 'sms':
        q = q.filter(models.Contact.phone.isnot(None))
        if status:
            q = q.filter(models.Contact.sms_status == status)
    elif status:
        q = q.filter(or_(models.Contact.email_status == status, models.Contact.sms_status == status))
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(
            models.Contact.email.ilike(pattern),
            models.Contact.phone.ilike(pattern),
            models.Contact.first_name.ilike(pattern),
            models.Contact.last_name.ilike(pattern),
        ))
    if date_from:
        q = q.filter(models.Contact.created_at >= date_from)
    return q


def list_contacts(
    db: Session,
    *,
    channel: str = 'all',
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[datetime] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[models.Contact], int]:
    q = _filtered(db, channel=channel, status=status, search=search, date_from=date_from)
    total = q.count()
    rows = (
        q.order_by(models.Contact.created_at.desc())
        .offset((max(page, 1) - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def export_contacts(db: Session, *, channel: str = 'all', date_from: Optional[datetime] = None) -> List[models.Contact]:
    q = _filtered(db, channel=channel, date_from=date_from)
    return q.order_by(models.Contact.created_at.desc()).all()


def contact_stats(db: Session, *, date_from: Optional[datetime] = None) -> Dict[str, int]:
    base = db.query(func.count(models.Contact.id))
    if date_from:
        base = base.filter(models.Contact.created_at >= date_from)

    def _count(*criteria) -> int:
        return base.filter(*criteria).scalar() or 0

    return {
        "total": base.scalar() or 0,
        "active_emails": _count(models.Contact.email.isnot(None), models.Contact.email_status == 'active'),
        "inactive_emails": _count(models.Contact.email.isnot(None), models.Contact.email_status == 'inactive'),
        "active_sms": _count(models.Contact.phone.isnot(None), models.Contact.sms_status == 'active'),
        "inactive_sms": _count(models.Contact.phone.isnot(None), models.Contact.sms_status == 'inactive'),
    }


def count_contacts_since(db: Session, since: datetime) -> int:
    return db.query(func.count(models.Contact.id)).filter(models.Contact.created_at >= since).scalar() or 0


# Activity
def add_activity(db: Session, values: Dict[str, Any]) -> models.ContactActivity:
    db_activity = models.ContactActivity(**values)
    db.add(db_activity)
    db.commit()
    db.refresh(db_activity)
    return db_activity


def list_activity(db: Session, contact_id: str, limit: int = 100) -> List[models.ContactActivity]:
    return (
        db.query(models.ContactActivity)
        .filter(models.ContactActivity.contact_id == contact_id)
        .order_by(models.ContactActivity.created_at.desc())
        .limit(limit)
        .all()
    )


def count_activity(db: Session, activity_type: str, since: Optional[datetime] = None) -> int:
    q = db.query(func.count(models.ContactActivity.id)).filter(models.ContactActivity.activity_type == activity_type)
    if since:
        q = q.filter(models.ContactActivity.created_at >= since)
    return q.scalar() or 0
