"""
Admin CRM endpoints: subscribers (contacts), their activity timeline, CSV
import/export, and the contact-form inbox.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import contacts as contacts_repo
from storefront.db.repositories import inbox as inbox_repo
from storefront.services import contacts_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-crm"], dependencies=[Depends(get_current_admin)])

Channel = Literal["all", "email", "sms"]


def _start_of(day: Optional[date]) -> Optional[datetime]:
    if day is None:
        return None
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _contact_or_404(db: Session, contact_id: str):
    contact = contacts_repo.get_contact(db, contact_id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return contact


@router.get("/subscribers", response_model=schemas.ContactList)
def list_subscribers(
    channel: Channel = Query("all", alias="type"),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows, total = contacts_repo.list_contacts(
        db,
        channel=channel,
        status=status_filter,
        search=search,
        date_from=_start_of(date_from),
        page=page,
        limit=limit,
    )
    return {"contacts": rows, "total": total, "page": page, "limit": limit}


@router.get("/subscribers/stats", response_model=schemas.SubscriberStats)
def subscriber_stats(date_from: Optional[date] = Query(None, alias="dateFrom"), db: Session = Depends(get_db)):
    return contacts_repo.contact_stats(db, date_from=_start_of(date_from))


@router.get("/subscribers/export")
def export_subscribers(
    channel: Channel = Query("all", alias="type"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    db: Session = Depends(get_db),
):
    contacts = contacts_repo.export_contacts(db, channel=channel, date_from=_start_of(date_from))
    filename = f"subscribers-{datetime.now(timezone.utc).date().isoformat()}.csv"
    logger.info("subscribers_export: count=%d channel=%s", len(contacts), channel)
    return Response(
        content=contacts_service.export_csv(contacts),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/subscribers/import", response_model=schemas.ImportSummary)
async def import_subscribers(file: UploadFile = File(...), db: Session = Depends(get_db)):
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be UTF-8 encoded CSV")
    result = contacts_service.import_csv(db, text)
    logger.info(
        "subscribers_import: created=%d updated=%d skipped=%d errors=%d",
        result.created, result.updated, result.skipped, len(result.errors),
    )
    return {"created": result.created, "updated": result.updated, "skipped": result.skipped, "errors": result.errors}


@router.post("/subscribers", response_model=schemas.Contact, status_code=status.HTTP_201_CREATED)
def create_subscriber(payload: schemas.ContactCreate, db: Session = Depends(get_db)):
    try:
        return contacts_service.create_contact(db, payload)
    except contacts_service.DuplicateContactError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/subscribers/{contact_id}", response_model=schemas.Contact)
def get_subscriber(contact_id: str, db: Session = Depends(get_db)):
    return _contact_or_404(db, contact_id)


@router.put("/subscribers/{contact_id}", response_model=schemas.Contact)
def update_subscriber(contact_id: str, payload: schemas.ContactUpdate, db: Session = Depends(get_db)):
    contact = _contact_or_404(db, contact_id)
    try:
        return contacts_service.update_contact(db, contact, payload)
    except contacts_service.DuplicateContactError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/subscribers/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscriber(contact_id: str, db: Session = Depends(get_db)):
    if not contacts_repo.delete_contact(db, contact_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")


@router.get("/subscribers/{contact_id}/activity", response_model=list[schemas.ContactActivity])
def subscriber_activity(contact_id: str, db: Session = Depends(get_db)):
    _contact_or_404(db, contact_id)
    return contacts_repo.list_activity(db, contact_id)


# Inbox
@router.get("/inbox")
def list_inbox(status_filter: Optional[str] = Query(None, alias="status"), db: Session = Depends(get_db)):
    submissions = inbox_repo.list_submissions(db, status_filter)
    return {
        "submissions": [
            schemas.ContactSubmission.model_validate(s).model_dump(by_alias=True, mode="json") for s in submissions
        ],
        "unreadCount": inbox_repo.unread_count(db),
    }


@router.put("/inbox/{submission_id}", response_model=schemas.ContactSubmission)
def update_inbox_item(submission_id: str, update: schemas.InboxUpdate, db: Session = Depends(get_db)):
    updated = inbox_repo.update_submission(db, submission_id, update)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return updated


@router.delete("/inbox/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inbox_item(submission_id: str, db: Session = Depends(get_db)):
    if not inbox_repo.delete_submission(db, submission_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
