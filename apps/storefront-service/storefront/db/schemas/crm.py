from datetime import datetime
from typing import Any, Literal

from pydantic import EmailStr, Field, model_validator

from .base import APIModel

EmailStatus = Literal['active', 'inactive', 'bounced', 'none']
SmsStatus = Literal['active', 'inactive', 'none']


class ContactFields(APIModel):
    first_name: str | None = None
    last_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    notes: str | None = None
    source: str | None = None


class ContactCreate(ContactFields):
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    email_status: EmailStatus = 'active'
    sms_status: SmsStatus = 'none'

    @model_validator(mode="after")
    def _require_channel(self):
        if not self.email and not self.phone:
            raise ValueError("Email or phone is required")
        return self


class ContactUpdate(ContactFields):
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    email_status: EmailStatus | None = None
    sms_status: SmsStatus | None = None


class Contact(ContactFields):
    id: str
    email: str | None = None
    phone: str | None = None
    email_status: str | None = None
    sms_status: str | None = None
    email_consent_at: datetime | None = None
    sms_consent_at: datetime | None = None
    source_popup_id: str | None = None
    visitor_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactActivity(APIModel):
    id: str
    contact_id: str | None = None
    activity_type: str
    activity_data: dict[str, Any] = {}
    popup_id: str | None = None
    page_slug: str | None = None
    product_id: str | None = None
    download_file_url: str | None = None
    download_file_name: str | None = None
    visitor_id: str | None = None
    session_id: str | None = None
    created_at: datetime | None = None


class ContactList(APIModel):
    contacts: list[Contact]
    total: int
    page: int
    limit: int


class SubscriberStats(APIModel):
    total: int
    active_emails: int
    inactive_emails: int
    active_sms: int
    inactive_sms: int


class SubscribeRequest(APIModel):
    email: str | None = None
    source: str | None = None


class ContactsSubscribeRequest(APIModel):
    email: str | None = None
    phone: str | None = None
    source: str = 'coming-soon'


class ContactFormRequest(APIModel):
    first_name: str | None = None
    last_name: str | None = None
    name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None


class ContactSubmission(APIModel):
    id: str
    first_name: str
    last_name: str | None = None
    name: str
    email: str
    subject: str | None = None
    message: str
    status: str | None = 'new'
    is_read: bool | None = False
    created_at: datetime | None = None


class InboxUpdate(APIModel):
    status: Literal['new', 'pending', 'resolved'] | None = None
    is_read: bool | None = None


class ImportSummary(APIModel):
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[str] = []
