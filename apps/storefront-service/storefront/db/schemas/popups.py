from datetime import datetime
from typing import Literal

from pydantic import Field, HttpUrl, field_validator, model_validator

from storefront.utils.forms import INVALID_PHONE_MESSAGE, get_phone_digits, validate_email, validate_phone

from .base import APIModel

CtaType = Literal['email', 'sms', 'download', 'none']
TargetType = Literal['all', 'specific', 'product']
TriggerType = Literal['timer', 'scroll', 'exit']
PopupStatus = Literal['draft', 'live', 'paused']


class CustomPopupFields(APIModel):
    title: str | None = None
    body: str | None = None
    video_url: str | None = None
    video_thumbnail_url: str | None = None
    image_url: str | None = None
    form_desktop_image_url: str | None = None
    form_desktop_video_url: str | None = None
    form_mobile_image_url: str | None = None
    form_mobile_video_url: str | None = None
    success_desktop_image_url: str | None = None
    success_desktop_video_url: str | None = None
    success_mobile_image_url: str | None = None
    success_mobile_video_url: str | None = None
    download_file_url: str | None = None
    download_file_name: str | None = None
    success_title: str | None = None
    success_message: str | None = None
    form_badge_url: str | None = None
    success_badge_url: str | None = None


class CustomPopupCreate(CustomPopupFields):
    # Name is validated by the endpoint so a blank name gets a 400
    name: str | None = None
    cta_type: CtaType = 'email'
    cta_button_text: str = 'Subscribe'
    target_type: TargetType = 'all'
    target_pages: list[str] = []
    target_product_ids: list[str] = []
    trigger_type: TriggerType = 'timer'
    trigger_delay: int = 5
    trigger_scroll_percent: int = 50
    dismiss_days: int = 7
    session_only: bool = False
    session_expiry_hours: int = 24
    status: PopupStatus = 'draft'
    priority: int = 0


class CustomPopupUpdate(CustomPopupFields):
    name: str | None = None
    cta_type: CtaType | None = None
    cta_button_text: str | None = None
    target_type: TargetType | None = None
    target_pages: list[str] | None = None
    target_product_ids: list[str] | None = None
    trigger_type: TriggerType | None = None
    trigger_delay: int | None = None
    trigger_scroll_percent: int | None = None
    dismiss_days: int | None = None
    session_only: bool | None = None
    session_expiry_hours: int | None = None
    status: PopupStatus | None = None
    priority: int | None = None


class CustomPopupPatch(APIModel):
    status: PopupStatus | None = None
    increment_views: bool = False
    increment_conversions: bool = False


class CustomPopup(CustomPopupFields):
    id: str
    name: str
    cta_type: str
    cta_button_text: str | None = None
    target_type: str
    target_pages: list[str] = []
    target_product_ids: list[str] = []
    trigger_type: str
    trigger_delay: int | None = None
    trigger_scroll_percent: int | None = None
    dismiss_days: int | None = None
    session_only: bool | None = None
    session_expiry_hours: int | None = None
    status: str
    priority: int | None = 0
    view_count: int | None = 0
    conversion_count: int | None = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PopupSubmit(APIModel):
    popup_type: Literal['welcome', 'exit', 'custom']
    popup_id: str | None = None
    cta_type: Literal['email', 'sms', 'download']
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=30)
    source: str | None = None
    download_file_url: HttpUrl | None = None
    download_file_name: str | None = None

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        error = validate_email(value)
        if error:
            raise ValueError(error)
        return value or None

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if value and not get_phone_digits(value):
            raise ValueError(INVALID_PHONE_MESSAGE)
        error = validate_phone(value)
        if error:
            raise ValueError(error)
        return value or None

    @model_validator(mode="after")
    def _channel_present(self):
        if self.cta_type == 'email' and not self.email:
            raise ValueError("Email is required for email CTA")
        if self.cta_type == 'sms' and not self.phone:
            raise ValueError("Phone is required for SMS CTA")
        return self


class PopupTrack(APIModel):
    popup_id: str | None = None
    popup_type: str | None = None
    action: Literal['view', 'dismiss', 'click']
    page_slug: str | None = None
