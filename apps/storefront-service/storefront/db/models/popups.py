from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, Index
from .base import Base, now_utc, new_id
from ..types import JSONList


class CustomPopup(Base):
    __tablename__ = 'custom_popups'
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    title = Column(Text)
    body = Column(Text)
    # Legacy single-media fields
    video_url = Column(Text)
    video_thumbnail_url = Column(Text)
    image_url = Column(Text)
    # State x device media variants
    form_desktop_image_url = Column(Text)
    form_desktop_video_url = Column(Text)
    form_mobile_image_url = Column(Text)
    form_mobile_video_url = Column(Text)
    success_desktop_image_url = Column(Text)
    success_desktop_video_url = Column(Text)
    success_mobile_image_url = Column(Text)
    success_mobile_video_url = Column(Text)
    # email | sms | download | none
    cta_type = Column(String(20), nullable=False, default='email')
    cta_button_text = Column(String(100), default='Subscribe')
    download_file_url = Column(Text)
    download_file_name = Column(String(255))
    success_title = Column(Text)
    success_message = Column(Text)
    form_badge_url = Column(Text)
    success_badge_url = Column(Text)
    # all | specific | product
    target_type = Column(String(20), nullable=False, default='all')
    target_pages = Column(JSONList())
    target_product_ids = Column(JSONList())
    # timer | scroll | exit
    trigger_type = Column(String(20), nullable=False, default='timer')
    trigger_delay = Column(Integer, default=5)
    trigger_scroll_percent = Column(Integer, default=50)
    dismiss_days = Column(Integer, default=7)
    session_only = Column(Boolean, default=False)
    session_expiry_hours = Column(Integer, default=24)
    # draft | live | paused
    status = Column(String(20), nullable=False, default='draft')
    priority = Column(Integer, default=0)
    view_count = Column(Integer, default=0)
    conversion_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_custom_popups_status_priority', 'status', 'priority'),
    )
