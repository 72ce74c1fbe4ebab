from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, now_utc, new_id
from ..types import JSONEncoded


class Contact(Base):
    """Unified lead record for email and SMS subscribers."""
    __tablename__ = 'contacts'
    id = Column(String(36), primary_key=True, default=new_id)
    # NULLs do not collide under a unique constraint, so either channel may be absent
    email = Column(String(320), nullable=True, unique=True)
    phone = Column(String(30), nullable=True, unique=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    address = Column(Text)
    city = Column(String(255))
    state = Column(String(100))
    zip_code = Column(String(20))
    country = Column(String(100))
    notes = Column(Text)
    source = Column(String(100))
    source_popup_id = Column(String(36), ForeignKey('custom_popups.id', ondelete='SET NULL'), nullable=True)
    # active | inactive | bounced | none
    email_status = Column(String(20), default='none')
    # active | inactive | none
    sms_status = Column(String(20), default='none')
    email_consent_at = Column(DateTime(timezone=True), nullable=True)
    sms_consent_at = Column(DateTime(timezone=True), nullable=True)
    visitor_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    activities = relationship("ContactActivity", back_populates="contact", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_contacts_visitor_id', 'visitor_id'),
        Index('idx_contacts_created_at', 'created_at'),
    )


class ContactActivity(Base):
    __tablename__ = 'contact_activity'
    id = Column(String(36), primary_key=True, default=new_id)
    contact_id = Column(String(36), ForeignKey('contacts.id', ondelete='CASCADE'), nullable=True)
    activity_type = Column(String(50), nullable=False)
    activity_data = Column(JSONEncoded(empty={}))
    popup_id = Column(String(36), nullable=True)
    page_slug = Column(Text)
    product_id = Column(String(36), nullable=True)
    download_file_url = Column(Text)
    download_file_name = Column(String(255))
    visitor_id = Column(String(64))
    session_id = Column(String(64))
    created_at = Column(DateTime(timezone=True), default=now_utc)

    contact = relationship("Contact", back_populates="activities")

    __table_args__ = (
        Index('idx_contact_activity_contact_id_created_at', 'contact_id', 'created_at'),
        Index('idx_contact_activity_type', 'activity_type'),
    )


class ContactSubmission(Base):
    __tablename__ = 'contact_submissions'
    id = Column(String(36), primary_key=True, default=new_id)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255))
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    subject = Column(Text)
    message = Column(Text, nullable=False)
    # new | pending | resolved
    status = Column(String(20), default='new')
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
