from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, now_utc, new_id


class AdminUser(Base):
    __tablename__ = 'admin_users'
    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    sessions = relationship("AdminSession", back_populates="user", cascade="all, delete-orphan")


class AdminSession(Base):
    __tablename__ = 'admin_sessions'
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey('admin_users.id', ondelete='CASCADE'), nullable=False)
    token = Column(String(64), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    user = relationship("AdminUser", back_populates="sessions")

    __table_args__ = (
        Index('idx_admin_sessions_expires_at', 'expires_at'),
    )
