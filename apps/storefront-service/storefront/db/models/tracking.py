from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from .base import Base, now_utc, new_id


class PageView(Base):
    __tablename__ = 'page_views'
    id = Column(String(36), primary_key=True, default=new_id)
    path = Column(Text, nullable=False)
    referrer = Column(Text)
    user_agent = Column(Text)
    visitor_id = Column(String(64))
    session_id = Column(String(64))
    country = Column(String(100))
    city = Column(String(255))
    # desktop | mobile | tablet
    device = Column(String(20))
    browser = Column(String(50))
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_page_views_created_at', 'created_at'),
        Index('idx_page_views_visitor_id', 'visitor_id'),
    )


class ClickTracking(Base):
    __tablename__ = 'click_tracking'
    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    product_slug = Column(String(255))
    destination_url = Column(Text, nullable=False)
    visitor_id = Column(String(64))
    session_id = Column(String(64))
    referrer = Column(Text)
    user_agent = Column(Text)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_click_tracking_created_at', 'created_at'),
    )
