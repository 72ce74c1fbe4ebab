from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Index, CheckConstraint
from .base import Base, now_utc, new_id
from ..types import JSONList


class Review(Base):
    __tablename__ = 'reviews'
    id = Column(String(36), primary_key=True, default=new_id)
    # Either tied to a product or grouped under a named collection
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=True)
    collection_name = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=False, default=5)
    title = Column(Text)
    author_name = Column(String(255), nullable=False)
    author_initial = Column(String(255))
    text = Column(Text, nullable=False)
    keywords = Column(JSONList())
    is_verified = Column(Boolean, default=True)
    is_featured = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
        Index('idx_reviews_product_id', 'product_id'),
        Index('idx_reviews_collection_name', 'collection_name'),
    )


class ReviewKeyword(Base):
    __tablename__ = 'review_keywords'
    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=True)
    collection_name = Column(String(255), nullable=True)
    keyword = Column(String(100), nullable=False)
    count = Column(Integer, default=0)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
