from sqlalchemy import Column, String, Text, Boolean, Integer, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, now_utc, new_id
from ..types import JSONList


class Product(Base):
    __tablename__ = 'products'
    id = Column(String(36), primary_key=True, default=new_id)
    slug = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    subtitle = Column(Text)
    short_description = Column(Text)
    long_description = Column(Text)
    # Display pricing only; checkout happens on the marketplace listing
    price = Column(Float)
    compare_at_price = Column(Float)
    hero_image_url = Column(Text)
    secondary_image_url = Column(Text)
    badge = Column(String(100))
    badge_emoji = Column(String(16))
    badge_bg_color = Column(String(20))
    badge_text_color = Column(String(20))
    rotating_badge_enabled = Column(Boolean, default=False)
    rotating_badge_text = Column(String(100))
    rating = Column(Float)
    review_count = Column(Integer, default=0)
    meta_title = Column(Text)
    meta_description = Column(Text)
    widgets = Column(JSONList())
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    variants = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductVariant.sort_order",
    )
    images = relationship(
        "ProductImage", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductImage.sort_order",
    )
    benefits = relationship(
        "ProductBenefit", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductBenefit.sort_order",
    )


class ProductVariant(Base):
    __tablename__ = 'product_variants'
    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Float)
    compare_at_price = Column(Float)
    amazon_url = Column(Text, nullable=False)
    is_default = Column(Boolean, default=False)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        Index('idx_product_variants_product_id', 'product_id'),
    )


class ProductImage(Base):
    __tablename__ = 'product_images'
    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    image_url = Column(Text, nullable=False)
    alt_text = Column(Text)
    is_video = Column(Boolean, default=False)
    video_url = Column(Text)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    product = relationship("Product", back_populates="images")

    __table_args__ = (
        Index('idx_product_images_product_id', 'product_id'),
    )


class ProductBenefit(Base):
    __tablename__ = 'product_benefits'
    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    # True renders under "What's In", False under "What's Not"
    is_positive = Column(Boolean, default=True)
    icon_name = Column(String(100))
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    product = relationship("Product", back_populates="benefits")
