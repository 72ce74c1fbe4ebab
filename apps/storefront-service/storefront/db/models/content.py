from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Index
from .base import Base, now_utc, new_id
from ..types import JSONList


class Page(Base):
    __tablename__ = 'pages'
    id = Column(String(36), primary_key=True, default=new_id)
    slug = Column(String(255), nullable=False, unique=True)
    title = Column(String(255), nullable=False)
    page_type = Column(String(20), default='content')
    content = Column(Text)
    widgets = Column(JSONList())
    hero_image_url = Column(Text)
    hero_title = Column(Text)
    hero_subtitle = Column(Text)
    page_title = Column(Text)
    page_subtitle = Column(Text)
    meta_title = Column(Text)
    meta_description = Column(Text)
    is_active = Column(Boolean, default=True)
    is_draft = Column(Boolean, default=False)
    show_in_nav = Column(Boolean, default=False)
    nav_order = Column(Integer, default=0)
    nav_show_on_desktop = Column(Boolean, default=True)
    nav_show_on_mobile = Column(Boolean, default=True)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class HeroSlide(Base):
    __tablename__ = 'hero_slides'
    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text)
    subtitle = Column(Text)
    button_text = Column(String(100))
    button_url = Column(Text)
    secondary_button_text = Column(String(100))
    secondary_button_url = Column(Text)
    # page | anchor | external
    secondary_button_type = Column(String(20), default='page')
    secondary_anchor_target = Column(Text)
    image_url = Column(Text, nullable=False)
    mobile_image_url = Column(Text)
    testimonial_text = Column(Text)
    testimonial_author = Column(String(255))
    testimonial_avatar_url = Column(Text)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class Testimonial(Base):
    __tablename__ = 'testimonials'
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    location = Column(String(255))
    avatar_url = Column(Text)
    rating = Column(Integer, default=5)
    text = Column(Text, nullable=False)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    is_verified = Column(Boolean, default=True)
    is_featured = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class VideoTestimonial(Base):
    __tablename__ = 'video_testimonials'
    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text)
    thumbnail_url = Column(Text, nullable=False)
    video_url = Column(Text, nullable=False)
    name = Column(String(255))
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class InstagramPost(Base):
    __tablename__ = 'instagram_posts'
    id = Column(String(36), primary_key=True, default=new_id)
    thumbnail_url = Column(Text, nullable=False)
    post_url = Column(Text)
    caption = Column(Text)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class Faq(Base):
    __tablename__ = 'faqs'
    id = Column(String(36), primary_key=True, default=new_id)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(100))
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class NavigationItem(Base):
    __tablename__ = 'navigation_items'
    id = Column(String(36), primary_key=True, default=new_id)
    label = Column(String(255), nullable=False)
    url = Column(Text)
    # link | dropdown | mega
    type = Column(String(20), default='link')
    product_id = Column(String(36), ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    parent_id = Column(String(36), nullable=True)
    image_url = Column(Text)
    description = Column(Text)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class FooterLink(Base):
    __tablename__ = 'footer_links'
    id = Column(String(36), primary_key=True, default=new_id)
    label = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    column = Column(String(50), default='Shop')
    is_external = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_footer_links_column', 'column'),
    )
