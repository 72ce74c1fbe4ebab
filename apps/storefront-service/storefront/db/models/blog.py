from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, now_utc, new_id
from ..types import JSONList


class BlogPost(Base):
    __tablename__ = 'blog_posts'
    id = Column(String(36), primary_key=True, default=new_id)
    slug = Column(String(255), nullable=False, unique=True)
    title = Column(Text, nullable=False)
    excerpt = Column(Text)
    content = Column(Text)
    featured_image_url = Column(Text)
    author_name = Column(String(255), default="Archie's Remedies")
    author_avatar_url = Column(Text)
    # draft | published | scheduled
    status = Column(String(20), nullable=False, default='draft')
    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    is_featured = Column(Boolean, default=False)
    reading_time = Column(Integer, default=1)
    meta_title = Column(Text)
    meta_description = Column(Text)
    widgets = Column(JSONList())
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    tags = relationship("BlogTag", secondary="blog_post_tags", back_populates="posts", order_by="BlogTag.name")

    __table_args__ = (
        Index('idx_blog_posts_status_published_at', 'status', 'published_at'),
    )


class BlogTag(Base):
    __tablename__ = 'blog_tags'
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    color = Column(String(20))
    created_at = Column(DateTime(timezone=True), default=now_utc)

    posts = relationship("BlogPost", secondary="blog_post_tags", back_populates="tags")


class BlogPostTag(Base):
    __tablename__ = 'blog_post_tags'
    post_id = Column(String(36), ForeignKey('blog_posts.id', ondelete='CASCADE'), primary_key=True)
    tag_id = Column(String(36), ForeignKey('blog_tags.id', ondelete='CASCADE'), primary_key=True)
