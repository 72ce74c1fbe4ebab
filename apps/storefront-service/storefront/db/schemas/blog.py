from datetime import datetime
from typing import Any, Literal

from .base import APIModel

BlogStatus = Literal['draft', 'published', 'scheduled']


class BlogTagCreate(APIModel):
    name: str
    slug: str | None = None
    color: str | None = None


class BlogTagUpdate(APIModel):
    name: str | None = None
    slug: str | None = None
    color: str | None = None


class BlogTag(APIModel):
    id: str
    name: str
    slug: str
    color: str | None = None


class BlogPostCreate(APIModel):
    title: str
    slug: str | None = None
    excerpt: str | None = None
    content: str | None = None
    featured_image_url: str | None = None
    author_name: str | None = None
    author_avatar_url: str | None = None
    status: BlogStatus = 'draft'
    scheduled_at: datetime | None = None
    is_featured: bool = False
    meta_title: str | None = None
    meta_description: str | None = None
    widgets: list[dict[str, Any]] = []
    tag_ids: list[str] = []


class BlogPostUpdate(APIModel):
    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    content: str | None = None
    featured_image_url: str | None = None
    author_name: str | None = None
    author_avatar_url: str | None = None
    status: BlogStatus | None = None
    scheduled_at: datetime | None = None
    is_featured: bool | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    widgets: list[dict[str, Any]] | None = None
    sort_order: int | None = None
    tag_ids: list[str] | None = None


class BlogPost(APIModel):
    id: str
    slug: str
    title: str
    excerpt: str | None = None
    content: str | None = None
    featured_image_url: str | None = None
    author_name: str | None = None
    author_avatar_url: str | None = None
    status: str
    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    is_featured: bool | None = False
    reading_time: int | None = 1
    meta_title: str | None = None
    meta_description: str | None = None
    widgets: list[dict[str, Any]] = []
    sort_order: int | None = 0
    tags: list[BlogTag] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BlogSettingsUpdate(APIModel):
    blog_name: str | None = None
    blog_slug: str | None = None
    page_title: str | None = None
    page_subtitle: str | None = None
    grid_layout: str | None = None
    widgets: list[dict[str, Any]] | None = None


class BlogSettings(APIModel):
    id: str
    blog_name: str | None = None
    blog_slug: str | None = None
    page_title: str | None = None
    page_subtitle: str | None = None
    grid_layout: str | None = None
    widgets: list[dict[str, Any]] = []
