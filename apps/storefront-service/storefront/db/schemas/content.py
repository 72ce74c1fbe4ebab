from datetime import datetime
from typing import Any

from pydantic import Field

from .base import APIModel


class PageWidget(APIModel):
    """One block of a page's widget list."""
    id: str
    type: str
    title: str | None = None
    subtitle: str | None = None
    content: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    is_visible: bool = True


class PageBase(APIModel):
    slug: str | None = None
    title: str
    page_type: str = 'content'
    content: str | None = None
    hero_image_url: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    page_title: str | None = None
    page_subtitle: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    is_active: bool = True
    is_draft: bool = False
    show_in_nav: bool = False
    nav_order: int = 0
    nav_show_on_desktop: bool = True
    nav_show_on_mobile: bool = True
    product_id: str | None = None


class PageCreate(PageBase):
    widgets: list[PageWidget] = []


class PageUpdate(APIModel):
    slug: str | None = None
    title: str | None = None
    page_type: str | None = None
    content: str | None = None
    widgets: list[PageWidget] | None = None
    hero_image_url: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    page_title: str | None = None
    page_subtitle: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    is_active: bool | None = None
    is_draft: bool | None = None
    show_in_nav: bool | None = None
    nav_order: int | None = None
    nav_show_on_desktop: bool | None = None
    nav_show_on_mobile: bool | None = None
    product_id: str | None = None


class Page(PageBase):
    id: str
    slug: str
    # Stored widgets may predate validation, so reads stay permissive
    widgets: list[dict[str, Any]] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PageWidgetsUpdate(APIModel):
    widgets: list[PageWidget]


class HeroSlideCreate(APIModel):
    title: str | None = None
    subtitle: str | None = None
    button_text: str | None = None
    button_url: str | None = None
    secondary_button_text: str | None = None
    secondary_button_url: str | None = None
    secondary_button_type: str | None = 'page'
    secondary_anchor_target: str | None = None
    image_url: str
    mobile_image_url: str | None = None
    testimonial_text: str | None = None
    testimonial_author: str | None = None
    testimonial_avatar_url: str | None = None
    is_active: bool = True
    sort_order: int | None = None


class HeroSlideUpdate(APIModel):
    title: str | None = None
    subtitle: str | None = None
    button_text: str | None = None
    button_url: str | None = None
    secondary_button_text: str | None = None
    secondary_button_url: str | None = None
    secondary_button_type: str | None = None
    secondary_anchor_target: str | None = None
    image_url: str | None = None
    mobile_image_url: str | None = None
    testimonial_text: str | None = None
    testimonial_author: str | None = None
    testimonial_avatar_url: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class HeroSlide(HeroSlideCreate):
    id: str


class TestimonialCreate(APIModel):
    name: str
    location: str | None = None
    avatar_url: str | None = None
    rating: int = Field(default=5, ge=1, le=5)
    text: str
    product_id: str | None = None
    is_verified: bool = True
    is_featured: bool = False
    is_active: bool = True
    sort_order: int | None = None


class TestimonialUpdate(APIModel):
    name: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    text: str | None = None
    product_id: str | None = None
    is_verified: bool | None = None
    is_featured: bool | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class Testimonial(TestimonialCreate):
    id: str


class VideoTestimonialCreate(APIModel):
    title: str | None = None
    thumbnail_url: str
    video_url: str
    name: str | None = None
    is_active: bool = True
    sort_order: int | None = None


class VideoTestimonialUpdate(APIModel):
    title: str | None = None
    thumbnail_url: str | None = None
    video_url: str | None = None
    name: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class VideoTestimonial(VideoTestimonialCreate):
    id: str


class InstagramPostCreate(APIModel):
    thumbnail_url: str
    post_url: str | None = None
    caption: str | None = None
    is_active: bool = True
    sort_order: int | None = None


class InstagramPostUpdate(APIModel):
    thumbnail_url: str | None = None
    post_url: str | None = None
    caption: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class InstagramPost(InstagramPostCreate):
    id: str


class FaqCreate(APIModel):
    question: str
    answer: str
    category: str | None = None
    is_active: bool = True
    sort_order: int | None = None


class FaqUpdate(APIModel):
    question: str | None = None
    answer: str | None = None
    category: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class Faq(FaqCreate):
    id: str


class NavigationItemCreate(APIModel):
    label: str
    url: str | None = None
    type: str = 'link'
    product_id: str | None = None
    parent_id: str | None = None
    image_url: str | None = None
    description: str | None = None
    is_active: bool = True
    sort_order: int | None = None


class NavigationItemUpdate(APIModel):
    label: str | None = None
    url: str | None = None
    type: str | None = None
    product_id: str | None = None
    parent_id: str | None = None
    image_url: str | None = None
    description: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class NavigationItem(NavigationItemCreate):
    id: str


class FooterLinkCreate(APIModel):
    label: str
    url: str
    column: str = 'Shop'
    is_external: bool = False
    is_active: bool = True
    sort_order: int | None = None


class FooterLinkUpdate(APIModel):
    label: str | None = None
    url: str | None = None
    column: str | None = None
    is_external: bool | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class FooterLink(FooterLinkCreate):
    id: str
