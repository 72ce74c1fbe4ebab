"""
Domain-split SQLAlchemy models with a single aggregator.

Import ORM classes from here: `from storefront.db import models`.
"""

from .base import Base, now_utc, new_id, as_utc  # re-export

# Domain models
from .settings import SiteSettings, BlogSettings
from .catalog import Product, ProductVariant, ProductImage, ProductBenefit
from .content import (
    Page,
    HeroSlide,
    Testimonial,
    VideoTestimonial,
    InstagramPost,
    Faq,
    NavigationItem,
    FooterLink,
)
from .reviews import Review, ReviewKeyword
from .blog import BlogPost, BlogTag, BlogPostTag
from .popups import CustomPopup
from .crm import Contact, ContactActivity, ContactSubmission
from .tracking import PageView, ClickTracking
from .admin import AdminUser, AdminSession
from .media import MediaFile

__all__ = [
    # base
    "Base",
    "now_utc",
    "new_id",
    "as_utc",
    # settings
    "SiteSettings",
    "BlogSettings",
    # catalog
    "Product",
    "ProductVariant",
    "ProductImage",
    "ProductBenefit",
    # content
    "Page",
    "HeroSlide",
    "Testimonial",
    "VideoTestimonial",
    "InstagramPost",
    "Faq",
    "NavigationItem",
    "FooterLink",
    # reviews
    "Review",
    "ReviewKeyword",
    # blog
    "BlogPost",
    "BlogTag",
    "BlogPostTag",
    # popups / crm
    "CustomPopup",
    "Contact",
    "ContactActivity",
    "ContactSubmission",
    # analytics
    "PageView",
    "ClickTracking",
    # admin
    "AdminUser",
    "AdminSession",
    "MediaFile",
]
