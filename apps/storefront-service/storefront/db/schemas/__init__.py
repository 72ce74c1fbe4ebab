"""
Domain-split Pydantic schemas with a single aggregator.

Import request/response models from here: `from storefront.db import schemas`.
"""

from .base import APIModel, ReorderRequest
from .catalog import (
    ProductVariantIn,
    ProductVariant,
    ProductImageIn,
    ProductImage,
    ProductBenefitIn,
    ProductBenefit,
    ProductCreate,
    ProductUpdate,
    Product,
)
from .content import (
    PageWidget,
    PageCreate,
    PageUpdate,
    Page,
    PageWidgetsUpdate,
    HeroSlideCreate,
    HeroSlideUpdate,
    HeroSlide,
    TestimonialCreate,
    TestimonialUpdate,
    Testimonial,
    VideoTestimonialCreate,
    VideoTestimonialUpdate,
    VideoTestimonial,
    InstagramPostCreate,
    InstagramPostUpdate,
    InstagramPost,
    FaqCreate,
    FaqUpdate,
    Faq,
    NavigationItemCreate,
    NavigationItemUpdate,
    NavigationItem,
    FooterLinkCreate,
    FooterLinkUpdate,
    FooterLink,
)
from .reviews import (
    ReviewCreate,
    ReviewUpdate,
    Review,
    ReviewKeywordCreate,
    ReviewKeywordUpdate,
    ReviewKeyword,
    ReviewImportRequest,
)
from .blog import (
    BlogTagCreate,
    BlogTagUpdate,
    BlogTag,
    BlogPostCreate,
    BlogPostUpdate,
    BlogPost,
    BlogSettingsUpdate,
    BlogSettings,
)
from .popups import (
    CustomPopupCreate,
    CustomPopupUpdate,
    CustomPopupPatch,
    CustomPopup,
    PopupSubmit,
    PopupTrack,
)
from .crm import (
    ContactCreate,
    ContactUpdate,
    Contact,
    ContactActivity,
    ContactList,
    SubscriberStats,
    SubscribeRequest,
    ContactsSubscribeRequest,
    ContactFormRequest,
    ContactSubmission,
    InboxUpdate,
    ImportSummary,
)
from .tracking import TrackEvent
from .admin import LoginRequest, AdminUser
from .media import MediaFile, MediaList, MediaRegister, MediaUpdate, UploadSignatureRequest
