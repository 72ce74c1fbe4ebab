from datetime import datetime
from typing import Any

from .base import APIModel


class ProductVariantIn(APIModel):
    name: str
    price: float | None = None
    compare_at_price: float | None = None
    amazon_url: str
    is_default: bool = False
    sort_order: int | None = None


class ProductVariant(ProductVariantIn):
    id: str


class ProductImageIn(APIModel):
    image_url: str
    alt_text: str | None = None
    is_video: bool = False
    video_url: str | None = None
    sort_order: int | None = None


class ProductImage(ProductImageIn):
    id: str


class ProductBenefitIn(APIModel):
    title: str
    description: str | None = None
    is_positive: bool = True
    icon_name: str | None = None
    sort_order: int | None = None


class ProductBenefit(ProductBenefitIn):
    id: str


class ProductBase(APIModel):
    slug: str | None = None
    name: str
    subtitle: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    price: float | None = None
    compare_at_price: float | None = None
    hero_image_url: str | None = None
    secondary_image_url: str | None = None
    badge: str | None = None
    badge_emoji: str | None = None
    badge_bg_color: str | None = None
    badge_text_color: str | None = None
    rotating_badge_enabled: bool = False
    rotating_badge_text: str | None = None
    rating: float | None = None
    review_count: int | None = 0
    meta_title: str | None = None
    meta_description: str | None = None
    widgets: list[dict[str, Any]] = []
    is_active: bool = True
    sort_order: int | None = 0


class ProductCreate(ProductBase):
    variants: list[ProductVariantIn] = []
    images: list[ProductImageIn] = []
    benefits: list[ProductBenefitIn] = []


class ProductUpdate(APIModel):
    slug: str | None = None
    name: str | None = None
    subtitle: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    price: float | None = None
    compare_at_price: float | None = None
    hero_image_url: str | None = None
    secondary_image_url: str | None = None
    badge: str | None = None
    badge_emoji: str | None = None
    badge_bg_color: str | None = None
    badge_text_color: str | None = None
    rotating_badge_enabled: bool | None = None
    rotating_badge_text: str | None = None
    rating: float | None = None
    review_count: int | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    widgets: list[dict[str, Any]] | None = None
    is_active: bool | None = None
    sort_order: int | None = None
    # Nested collections are replaced wholesale when present
    variants: list[ProductVariantIn] | None = None
    images: list[ProductImageIn] | None = None
    benefits: list[ProductBenefitIn] | None = None


class Product(ProductBase):
    id: str
    slug: str
    variants: list[ProductVariant] = []
    images: list[ProductImage] = []
    benefits: list[ProductBenefit] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
