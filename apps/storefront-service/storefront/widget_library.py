"""
Widget type registry.

Every widget a page can hold is declared here once: its display name,
category, and whether its data comes from a shared table (global widgets) or
from the page's own JSON. The admin widget library, the page editor and the
renderer all read from this module.
"""
from __future__ import annotations

import copy
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class WidgetCategory:
    name: str
    description: str


@dataclass(frozen=True)
class WidgetType:
    type: str
    name: str
    category: str
    description: str
    table: Optional[str] = None
    admin_href: Optional[str] = None
    addable_to_pages: bool = True
    is_global: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


WIDGET_CATEGORIES: List[WidgetCategory] = [
    WidgetCategory("Hero", "Hero sections and carousels"),
    WidgetCategory("Content", "Core content blocks for building pages"),
    WidgetCategory("Social Proof", "Build trust with customer reviews and social content"),
    WidgetCategory("Product", "Showcase products and their benefits"),
    WidgetCategory("Engagement", "Interactive elements to engage visitors"),
]


def _global(type_: str, name: str, category: str, description: str, table: str, admin_href: str) -> WidgetType:
    return WidgetType(type_, name, category, description, table=table, admin_href=admin_href, is_global=True)


WIDGET_TYPES: List[WidgetType] = [
    # Hero
    _global("hero_carousel", "Hero Carousel", "Hero", "Full-width hero carousel with product integration",
            "hero_slides", "/admin/hero-slides"),
    # Content
    WidgetType("text", "Text Block", "Content", "Rich text content section"),
    WidgetType("image_text", "Image + Text", "Content", "Split layout with image and copy"),
    WidgetType("video", "Video Embed", "Content", "Embedded video player"),
    WidgetType("media_carousel", "Media Carousel", "Content", "Full-bleed horizontal carousel with images and videos"),
    WidgetType("quote", "Pull Quote", "Content", "Testimonial or pull quote block"),
    WidgetType("mission", "Mission Section", "Content", "Brand mission with stats and CTA"),
    WidgetType("icon_highlights", "Icon Highlights", "Content", "3-column feature bar with icons, titles, and copy"),
    WidgetType("two_column_feature", "Two Column Feature", "Content",
               "Full-width split layout with media and text/bullets"),
    WidgetType("faq_drawer", "FAQ Drawer", "Content", "Expandable Q&A accordion with themed styling"),
    # Social proof
    _global("testimonials", "Testimonials", "Social Proof", "Customer testimonial carousel",
            "testimonials", "/admin/testimonials"),
    _global("video_testimonials", "Video Reviews", "Social Proof", "Video testimonial grid",
            "video_testimonials", "/admin/video-testimonials"),
    _global("instagram", "Instagram Feed", "Social Proof", "Instagram post grid",
            "instagram_posts", "/admin/instagram"),
    _global("reviews", "Reviews", "Social Proof", "Customer reviews with keyword filters",
            "reviews", "/admin/reviews"),
    WidgetType("press", "Press & Media", "Social Proof", "As seen in logos"),
    # Product
    WidgetType("product_grid", "Product Grid", "Product", "Featured products showcase"),
    WidgetType("benefits", "Benefits", "Product", "Product benefits with icons"),
    WidgetType("ingredients", "Ingredients", "Product", "Ingredient list with info"),
    WidgetType("comparison", "Comparison", "Product", "Before/after comparison"),
    WidgetType("certifications", "Certifications", "Product", "Trust badges and certifications"),
    # Engagement
    _global("faqs", "FAQs", "Engagement", "Accordion FAQ section", "faqs", "/admin/faqs"),
    WidgetType("cta", "Call to Action", "Engagement", "Button with background"),
    WidgetType("contact_form", "Contact Form", "Engagement", "Email contact form"),
    WidgetType("newsletter", "Newsletter", "Engagement", "Email signup form"),
    WidgetType("marquee", "Marquee Bar", "Engagement", "Scrolling text banner"),
]

_EMPTY_GRID_PRODUCT = {
    "productId": None,
    "title": None,
    "description": None,
    "imageUrl": None,
    "hoverImageUrl": None,
    "badge": None,
    "badgeEmoji": None,
    "badgeBgColor": None,
    "badgeTextColor": None,
}

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "text": {"content": "", "alignment": "left", "maxWidth": "prose"},
    "image_text": {
        "imageUrl": "", "imagePosition": "left", "title": "", "content": "", "ctaText": "", "ctaUrl": "",
    },
    "video": {"videoUrl": "", "autoplay": False, "muted": True, "loop": False},
    "media_carousel": {"items": [], "autoplay": True},
    "quote": {"text": "", "author": "", "authorTitle": "", "avatarUrl": ""},
    "mission": {
        "title": "Our Mission", "subtitle": "", "content": "", "imageUrl": "", "stats": [], "ctaText": "", "ctaUrl": "",
    },
    "reviews": {
        "title": "What People Are Saying",
        "subtitle": "",
        # None means all products / no collection
        "productId": None,
        "collectionName": None,
        "showKeywordFilters": True,
        "initialCount": 6,
        "backgroundColor": "cream",
        "showVerifiedBadge": True,
        "showRatingHeader": True,
        "excludedTags": [],
    },
    "press": {"title": "As Seen In", "logos": []},
    "product_grid": {
        "title": "Clean Formulas for Sensitive Eyes",
        "subtitle": "Preservative-free eye care, crafted without the questionable ingredients.",
        "product1": dict(_EMPTY_GRID_PRODUCT),
        "product2": dict(_EMPTY_GRID_PRODUCT),
    },
    "benefits": {"title": "Why Choose Us", "benefits": [], "layout": "grid"},
    "ingredients": {"title": "Key Ingredients", "ingredients": [], "showDetails": True},
    "comparison": {
        "title": "See the Difference", "beforeImage": "", "afterImage": "",
        "beforeLabel": "Before", "afterLabel": "After",
    },
    "certifications": {"title": "Quality & Trust", "badges": []},
    "cta": {
        "title": "", "subtitle": "", "buttonText": "Shop Now", "buttonUrl": "/products", "backgroundColor": "#bbdae9",
    },
    "contact_form": {"title": "Get in Touch", "subtitle": "", "fields": ["name", "email", "message"]},
    "newsletter": {
        "title": "Stay Updated", "subtitle": "Join our newsletter for exclusive offers", "buttonText": "Subscribe",
    },
    "marquee": {
        "text": "Preservative-Free ✦ Clean Ingredients ✦ Doctor Trusted ✦ Instant Relief",
        "speed": "slow",
        "size": "xxl",
        "style": "dark",
        "theme": "dark",
        "separator": "✦",
    },
    "icon_highlights": {
        "title": "",
        "theme": "blue",
        "columns": [{"iconUrl": "", "title": "", "description": ""} for _ in range(3)],
        "linkText": "",
        "linkUrl": "",
    },
    "two_column_feature": {
        "theme": "blue",
        "mediaPosition": "left",
        "mediaMode": "single",
        "mediaUrl": "",
        "mediaIsVideo": False,
        "beforeMediaUrl": "",
        "beforeMediaIsVideo": False,
        "beforeLabel": "BEFORE",
        "afterMediaUrl": "",
        "afterMediaIsVideo": False,
        "afterLabel": "AFTER",
        "textMode": "title_body",
        "textAlignment": "left",
        "showStars": False,
        "starCount": 5,
        "title": "",
        "body": "",
        "bulletPoints": [""],
        "ctaText": "",
        "ctaUrl": "",
    },
    "faq_drawer": {"theme": "blue", "items": [{"id": "", "question": "", "answer": ""}]},
}

_BY_TYPE: Dict[str, WidgetType] = {w.type: w for w in WIDGET_TYPES}


def get_widget_by_type(widget_type: str) -> Optional[WidgetType]:
    return _BY_TYPE.get(widget_type)


def is_known_type(widget_type: str) -> bool:
    return widget_type in _BY_TYPE


def get_widget_display_name(widget_type: str) -> str:
    widget = get_widget_by_type(widget_type)
    return widget.name if widget else widget_type


def get_widgets_by_category() -> Dict[str, List[WidgetType]]:
    grouped: Dict[str, List[WidgetType]] = {}
    for widget in WIDGET_TYPES:
        grouped.setdefault(widget.category, []).append(widget)
    return grouped


def get_addable_widgets() -> List[WidgetType]:
    return [w for w in WIDGET_TYPES if w.addable_to_pages]


def get_global_widgets() -> List[WidgetType]:
    return [w for w in WIDGET_TYPES if w.is_global]


def get_page_specific_widgets() -> List[WidgetType]:
    return [w for w in WIDGET_TYPES if not w.is_global]


def get_category_by_name(name: str) -> Optional[WidgetCategory]:
    return next((c for c in WIDGET_CATEGORIES if c.name == name), None)


def get_default_config(widget_type: str) -> Dict[str, Any]:
    """Fresh copy of the default config; callers may mutate it."""
    return copy.deepcopy(DEFAULT_CONFIGS.get(widget_type, {}))


def get_ordered_categories() -> List[str]:
    used = {w.category for w in WIDGET_TYPES}
    return [c.name for c in WIDGET_CATEGORIES if c.name in used]
