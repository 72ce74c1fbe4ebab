"""Slug and reading-time helpers for pages and blog posts."""
from __future__ import annotations

import math
import re
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_TAGS = re.compile(r"<[^>]+>")
WORDS_PER_MINUTE = 200


def slugify(value: Optional[str]) -> str:
    return _NON_ALNUM.sub("-", (value or "").lower()).strip("-")


def strip_html(value: Optional[str]) -> str:
    return _TAGS.sub(" ", value or "")


def calculate_reading_time(content: Optional[str]) -> int:
    words = len(strip_html(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def looks_like_html(content: Optional[str]) -> bool:
    return bool(content) and "<" in content and ">" in content


def normalize_page_slug(slug: str) -> str:
    """Pages are stored without leading/trailing slashes ("our-story", "legal/terms")."""
    return "/".join(part for part in (slug or "").strip().split("/") if part)
