"""
Tagged TTL cache for composed page data.

Rendered pages read the same settings/widget rows on every request; entries
expire after PAGE_CACHE_TTL_SECONDS and admin writes drop them early by tag.
"""
from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Callable, Dict, Iterable, Set, Tuple

logger = logging.getLogger(__name__)

HOMEPAGE_DATA = "homepage-data"
PAGE_DATA = "page-data"
DYNAMIC_PAGE_DATA = "dynamic-page-data"
PRODUCT_DATA = "product-data"
BLOG_DATA = "blog-data"
SETTINGS_DATA = "settings-data"


def _default_ttl() -> float:
    try:
        return float(os.getenv("PAGE_CACHE_TTL_SECONDS", "60"))
    except ValueError:
        return 60.0


class TaggedCache:
    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._tags: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl if self._ttl is not None else _default_ttl()

    def get_or_set(self, key: str, factory: Callable[[], Any], tags: Iterable[str] = ()) -> Any:
        now = self._clock()
        with self._lock:
            hit = self._entries.get(key)
            if hit is not None and hit[0] > now:
                return hit[1]
        value = factory()
        if self.ttl <= 0:
            return value
        with self._lock:
            self._entries[key] = (now + self.ttl, value)
            for tag in tags:
                self._tags.setdefault(tag, set()).add(key)
        return value

    def invalidate_tag(self, tag: str) -> int:
        with self._lock:
            keys = self._tags.pop(tag, set())
            for key in keys:
                self._entries.pop(key, None)
        logger.debug("cache_invalidate: tag=%s keys=%d", tag, len(keys))
        return len(keys)

    def invalidate_tags(self, *tags: str) -> None:
        for tag in tags:
            self.invalidate_tag(tag)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._tags.clear()


page_cache = TaggedCache()


def invalidate_page(slug: str | None = None) -> None:
    """Drop cached page data after a page write (home also drops homepage data)."""
    page_cache.invalidate_tags(PAGE_DATA, DYNAMIC_PAGE_DATA)
    if slug == "home":
        page_cache.invalidate_tag(HOMEPAGE_DATA)


def invalidate_site_content() -> None:
    """Global content (settings, products, widgets) touches every rendered page."""
    page_cache.invalidate_tags(HOMEPAGE_DATA, PAGE_DATA, DYNAMIC_PAGE_DATA, PRODUCT_DATA, BLOG_DATA, SETTINGS_DATA)
