from storefront.utils import cache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_get_or_set_caches_until_ttl_expires():
    clock = FakeClock()
    c = cache.TaggedCache(ttl_seconds=60, clock=clock)
    calls = []

    def factory():
        calls.append(1)
        return len(calls)

    assert c.get_or_set("home", factory) == 1
    assert c.get_or_set("home", factory) == 1
    clock.now += 61
    assert c.get_or_set("home", factory) == 2


def test_invalidate_tag_drops_only_tagged_keys():
    c = cache.TaggedCache(ttl_seconds=60)
    c.get_or_set("page:a", lambda: "a", tags=(cache.PAGE_DATA,))
    c.get_or_set("product:x", lambda: "x", tags=(cache.PRODUCT_DATA,))

    assert c.invalidate_tag(cache.PAGE_DATA) == 1
    assert c.get_or_set("page:a", lambda: "a2", tags=(cache.PAGE_DATA,)) == "a2"
    assert c.get_or_set("product:x", lambda: "x2") == "x"


def test_zero_ttl_disables_caching():
    c = cache.TaggedCache(ttl_seconds=0)
    values = iter([1, 2])
    assert c.get_or_set("k", lambda: next(values)) == 1
    assert c.get_or_set("k", lambda: next(values)) == 2


def test_ttl_from_environment(monkeypatch):
    monkeypatch.setenv("PAGE_CACHE_TTL_SECONDS", "15")
    assert cache.TaggedCache().ttl == 15.0
    monkeypatch.setenv("PAGE_CACHE_TTL_SECONDS", "soon")
    assert cache.TaggedCache().ttl == 60.0


def test_invalidate_page_only_drops_homepage_for_home():
    cache.page_cache.get_or_set("home", lambda: "home", tags=(cache.HOMEPAGE_DATA,))
    cache.invalidate_page("about")
    assert cache.page_cache.get_or_set("home", lambda: "rebuilt") == "home"
    cache.invalidate_page("home")
    assert cache.page_cache.get_or_set("home", lambda: "rebuilt") == "rebuilt"


def test_invalidate_site_content_drops_settings():
    cache.page_cache.get_or_set("settings", lambda: {"site_name": "Old"}, tags=(cache.SETTINGS_DATA,))
    cache.invalidate_site_content()
    assert cache.page_cache.get_or_set("settings", lambda: {"site_name": "New"}) == {"site_name": "New"}
