import json

from storefront.db import models
from storefront.services import page_renderer
from storefront.services.widget_data import get_widget_data
from storefront.utils.cache import page_cache


def test_parse_widgets_handles_strings_lists_and_garbage():
    assert page_renderer.parse_widgets(None) == []
    assert page_renderer.parse_widgets("{not json") == []
    assert page_renderer.parse_widgets(json.dumps({"type": "text"})) == []

    widgets = page_renderer.parse_widgets(json.dumps([
        {"type": "text", "config": {"content": "Hi"}},
        {"config": {"content": "no type"}},
        "junk",
        {"id": "w2", "type": "cta", "is_visible": False, "config": "bad"},
    ]))
    assert [w["type"] for w in widgets] == ["text", "cta"]
    assert widgets[0]["isVisible"] is True
    assert widgets[0]["id"]
    assert widgets[1]["id"] == "w2"
    assert widgets[1]["isVisible"] is False
    assert widgets[1]["config"] == {}


def test_visible_widget_types_skips_hidden():
    widgets = [
        {"type": "text", "isVisible": True},
        {"type": "faqs", "isVisible": False},
        {"type": "reviews"},
    ]
    assert page_renderer.visible_widget_types(widgets) == ["text", "reviews"]


def test_page_flags_hero_beats_page_header():
    flags = page_renderer.page_flags({"hero_title": "Hello", "page_title": "Ignored"}, 0)
    assert flags["has_hero"] is True
    assert flags["has_page_header"] is False
    assert flags["is_widget_only_page"] is False


def test_page_flags_detect_video_hero_and_html_content():
    flags = page_renderer.page_flags({"hero_image_url": "https://cdn/hero.mp4", "content": "<p>Hi</p>"}, 1)
    assert flags["hero_is_video"] is True
    assert flags["has_content"] is True
    assert flags["content_is_html"] is True


def test_page_flags_widget_only_page():
    assert page_renderer.page_flags({"page_title": "  "}, 2)["is_widget_only_page"] is True
    assert page_renderer.page_flags({}, 0)["is_widget_only_page"] is False


def test_widget_data_loads_only_requested_sources(db_session):
    db_session.add_all([
        models.Faq(question="Are they preservative-free?", answer="Yes.", is_active=True, sort_order=0),
        models.Faq(question="Hidden", answer="No.", is_active=False, sort_order=1),
        models.Testimonial(name="Jane", text="Love them", is_active=True),
    ])
    db_session.commit()

    data = get_widget_data(db_session, ["faqs", "text"])
    assert list(data) == ["faqs"]
    assert [f["question"] for f in data["faqs"]] == ["Are they preservative-free?"]


def test_widget_data_review_collections(db_session):
    db_session.add_all([
        models.Review(collection_name="Eye Drops", rating=5, author_name="A B", text="Great", is_active=True),
        models.Review(collection_name="Eye Drops", rating=4, author_name="C D", text="Good", is_active=True),
        models.Review(collection_name="Eye Wipes", rating=5, author_name="E F", text="Soft", is_active=True),
    ])
    db_session.commit()

    data = get_widget_data(db_session, ["reviews"])
    assert data["reviewCollections"] == ["Eye Drops", "Eye Wipes"]
    assert data["reviewKeywords"] == []


def test_compose_home_without_page_uses_defaults(db_session):
    composed = page_renderer.compose_home(db_session)
    assert composed["page"] is None
    assert [w["type"] for w in composed["widgets"]] == list(page_renderer.DEFAULT_HOME_WIDGETS)
    assert composed["widget_data"]["heroSlides"] == []
    assert composed["flags"]["is_widget_only_page"] is True


def test_compose_home_uses_active_home_page(db_session, page_factory):
    page_factory("home", widgets=[{"type": "marquee", "config": {"text": "Clean"}}])
    composed = page_renderer.compose_home(db_session)
    assert composed["page"]["slug"] == "home"
    assert [w["type"] for w in composed["widgets"]] == ["marquee"]


def test_compose_page_hides_invisible_widgets(db_session, page_factory):
    page = page_factory("our-story", widgets=[
        {"type": "text", "config": {"content": "Shown"}},
        {"type": "faqs", "isVisible": False, "config": {}},
    ])
    composed = page_renderer.compose_page(db_session, page)
    assert [w["type"] for w in composed["widgets"]] == ["text"]
    assert "faqs" not in composed["widget_data"]


def test_load_page_is_cached_until_invalidated(db_session, page_factory):
    page_factory("about", page_title="About")
    first = page_renderer.load_page(db_session, "about")
    assert first["page"]["page_title"] == "About"

    db_session.query(models.Page).filter_by(slug="about").update({"page_title": "Changed"})
    db_session.commit()
    assert page_renderer.load_page(db_session, "about")["page"]["page_title"] == "About"

    page_cache.clear()
    assert page_renderer.load_page(db_session, "about")["page"]["page_title"] == "Changed"


def test_load_page_missing_or_inactive(db_session, page_factory):
    page_factory("retired", is_active=False)
    assert page_renderer.load_page(db_session, "retired") is None
    assert page_renderer.load_page(db_session, "nope") is None


def test_header_props_without_settings(db_session):
    props = page_renderer.get_header_props(db_session, {})
    assert props["bumper"] is None
    assert props["global_nav"] is None
    assert props["products"] == []


def test_header_props_apply_nav_defaults(db_session, settings_factory, product_factory):
    settings_factory(bumper_enabled=True, bumper_text="Free shipping")
    product_factory()
    settings = page_renderer.get_settings_dict(db_session)
    props = page_renderer.get_header_props(db_session, settings)
    assert props["bumper"]["enabled"] is True
    assert props["bumper"]["theme"] == "light"
    assert props["global_nav"]["cta_enabled"] is True
    assert props["global_nav"]["cta_text"] == page_renderer.DEFAULT_NAV_CTA_TEXT
    assert props["global_nav"]["marketing_tile"]["badge1"] == "Preservative-Free"
    assert [p["slug"] for p in props["products"]] == ["eye-drops"]


def test_blog_post_related_prefers_shared_tags(db_session):
    tag = models.BlogTag(name="Dry Eyes", slug="dry-eyes")
    other = models.BlogTag(name="News", slug="news")
    main = models.BlogPost(slug="main", title="Main", status="published", tags=[tag])
    sibling = models.BlogPost(slug="sibling", title="Sibling", status="published", tags=[tag])
    unrelated = models.BlogPost(slug="unrelated", title="Unrelated", status="published", tags=[other])
    draft = models.BlogPost(slug="draft", title="Draft", status="draft")
    db_session.add_all([tag, other, main, sibling, unrelated, draft])
    db_session.commit()

    data = page_renderer.load_blog_post(db_session, "main")
    assert data["post"]["tags"][0]["slug"] == "dry-eyes"
    assert [p["slug"] for p in data["related"]] == ["sibling"]
    assert page_renderer.load_blog_post(db_session, "draft") is None
