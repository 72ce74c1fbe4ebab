import json
import re
from datetime import datetime, timezone
from typing import get_args

from storefront.db import models
from storefront.db.schemas.popups import TriggerType


def test_home_renders_with_defaults(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert 'id="popup-config"' in r.text


def test_dynamic_page_renders_visible_widgets(client, page_factory):
    page_factory("our-story", title="Our Story", widgets=[
        {"id": "w1", "type": "text", "config": {"content": "<p>Founded in 2019</p>"}},
        {"id": "w2", "type": "text", "isVisible": False, "config": {"content": "<p>Hidden copy</p>"}},
        {"id": "w3", "type": "mystery_widget", "config": {}},
    ])
    r = client.get("/our-story/")
    assert r.status_code == 200
    assert "<title>Our Story" in r.text
    assert "Founded in 2019" in r.text
    assert "Hidden copy" not in r.text


def test_unknown_and_inactive_pages_render_404(client, page_factory):
    page_factory("retired", is_active=False)
    for path in ("/retired", "/does-not-exist"):
        r = client.get(path)
        assert r.status_code == 404
        assert "Page not found" in r.text


def test_api_404_stays_json(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json()["detail"]


def test_draft_page_needs_preview_access(client, page_factory):
    page_factory("launch", is_draft=True, content="Secret launch copy")
    assert client.get("/launch").status_code == 404

    r = client.get("/launch", params={"token": "abc123"})
    assert r.cookies.get("preview_session") == "abc123"
    r = client.get("/launch")
    assert r.status_code == 200
    assert "Draft preview" in r.text
    assert "Secret launch copy" in r.text


def test_draft_mode_redirects_to_coming_soon(client, settings_factory):
    settings_factory(site_in_draft_mode=True)
    r = client.get("/faq", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/coming-soon"

    assert "Something clean is coming." in client.get("/coming-soon").text

    client.cookies.set("preview_token", "x")
    assert client.get("/faq", follow_redirects=False).status_code == 200


def test_product_page(client, db_session, product_factory):
    product = product_factory(subtitle="For dry, tired eyes", price=14.99)
    db_session.add(models.ProductVariant(product_id=product.id, name="30 vials", amazon_url="https://amazon.com/dp/1"))
    db_session.commit()

    r = client.get("/products/eye-drops")
    assert r.status_code == 200
    assert "Preservative-Free Eye Drops" in r.text
    assert "$14.99" in r.text
    assert "30 vials" in r.text
    assert client.get("/products/nope").status_code == 404


def test_custom_popup_is_embedded_on_matching_pages(client, popup_factory):
    popup_factory(name="FAQ helper", title="Questions?", target_type="specific", target_pages=["/faq"])
    assert 'id="popup-custom"' in client.get("/faq").text
    assert 'id="popup-custom"' not in client.get("/contact").text


def _popup_config(html):
    match = re.search(r'<script type="application/json" id="popup-config">(.*?)</script>', html, re.S)
    assert match, "popup config missing"
    return json.loads(match.group(1))


def test_exit_triggered_custom_popup_config(client, popup_factory):
    popup = popup_factory(name="Leaving?", trigger_type="exit", dismiss_days=3)
    config = _popup_config(client.get("/faq").text)
    assert config["custom"]["triggerType"] == "exit"
    assert config["rules"]["custom"] == {"id": popup.id, "dismiss_days": 3}
    assert config["rules"]["exit"]["wait_for_welcome"] is False

    script = client.get("/static/js/site.js").text
    for trigger in get_args(TriggerType):
        if trigger != "timer":
            assert f'p.triggerType === "{trigger}"' in script


def test_faq_groups_by_category(client, db_session):
    db_session.add_all([
        models.Faq(question="Is it sterile?", answer="Yes", category="Safety", sort_order=0),
        models.Faq(question="Where to buy?", answer="Amazon", sort_order=1),
        models.Faq(question="Old question", answer="Gone", is_active=False, sort_order=2),
    ])
    db_session.commit()
    html = client.get("/faq").text
    assert "Safety" in html and "General" in html
    assert "Is it sterile?" in html
    assert "Old question" not in html


def _post(db_session, slug, title, tags=(), status="published"):
    post = models.BlogPost(
        slug=slug, title=title, status=status, content="Body",
        published_at=datetime(2025, 12, 13, tzinfo=timezone.utc),
    )
    post.tags = list(tags)
    db_session.add(post)
    db_session.commit()
    return post


def test_blog_index_tag_and_post(client, db_session):
    tag = models.BlogTag(name="Dry Eyes", slug="dry-eyes")
    db_session.add(tag)
    db_session.commit()
    _post(db_session, "tagged", "Tagged Post", tags=[tag])
    _post(db_session, "plain", "Plain Post")
    _post(db_session, "hidden", "Draft Post", status="draft")

    index = client.get("/blog").text
    assert "Tagged Post" in index and "Plain Post" in index
    assert "Draft Post" not in index

    tagged = client.get("/blog/tag/dry-eyes").text
    assert "Tagged Post" in tagged and "Plain Post" not in tagged
    assert client.get("/blog/tag/missing").status_code == 404

    post = client.get("/blog/tagged")
    assert post.status_code == 200
    assert "December 13, 2025" in post.text
    assert client.get("/blog/hidden").status_code == 404


def test_blog_disabled_by_flag(client, monkeypatch):
    from storefront.utils.feature_flags import refresh_feature_flag_cache

    monkeypatch.setenv("FEATURE_BLOG_ENABLED", "false")
    refresh_feature_flag_cache()
    assert client.get("/blog").status_code == 404


def test_admin_shell_redirects(client):
    r = client.get("/admin", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/login"
    assert "Create the first admin" in client.get("/admin/login").text


def test_admin_dashboard_when_signed_in(admin_client):
    r = admin_client.get("/admin/login", follow_redirects=False)
    assert r.status_code == 303
    dashboard = admin_client.get("/admin")
    assert dashboard.status_code == 200
    assert "Dashboard" in dashboard.text
