import pytest

from storefront.utils.cache import HOMEPAGE_DATA, page_cache


def test_page_crud_and_slug_conflict(admin_client):
    r = admin_client.post("/api/admin/pages", json={"title": "Our Story", "isDraft": True})
    assert r.status_code == 201
    page = r.json()
    assert page["slug"] == "our-story"
    assert page["isDraft"] is True

    assert admin_client.post("/api/admin/pages", json={"title": "Other", "slug": "our-story"}).status_code == 409

    r = admin_client.patch(f"/api/admin/pages/{page['id']}", json={"isDraft": False, "pageTitle": "Story"})
    assert r.status_code == 200
    assert r.json()["isDraft"] is False

    assert [p["slug"] for p in admin_client.get("/api/admin/pages").json()] == ["our-story"]
    assert admin_client.delete(f"/api/admin/pages/{page['id']}").status_code == 204
    assert admin_client.get(f"/api/admin/pages/{page['id']}").status_code == 404


@pytest.mark.parametrize("slug", ["/", "", "//"])
def test_page_update_rejects_unreachable_slug(admin_client, page_factory, slug):
    page = page_factory("about")
    r = admin_client.patch(f"/api/admin/pages/{page.id}", json={"slug": slug})
    assert r.status_code == 400
    assert r.json()["detail"] == "A valid slug is required"
    assert admin_client.get(f"/api/admin/pages/{page.id}").json()["slug"] == "about"

    r = admin_client.patch(f"/api/admin/pages/{page.id}", json={"slug": "/about-us/"})
    assert r.json()["slug"] == "about-us"


def test_page_widgets_replace_and_invalidate(admin_client, page_factory):
    page = page_factory("about", widgets=[{"id": "w1", "type": "text", "config": {"content": "<p>Old</p>"}}])
    assert "Old" in admin_client.get("/about").text

    widgets = [
        {"id": "w2", "type": "quote", "config": {"text": "Clean ingredients"}},
        {"id": "w3", "type": "not_a_widget", "isVisible": False},
    ]
    r = admin_client.put(f"/api/admin/pages/{page.id}/widgets", json={"widgets": widgets})
    assert r.status_code == 200
    returned = r.json()["widgets"]
    assert [w["type"] for w in returned] == ["quote", "not_a_widget"]
    assert returned[1]["isVisible"] is False

    assert admin_client.get(f"/api/admin/pages/{page.id}/widgets").json()["widgets"] == returned
    assert "Old" not in admin_client.get("/about").text


def test_product_crud_with_nested_rows(admin_client):
    r = admin_client.post("/api/admin/products", json={
        "name": "Eye Wipes",
        "price": 12.5,
        "variants": [
            {"name": "30 ct", "amazonUrl": "https://amazon.com/a", "isDefault": True},
            {"name": "60 ct", "amazonUrl": "https://amazon.com/b"},
        ],
        "benefits": [{"title": "Tea tree free"}],
    })
    assert r.status_code == 201
    product = r.json()
    assert product["slug"] == "eye-wipes"
    assert [v["name"] for v in product["variants"]] == ["30 ct", "60 ct"]

    assert admin_client.post("/api/admin/products", json={"name": "Eye Wipes"}).status_code == 409

    r = admin_client.put(f"/api/admin/products/{product['id']}", json={
        "variants": [{"name": "90 ct", "amazonUrl": "https://amazon.com/c"}],
    })
    assert [v["name"] for v in r.json()["variants"]] == ["90 ct"]
    assert r.json()["benefits"][0]["title"] == "Tea tree free"

    assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 204
    assert admin_client.get(f"/api/admin/products/{product['id']}").status_code == 404


def test_product_reorder(admin_client, product_factory):
    first = product_factory(slug="drops", name="Drops")
    second = product_factory(slug="wipes", name="Wipes")
    r = admin_client.post("/api/admin/products/reorder", json={"ids": [second.id, first.id]})
    assert r.json() == {"success": True}
    assert [p["slug"] for p in admin_client.get("/api/admin/products").json()] == ["wipes", "drops"]


def test_popup_admin_lifecycle(admin_client):
    r = admin_client.post("/api/admin/popups", json={"name": "Launch", "targetType": "all"})
    assert r.status_code == 201
    popup = r.json()
    assert popup["status"] == "draft"
    assert admin_client.get("/api/popup", params={"page": "/"}).json()["popup"] is None

    r = admin_client.patch(f"/api/admin/popups/{popup['id']}", json={"status": "live", "incrementViews": True})
    assert r.json()["status"] == "live"
    assert r.json()["viewCount"] == 1
    assert admin_client.get("/api/popup", params={"page": "/"}).json()["popup"]["id"] == popup["id"]

    assert admin_client.post("/api/admin/popups", json={"name": "  "}).status_code == 400
    assert admin_client.delete(f"/api/admin/popups/{popup['id']}").status_code == 204
    assert admin_client.delete(f"/api/admin/popups/{popup['id']}").status_code == 404


@pytest.mark.parametrize(
    "path,payload,field",
    [
        ("hero-slides", {"imageUrl": "https://img/1.jpg", "title": "Hello"}, "title"),
        ("testimonials", {"name": "Jane", "text": "Love it"}, "name"),
        ("faqs", {"question": "Is it safe?", "answer": "Yes", "category": "Safety"}, "question"),
        ("navigation", {"label": "Shop", "url": "/shop"}, "label"),
    ],
)
def test_content_resource_crud(admin_client, path, payload, field):
    first = admin_client.post(f"/api/admin/{path}", json=payload)
    assert first.status_code == 201, first.text
    second = admin_client.post(f"/api/admin/{path}", json=payload).json()

    r = admin_client.post(f"/api/admin/{path}/reorder", json={"ids": [second["id"], first.json()["id"]]})
    assert r.json() == {"success": True}
    assert [item["id"] for item in admin_client.get(f"/api/admin/{path}").json()] == [second["id"], first.json()["id"]]

    r = admin_client.put(f"/api/admin/{path}/{second['id']}", json={field: "Changed"})
    assert r.json()[field] == "Changed"
    assert admin_client.delete(f"/api/admin/{path}/{second['id']}").status_code == 204
    assert admin_client.get(f"/api/admin/{path}/{second['id']}").status_code == 404


def test_content_write_drops_cached_pages(admin_client):
    page_cache.get_or_set("home", lambda: "stale", tags=(HOMEPAGE_DATA,))
    admin_client.post("/api/admin/faqs", json={"question": "Q?", "answer": "A"})
    assert page_cache.get_or_set("home", lambda: "fresh", tags=(HOMEPAGE_DATA,)) == "fresh"


def test_blog_posts_and_tags(admin_client):
    tag = admin_client.post("/api/admin/blog/tags", json={"name": "Dry Eyes"}).json()
    assert tag["slug"] == "dry-eyes"
    assert admin_client.post("/api/admin/blog/tags", json={"name": "Dry eyes"}).status_code == 409

    r = admin_client.post("/api/admin/blog/posts", json={
        "title": "Why Preservative-Free?",
        "content": "word " * 450,
        "status": "published",
        "tagIds": [tag["id"]],
    })
    assert r.status_code == 201
    post = r.json()
    assert post["slug"] == "why-preservative-free"
    assert post["readingTime"] == 3
    assert post["publishedAt"] is not None
    assert [t["name"] for t in post["tags"]] == ["Dry Eyes"]

    assert admin_client.get("/api/admin/blog/posts", params={"status": "draft"}).json() == []
    r = admin_client.put("/api/admin/blog/settings", json={"blogName": "The Journal"})
    assert r.json()["blogName"] == "The Journal"
    assert admin_client.delete(f"/api/admin/blog/posts/{post['id']}").status_code == 204


def test_review_import_endpoint(admin_client, product_factory):
    product = product_factory()
    r = admin_client.post("/api/admin/reviews/import", json={"csvData": []})
    assert r.status_code == 400
    assert r.json()["detail"] == "productId or collectionName is required"

    r = admin_client.post("/api/admin/reviews/import", json={
        "productId": product.id,
        "csvData": [
            {"Name": "Jane", "Last Name": "Doe", "Rating": "5", "Review": "No sting", "Tags": "gentle"},
            {"Name": "", "Review": ""},
        ],
    })
    body = r.json()
    assert body["imported"] == 1
    assert body["errors"][0]["row"] == 2

    listing = admin_client.get("/api/admin/reviews", params={"productId": product.id}).json()
    assert listing["reviews"][0]["authorInitial"] == "Jane D."
    assert listing["keywords"][0]["keyword"] == "gentle"


def test_review_collections(admin_client):
    admin_client.post("/api/admin/reviews/import", json={
        "collectionName": "Eye Wipes", "csvData": [{"name": "Sam", "text": "Soft"}],
    })
    assert admin_client.get("/api/admin/reviews/collections").json() == {"collections": ["Eye Wipes"]}
