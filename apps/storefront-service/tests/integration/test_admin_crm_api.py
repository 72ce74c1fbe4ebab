def test_subscriber_create_conflict_and_update(admin_client):
    r = admin_client.post("/api/admin/subscribers", json={"email": "Jane@Example.com", "firstName": "Jane"})
    assert r.status_code == 201
    contact = r.json()
    assert contact["email"] == "jane@example.com"
    assert contact["emailStatus"] == "active"

    assert admin_client.post("/api/admin/subscribers", json={"email": "jane@example.com"}).status_code == 409

    r = admin_client.put(f"/api/admin/subscribers/{contact['id']}", json={"phone": "555-123-4567"})
    assert r.status_code == 200
    assert r.json()["phone"] == "5551234567"
    assert admin_client.get("/api/admin/subscribers/missing").status_code == 404


def test_subscriber_listing_and_stats(admin_client, contact_factory):
    contact_factory(email="a@example.com")
    contact_factory(email="b@example.com", email_status="unsubscribed")
    contact_factory(phone="5551234567")

    body = admin_client.get("/api/admin/subscribers", params={"type": "email"}).json()
    assert body["total"] == 2
    assert body["page"] == 1

    body = admin_client.get("/api/admin/subscribers", params={"search": "a@ex"}).json()
    assert [c["email"] for c in body["contacts"]] == ["a@example.com"]

    stats = admin_client.get("/api/admin/subscribers/stats").json()
    assert stats == {"total": 3, "activeEmails": 1, "inactiveEmails": 0, "activeSms": 1, "inactiveSms": 0}


def test_subscriber_stats_count_only_inactive_status(admin_client, contact_factory):
    contact_factory(email="active@example.com")
    contact_factory(email="paused@example.com", email_status="inactive")
    contact_factory(email="bounced@example.com", email_status="bounced")
    contact_factory(email="quiet@example.com", email_status="none")
    contact_factory(phone="5550000001", sms_status="inactive")
    contact_factory(phone="5550000002", sms_status="unsubscribed")

    stats = admin_client.get("/api/admin/subscribers/stats").json()
    assert stats["total"] == 6
    assert stats["activeEmails"] == 1
    assert stats["inactiveEmails"] == 1
    assert stats["activeSms"] == 0
    assert stats["inactiveSms"] == 1


def test_subscriber_export_and_import(admin_client):
    csv_text = "Email,Phone Number,First Name\njane@example.com,,Jane\n,555-000-1111,Sam\n,,\n"
    r = admin_client.post(
        "/api/admin/subscribers/import",
        files={"file": ("subscribers.csv", csv_text.encode("utf-8-sig"), "text/csv")},
    )
    assert r.status_code == 200
    summary = r.json()
    assert summary["created"] == 2
    assert summary["skipped"] == 1

    r = admin_client.get("/api/admin/subscribers/export", params={"type": "email"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    assert "jane@example.com" in r.text
    assert "Sam" not in r.text


def test_import_rejects_non_utf8(admin_client):
    r = admin_client.post(
        "/api/admin/subscribers/import",
        files={"file": ("subscribers.csv", "Email\nj\xe9@example.com\n".encode("latin-1"), "text/csv")},
    )
    assert r.status_code == 400


def test_activity_timeline(admin_client):
    contact_id = admin_client.post("/api/subscribe", json={"email": "jane@example.com"}).json()["contactId"]
    timeline = admin_client.get(f"/api/admin/subscribers/{contact_id}/activity").json()
    assert [a["activityType"] for a in timeline] == ["email_subscribe"]


def test_inbox_flow(admin_client):
    admin_client.post("/api/contact", json={"firstName": "Jane", "email": "jane@example.com", "message": "Hi"})
    inbox = admin_client.get("/api/admin/inbox").json()
    assert inbox["unreadCount"] == 1
    submission = inbox["submissions"][0]
    assert submission["name"] == "Jane"

    r = admin_client.put(f"/api/admin/inbox/{submission['id']}", json={"isRead": True, "status": "resolved"})
    assert r.json()["isRead"] is True
    assert admin_client.get("/api/admin/inbox").json()["unreadCount"] == 0
    assert admin_client.delete(f"/api/admin/inbox/{submission['id']}").status_code == 204


def test_settings_round_trip(admin_client):
    r = admin_client.put("/api/admin/settings", json={"siteName": "Archie's", "siteInDraftMode": True})
    assert r.status_code == 200
    body = r.json()
    assert body["siteName"] == "Archie's"
    assert body["siteInDraftMode"] is True
    assert admin_client.get("/api/admin/settings").json()["siteName"] == "Archie's"


def test_preview_token(admin_client):
    r = admin_client.post("/api/admin/preview-token", json={"path": "/our-story"})
    body = r.json()
    assert len(body["token"]) == 64
    assert body["url"] == f"http://localhost:8000/our-story?token={body['token']}"
    assert r.cookies.get("preview_token") == body["token"]


def test_analytics_dashboard(admin_client):
    admin_client.post("/api/track", json={"type": "pageview", "path": "/"})
    admin_client.post("/api/track", json={"type": "pageview", "path": "/"})
    admin_client.post("/api/track", json={"type": "pageview", "path": "/faq"})

    body = admin_client.get("/api/admin/analytics", params={"days": 7}).json()
    assert body["days"] == 7
    assert body["pageViews"] == 3
    assert body["uniqueVisitors"] == 1
    assert body["topPages"][0]["path"] == "/"
    assert body["contactStats"]["total"] == 0


def test_widget_library_listing(admin_client, page_factory):
    page_factory("about", widgets=[{"id": "w1", "type": "faqs"}, {"id": "w2", "type": "faqs"}])
    body = admin_client.get("/api/admin/widgets").json()
    by_type = {w["type"]: w for w in body["widgets"]}
    assert by_type["faqs"]["usageCount"] == 2
    assert by_type["text"]["usageCount"] == 0
    assert "defaultConfig" in by_type["text"]
    assert body["categories"]


def test_media_signature_requires_cloudinary(admin_client):
    from storefront.services.media_storage import reset_media_storage_for_tests

    reset_media_storage_for_tests()
    r = admin_client.post("/api/admin/upload/signature", json={"folder": "products"})
    assert r.status_code == 500
    assert r.json()["detail"] == "Media storage is not configured"


def test_media_register_list_delete(admin_client):
    r = admin_client.post("/api/admin/upload/register", json={
        "secureUrl": "https://res.cloudinary.com/archies/image/upload/v1/hero.jpg",
        "publicId": "archies-remedies/products/hero",
        "resourceType": "image",
        "format": "jpg",
        "folder": "products",
    })
    assert r.status_code == 201, r.text
    media = r.json()
    assert media["mimeType"] == "image/jpeg"

    listing = admin_client.get("/api/admin/media", params={"folder": "products"}).json()
    assert listing["total"] == 1
    assert listing["folderCounts"] == {"products": 1}

    assert admin_client.delete(f"/api/admin/media/{media['id']}").status_code == 204
    assert admin_client.get("/api/admin/media").json()["total"] == 0


def test_media_server_side_upload(admin_client, monkeypatch):
    from storefront.services import media_storage

    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "archies")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key123")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "shh")
    captured = {}

    def fake_upload(file, **options):
        captured["body"] = file.read()
        captured.update(options)
        return {
            "public_id": "archies-remedies/products/hero",
            "secure_url": "https://res.cloudinary.com/archies/image/upload/v1/archies-remedies/products/hero.jpg",
            "resource_type": "image",
            "format": "jpg",
            "bytes": 11,
            "width": 800,
            "height": 600,
        }

    monkeypatch.setattr(media_storage.cloudinary.uploader, "upload", fake_upload)
    media_storage.reset_media_storage_for_tests()
    try:
        r = admin_client.post(
            "/api/admin/upload",
            files={"file": ("hero.jpg", b"jpeg-bytes!", "image/jpeg")},
            data={"folder": "products", "altText": "Hero shot"},
        )
    finally:
        media_storage.reset_media_storage_for_tests()

    assert r.status_code == 201, r.text
    media = r.json()["file"]
    assert media["filename"] == "hero.jpg"
    assert media["mimeType"] == "image/jpeg"
    assert media["altText"] == "Hero shot"
    assert media["folder"] == "products"
    assert media["cloudinaryPublicId"] == "archies-remedies/products/hero"
    assert captured["body"] == b"jpeg-bytes!"
    assert captured["folder"] == "archies-remedies/products"
    assert captured["resource_type"] == "image"


def test_media_upload_requires_cloudinary(admin_client):
    from storefront.services.media_storage import reset_media_storage_for_tests

    reset_media_storage_for_tests()
    r = admin_client.post("/api/admin/upload", files={"file": ("a.png", b"png", "image/png")})
    assert r.status_code == 500
