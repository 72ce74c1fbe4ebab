ADMIN_USERNAME = "archie"
ADMIN_PASSWORD = "correct-horse-battery"


def test_admin_api_requires_session_cookie(client):
    r = client.get("/api/admin/pages")
    assert r.status_code == 401
    assert r.json()["detail"] == "Authentication required"


def test_malformed_cookie_is_rejected_before_lookup(client):
    client.cookies.set("admin_session", "not-a-token")
    assert client.get("/api/admin/products").status_code == 401


def test_unknown_session_is_expired(client):
    client.cookies.set("admin_session", "a" * 64)
    r = client.get("/api/admin/auth/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Session expired"


def test_bootstrap_only_once(client):
    r = client.post("/api/admin/auth/bootstrap", json={"username": "archie", "password": "short"})
    assert r.status_code == 400

    r = client.post("/api/admin/auth/bootstrap", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 201
    assert r.json()["username"] == ADMIN_USERNAME

    r = client.post("/api/admin/auth/bootstrap", json={"username": "second", "password": ADMIN_PASSWORD})
    assert r.status_code == 409


def test_login_me_logout(client):
    client.post("/api/admin/auth/bootstrap", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    r = client.post("/api/admin/auth/login", json={"username": ADMIN_USERNAME, "password": "wrong-password"})
    assert r.status_code == 401

    r = client.post("/api/admin/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    assert r.json()["success"] is True
    token = client.cookies.get("admin_session")
    assert token and len(token) == 64

    me = client.get("/api/admin/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == ADMIN_USERNAME

    assert client.post("/api/admin/auth/logout").json() == {"success": True}
    client.cookies.set("admin_session", token)
    assert client.get("/api/admin/auth/me").status_code == 401


def test_login_requires_both_fields(client):
    r = client.post("/api/admin/auth/login", json={"username": "  ", "password": ""})
    assert r.status_code == 400


def test_dev_mode_skips_auth(client, monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    r = client.get("/api/admin/pages")
    assert r.status_code == 200
    assert r.json() == []


class CountingHasher:
    def __init__(self, inner):
        self.inner = inner
        self.verifications = 0

    def hash(self, password):
        return self.inner.hash(password)

    def verify(self, encoded_hash, password):
        self.verifications += 1
        return self.inner.verify(encoded_hash, password)

    def check_needs_rehash(self, encoded_hash):
        return self.inner.check_needs_rehash(encoded_hash)


def test_unknown_username_pays_the_same_hash_cost(client, monkeypatch):
    from storefront.utils import security

    client.post("/api/admin/auth/bootstrap", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    hasher = CountingHasher(security._hasher)
    monkeypatch.setattr(security, "_hasher", hasher)

    r = client.post("/api/admin/auth/login", json={"username": "nobody", "password": "wrong-password"})
    assert r.status_code == 401
    assert hasher.verifications == 1

    r = client.post("/api/admin/auth/login", json={"username": ADMIN_USERNAME, "password": "wrong-password"})
    assert r.status_code == 401
    assert hasher.verifications == 2
    assert r.json()["detail"] == "Invalid credentials"
