import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from storefront.db import models
from storefront.db.database import SessionLocal, engine
from storefront.utils.cache import page_cache
from storefront.utils.feature_flags import refresh_feature_flag_cache
from storefront.utils.rate_limit import limiter

ADMIN_USERNAME = "archie"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session", autouse=True)
def create_schema_once():
    """Create all tables once per test session (SQLite in-memory resets per process)."""
    try:
        models.Base.metadata.create_all(bind=engine)
    except OperationalError as e:
        pytest.exit(f"Failed to create test schema: {e}")
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_data():
    """Truncate all tables between tests without dropping metadata (faster)."""
    connection = engine.connect()
    trans = connection.begin()
    for table in reversed(models.Base.metadata.sorted_tables):
        connection.execute(table.delete())
    trans.commit()
    connection.close()
    page_cache.clear()
    limiter.reset()
    yield


@pytest.fixture(autouse=True)
def _runtime_env(monkeypatch):
    """Admin auth and feature flags start from production defaults."""
    for name in ("DEV_MODE", "FEATURE_POPUPS_ENABLED", "FEATURE_BLOG_ENABLED", "FEATURE_TRACKING_ENABLED",
                 "CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:8000")
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    from storefront.api.main import app

    return TestClient(app)


@pytest.fixture
def admin_client(client):
    """Client holding a real admin session cookie."""
    r = client.post("/api/admin/auth/bootstrap", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 201, r.text
    r = client.post("/api/admin/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def settings_factory(db_session: Session):
    def _create(**values):
        values.setdefault("site_name", "Archie's Remedies")
        row = models.SiteSettings(**values)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        page_cache.clear()
        return row
    return _create


@pytest.fixture
def page_factory(db_session: Session):
    def _create(slug: str, title: str = None, widgets=None, **values):
        page = models.Page(slug=slug, title=title or slug.replace("-", " ").title(), widgets=widgets or [], **values)
        db_session.add(page)
        db_session.commit()
        db_session.refresh(page)
        return page
    return _create


@pytest.fixture
def product_factory(db_session: Session):
    def _create(slug: str = "eye-drops", name: str = "Preservative-Free Eye Drops", **values):
        product = models.Product(slug=slug, name=name, **values)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _create


@pytest.fixture
def popup_factory(db_session: Session):
    def _create(name: str = "Spring promo", status: str = "live", **values):
        popup = models.CustomPopup(name=name, status=status, **values)
        db_session.add(popup)
        db_session.commit()
        db_session.refresh(popup)
        return popup
    return _create


@pytest.fixture
def contact_factory(db_session: Session):
    def _create(email: str = None, phone: str = None, **values):
        values.setdefault("email_status", "active" if email else "none")
        values.setdefault("sms_status", "active" if phone else "none")
        contact = models.Contact(email=email, phone=phone, **values)
        db_session.add(contact)
        db_session.commit()
        db_session.refresh(contact)
        return contact
    return _create
