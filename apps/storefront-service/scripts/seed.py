"""Seed a fresh database with the rows the site needs to render."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import suppress

from dotenv import load_dotenv

load_dotenv()

from storefront.db import database, models  # noqa: E402
from storefront.db.repositories import admin as admin_repo  # noqa: E402
from storefront.db.repositories import settings as settings_repo  # noqa: E402
from storefront.services.page_renderer import HOME_SLUG, default_home_widgets  # noqa: E402

logger = logging.getLogger("storefront.scripts.seed")

# Access SessionLocal dynamically so test fixtures that rebind the
# sessionmaker are respected.
SessionLocal = lambda: database.SessionLocal()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed default settings, the home page and an admin user")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create tables directly from the models (development only; use Alembic elsewhere)",
    )
    parser.add_argument("--admin-username", default=os.getenv("SEED_ADMIN_USERNAME"))
    parser.add_argument("--admin-password", default=os.getenv("SEED_ADMIN_PASSWORD"))
    return parser.parse_args(argv)


def seed(session, admin_username: str | None = None, admin_password: str | None = None) -> dict:
    """Idempotently insert default rows; returns what was created."""
    created = {"settings": False, "blog_settings": False, "home_page": False, "admin": False}

    if settings_repo.get_site_settings(session) is None:
        settings_repo.upsert_site_settings(session, {"site_name": "Archie's Remedies"})
        created["settings"] = True

    if session.query(models.BlogSettings).filter(models.BlogSettings.id == "default").first() is None:
        settings_repo.get_blog_settings(session)
        created["blog_settings"] = True

    if session.query(models.Page).filter(models.Page.slug == HOME_SLUG).first() is None:
        session.add(models.Page(slug=HOME_SLUG, title="Home", page_type="landing", widgets=default_home_widgets()))
        session.commit()
        created["home_page"] = True

    if admin_username and admin_password:
        if admin_repo.get_admin_by_username(session, admin_username) is None:
            admin_repo.create_admin(session, admin_username, admin_password)
            created["admin"] = True
    return created


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    if args.create_schema:
        models.Base.metadata.create_all(bind=database.engine)
        logger.info("seed_schema_created: url=%s", database.engine.url.render_as_string(hide_password=True))

    session = SessionLocal()
    try:
        created = seed(session, args.admin_username, args.admin_password)
    finally:
        with suppress(Exception):
            session.close()
    for name, was_created in created.items():
        print(f"{name}: {'created' if was_created else 'already present'}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
