from __future__ import annotations

import runpy
from pathlib import Path

import pytest

from storefront.db import models
from storefront.db.repositories import admin as admin_repo
from storefront.utils.security import verify_password

SCRIPTS_DIR = Path(__file__).resolve().parents[2] / "scripts"
SEED_GLOBALS = runpy.run_path(SCRIPTS_DIR / "seed.py")
RESET_GLOBALS = runpy.run_path(SCRIPTS_DIR / "reset_admin_password.py")
SEED = SEED_GLOBALS["seed"]
RESET = RESET_GLOBALS["reset_password"]
RESET_MAIN = RESET_GLOBALS["main"]


def test_seed_is_idempotent(db_session):
    first = SEED(db_session, "archie", "correct-horse-battery")
    assert first == {"settings": True, "blog_settings": True, "home_page": True, "admin": True}

    home = db_session.query(models.Page).filter(models.Page.slug == "home").one()
    assert home.widgets and all("type" in w for w in home.widgets)

    second = SEED(db_session, "archie", "correct-horse-battery")
    assert not any(second.values())
    assert admin_repo.count_admins(db_session) == 1


def test_seed_without_credentials_skips_admin(db_session):
    created = SEED(db_session)
    assert created["admin"] is False
    assert admin_repo.count_admins(db_session) == 0


def test_reset_password_updates_hash_and_revokes_sessions(db_session):
    user = admin_repo.create_admin(db_session, "archie", "old-password-1")
    admin_repo.create_session(db_session, user, days=7)

    assert RESET(db_session, "archie", "new-password-2") == "updated"

    db_session.refresh(user)
    assert verify_password("new-password-2", user.password_hash)
    assert db_session.query(models.AdminSession).count() == 0


def test_reset_password_unknown_user(db_session):
    with pytest.raises(LookupError):
        RESET(db_session, "nobody", "whatever-123")
    assert RESET(db_session, "nobody", "whatever-123", create=True) == "created"


def test_main_rejects_short_password(capsys):
    assert RESET_MAIN(["archie", "--password", "short"]) == 1
    assert "at least 8" in capsys.readouterr().err
