"""Reset (or create) an admin account's password from the command line."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from contextlib import suppress

from dotenv import load_dotenv

load_dotenv()

from storefront.db import database  # noqa: E402
from storefront.db.repositories import admin as admin_repo  # noqa: E402

logger = logging.getLogger("storefront.scripts.reset_admin_password")

MIN_PASSWORD_LENGTH = 8

SessionLocal = lambda: database.SessionLocal()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reset an admin password")
    parser.add_argument("username")
    parser.add_argument("--password", help="New password (prompted when omitted)")
    parser.add_argument("--create", action="store_true", help="Create the admin if it does not exist")
    return parser.parse_args(argv)


def reset_password(session, username: str, password: str, create: bool = False) -> str:
    """Returns "updated" or "created"; raises LookupError for unknown users without ``create``."""
    user = admin_repo.get_admin_by_username(session, username)
    if user is None:
        if not create:
            raise LookupError(f"No admin named {username}")
        admin_repo.create_admin(session, username, password)
        return "created"
    admin_repo.set_admin_password(session, user, password)
    for admin_session in list(user.sessions):
        session.delete(admin_session)
    session.commit()
    return "updated"


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    password = args.password or getpass.getpass("New password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        return 1

    session = SessionLocal()
    try:
        outcome = reset_password(session, args.username, password, create=args.create)
    except LookupError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        with suppress(Exception):
            session.close()
    logger.info("admin_password_reset: username=%s outcome=%s", args.username, outcome)
    print(f"Admin {args.username}: password {outcome}.")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
