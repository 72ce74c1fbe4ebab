"""
Per-domain repository modules for database access.

Each module exposes plain functions taking a `Session` first; API routers and
services import the module they need (`from storefront.db.repositories import pages`).
"""
