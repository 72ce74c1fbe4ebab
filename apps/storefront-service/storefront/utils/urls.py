"""
URL utilities for building absolute links (preview links, canonical URLs).

Primary source: APP_BASE_URL (e.g., https://archiesremedies.com)
Fallback: APP_HOST (adds scheme heuristically if missing).
"""
from __future__ import annotations

import os
from urllib.parse import urlencode


def _add_scheme_if_missing(host: str) -> str:
    h = host.strip()
    if not h:
        return "http://localhost:8000"
    if h.startswith("http://") or h.startswith("https://"):
        return h
    lower = h.lower()
    if lower.startswith("localhost") or lower.startswith("127.0.0.1"):
        return f"http://{h}"
    return f"https://{h}"


def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


def get_app_base_url() -> str:
    """Return normalized base URL for the public site.

    Precedence:
    1. APP_BASE_URL (recommended)
    2. APP_HOST (legacy), scheme added if missing
    Defaults to http://localhost:8000 if neither is set.
    """
    base = os.getenv("APP_BASE_URL")
    if base and base.strip():
        return _strip_trailing_slash(base.strip())
    host = os.getenv("APP_HOST")
    if host and host.strip():
        return _strip_trailing_slash(_add_scheme_if_missing(host.strip()))
    return "http://localhost:8000"


def build_absolute_url(path: str) -> str:
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{get_app_base_url()}{path}"


def build_preview_link(*, token: str, path: str = "/") -> str:
    """Shareable link that grants a draft-mode preview session."""
    qs = urlencode({"token": token})
    return f"{build_absolute_url(path)}?{qs}"
