"""Phone and email helpers shared by the lead-capture endpoints."""
from __future__ import annotations

import re
from typing import Optional

# Loose check used by the subscribe endpoints
SIMPLE_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Stricter check used by popup submissions (requires an alphabetic TLD)
STRICT_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[a-zA-Z]{2,}$")
_NON_DIGITS = re.compile(r"\D")

INVALID_PHONE_MESSAGE = "Whoops. Please enter a valid #"
INVALID_EMAIL_MESSAGE = "Whoops. Please enter a valid email."


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def is_simple_email(value: Optional[str]) -> bool:
    return bool(value) and bool(SIMPLE_EMAIL_RE.match(value))


def get_phone_digits(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def validate_phone(value: str) -> Optional[str]:
    """Return an error message, or None when valid or empty."""
    digits = get_phone_digits(value)
    if not digits:
        return None
    if len(digits) != 10:
        return INVALID_PHONE_MESSAGE
    return None


def validate_email(value: str) -> Optional[str]:
    if not value:
        return None
    if not STRICT_EMAIL_RE.match(value):
        return INVALID_EMAIL_MESSAGE
    return None


def split_full_name(name: str) -> tuple[str, str]:
    """Split "First Last Name" into ("First", "Last Name")."""
    parts = (name or "").strip().split(" ")
    first = parts[0] if parts else ""
    last = " ".join(parts[1:]).strip()
    return first, last
