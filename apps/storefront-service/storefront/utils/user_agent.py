"""Minimal user-agent classification for analytics rows."""
from typing import Optional


def detect_device(user_agent: Optional[str]) -> str:
    ua = user_agent or ""
    if "Mobile" in ua:
        return "mobile"
    if "Tablet" in ua:
        return "tablet"
    return "desktop"


def detect_browser(user_agent: Optional[str]) -> str:
    # Check order matters: Edge and Chrome UAs both contain "Safari"
    ua = user_agent or ""
    if "Chrome" in ua:
        return "Chrome"
    if "Firefox" in ua:
        return "Firefox"
    if "Safari" in ua:
        return "Safari"
    if "Edge" in ua:
        return "Edge"
    return "unknown"
