"""Media URL helpers used by templates, popups and the media library."""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".avi", ".m4v", ".ogv", ".ogg")
_CLOUDINARY_VIDEO_PATH = "/video/upload/"
_EXTENSION_RE = re.compile(r"\.[^./]+$")


def is_video_url(url: Optional[str]) -> bool:
    """True for known video extensions or a Cloudinary video upload path."""
    if not url:
        return False
    lower = url.lower()
    if any(ext in lower for ext in VIDEO_EXTENSIONS):
        return True
    return _CLOUDINARY_VIDEO_PATH in lower


def get_video_type(url: str) -> str:
    lower = url.lower()
    if ".mp4" in lower:
        return "video/mp4"
    if ".webm" in lower:
        return "video/webm"
    if ".mov" in lower:
        return "video/quicktime"
    if ".ogv" in lower:
        return "video/ogg"
    return "video/mp4"


def video_thumbnail_url(url: str) -> str:
    """Cloudinary serves a poster frame when the extension is swapped for .jpg."""
    return _EXTENSION_RE.sub(".jpg", url)


def format_editorial_date(value) -> str:
    """Render dates like "December 13, 2025"; empty for missing values."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""
    if isinstance(value, (datetime, date)):
        return f"{value.strftime('%B')} {value.day}, {value.year}"
    return ""


def format_reading_time(minutes: Optional[int]) -> str:
    return f"{minutes or 5} min read"
