from datetime import date, datetime

import pytest

from storefront.utils import forms, media, text
from storefront.utils.urls import build_preview_link, get_app_base_url
from storefront.utils.user_agent import detect_browser, detect_device


def test_phone_and_email_validation_messages():
    assert forms.validate_phone("") is None
    assert forms.validate_phone("555-1234") == forms.INVALID_PHONE_MESSAGE
    assert forms.validate_phone("(555) 123-4567") is None
    assert forms.validate_email("jane@archies.co") is None
    assert forms.validate_email("jane@archies") == forms.INVALID_EMAIL_MESSAGE


def test_email_normalization():
    assert forms.normalize_email("  Jane@Archies.CO ") == "jane@archies.co"
    assert forms.normalize_email("   ") is None
    assert forms.is_simple_email("a@b.c")
    assert not forms.is_simple_email("a b@c.d")


def test_split_full_name():
    assert forms.split_full_name("Jane") == ("Jane", "")
    assert forms.split_full_name("Jane van Dyke") == ("Jane", "van Dyke")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://cdn.example.com/clip.MP4", True),
        ("https://res.cloudinary.com/demo/video/upload/v1/clip", True),
        ("https://cdn.example.com/photo.jpg", False),
        (None, False),
        ("", False),
    ],
)
def test_is_video_url(url, expected):
    assert media.is_video_url(url) is expected


def test_video_mime_types():
    assert media.get_video_type("a.webm") == "video/webm"
    assert media.get_video_type("a.mov") == "video/quicktime"
    assert media.get_video_type("a.unknown") == "video/mp4"
    assert media.video_thumbnail_url("https://cdn/v/clip.mp4") == "https://cdn/v/clip.jpg"


def test_editorial_date_and_reading_time():
    assert media.format_editorial_date(date(2025, 12, 13)) == "December 13, 2025"
    assert media.format_editorial_date(datetime(2025, 1, 2, 9, 30)) == "January 2, 2025"
    assert media.format_editorial_date("2025-03-04T00:00:00Z") == "March 4, 2025"
    assert media.format_editorial_date("garbage") == ""
    assert media.format_editorial_date(None) == ""
    assert media.format_reading_time(None) == "5 min read"
    assert media.format_reading_time(3) == "3 min read"


def test_text_helpers():
    assert text.slugify("  Dry Eye Relief! ") == "dry-eye-relief"
    assert text.calculate_reading_time("") == 1
    assert text.calculate_reading_time("<p>" + "word " * 401 + "</p>") == 3
    assert text.normalize_page_slug("/legal//terms/") == "legal/terms"
    assert text.looks_like_html("<b>x</b>")
    assert not text.looks_like_html("plain")


def test_user_agent_classification():
    iphone = "Mozilla/5.0 (iPhone) AppleWebKit Version/17.0 Mobile/15E148 Safari/604.1"
    assert detect_device(iphone) == "mobile"
    assert detect_browser(iphone) == "Safari"
    assert detect_device(None) == "desktop"
    assert detect_browser("Mozilla/5.0 Chrome/120 Safari/537.36") == "Chrome"
    assert detect_browser("curl/8.0") == "unknown"


def test_preview_link_uses_app_base_url(monkeypatch):
    monkeypatch.setenv("APP_BASE_URL", "https://archiesremedies.com/")
    assert get_app_base_url() == "https://archiesremedies.com"
    link = build_preview_link(token="abc123", path="/our-story")
    assert link == "https://archiesremedies.com/our-story?token=abc123"
