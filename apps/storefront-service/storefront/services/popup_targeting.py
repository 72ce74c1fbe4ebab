"""
Popup targeting and media selection.

Three concerns live here:

* choosing which custom popup (if any) applies to a page view,
* resolving the image/video a popup shows for a given state and device,
* the dismissal rules that decide whether a popup may open again.

Dismissal state is kept in the visitor's browser; the rules are pure
functions so the page script context and tests share one definition.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Mapping, Optional

from storefront.db import models, schemas
from storefront.utils.media import is_video_url

logger = logging.getLogger(__name__)

# Browser storage keys shared with the popup script
WELCOME_DISMISSED = "welcome_popup_dismissed"
WELCOME_DISMISSED_SESSION = "welcome_popup_dismissed_session"
WELCOME_SHOWN_AT = "welcome_popup_shown_at"
EXIT_DISMISSED = "exit_popup_dismissed"
POPUP_SUBMITTED = "popup_submitted"
CUSTOM_POPUP_PREFIX = "custom_popup_dismissed_"

STORAGE_KEYS = {
    "welcome_dismissed": WELCOME_DISMISSED,
    "welcome_dismissed_session": WELCOME_DISMISSED_SESSION,
    "welcome_shown_at": WELCOME_SHOWN_AT,
    "exit_dismissed": EXIT_DISMISSED,
    "popup_submitted": POPUP_SUBMITTED,
    "custom_popup_prefix": CUSTOM_POPUP_PREFIX,
}

MEDIA_FIELDS = (
    "image_url",
    "video_url",
    "form_desktop_image_url",
    "form_desktop_video_url",
    "form_mobile_image_url",
    "form_mobile_video_url",
    "success_desktop_image_url",
    "success_desktop_video_url",
    "success_mobile_image_url",
    "success_mobile_video_url",
)


def _get(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


# Selection
def popup_matches(popup: Any, page: Optional[str], product_id: Optional[str]) -> bool:
    target_type = _get(popup, "target_type") or "all"
    if target_type == "all":
        return True
    if target_type == "specific":
        if not page:
            return False
        for target in _get(popup, "target_pages") or []:
            if target and (page == target or page.startswith(target)):
                return True
        return False
    if target_type == "product":
        return bool(product_id) and product_id in (_get(popup, "target_product_ids") or [])
    return False


def select_popup(popups: Iterable[Any], page: Optional[str], product_id: Optional[str] = None):
    """First popup that targets this page view.

    ``popups`` must already be the live popups ordered by priority (highest
    first, newest first on ties).
    """
    for popup in popups:
        if popup_matches(popup, page, product_id):
            return popup
    return None


# Media
@dataclass
class EffectiveMedia:
    desktop_video_url: Optional[str]
    desktop_image_url: Optional[str]
    mobile_video_url: Optional[str]
    mobile_image_url: Optional[str]
    has_desktop_video: bool
    has_mobile_video: bool
    has_legacy_video: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def get_effective_popup_media(urls: Any, is_success_state: bool) -> EffectiveMedia:
    """Resolve media through the success -> form -> legacy fallback chain.

    ``urls`` may be a popup row, a dict, or anything exposing the media field
    names. Mobile additionally falls back to the desktop variants.
    """
    u = {name: _get(urls, name) for name in MEDIA_FIELDS}
    if is_success_state:
        desktop_video = _first(u["success_desktop_video_url"], u["form_desktop_video_url"], u["video_url"])
        desktop_image = _first(u["success_desktop_image_url"], u["form_desktop_image_url"], u["image_url"])
        mobile_video = _first(
            u["success_mobile_video_url"], u["success_desktop_video_url"],
            u["form_mobile_video_url"], u["form_desktop_video_url"], u["video_url"],
        )
        mobile_image = _first(
            u["success_mobile_image_url"], u["success_desktop_image_url"],
            u["form_mobile_image_url"], u["form_desktop_image_url"], u["image_url"],
        )
    else:
        desktop_video = _first(u["form_desktop_video_url"], u["video_url"])
        desktop_image = _first(u["form_desktop_image_url"], u["image_url"])
        mobile_video = _first(u["form_mobile_video_url"], u["form_desktop_video_url"], u["video_url"])
        mobile_image = _first(u["form_mobile_image_url"], u["form_desktop_image_url"], u["image_url"])
    return EffectiveMedia(
        desktop_video_url=desktop_video,
        desktop_image_url=desktop_image,
        mobile_video_url=mobile_video,
        mobile_image_url=mobile_image,
        has_desktop_video=is_video_url(desktop_video),
        has_mobile_video=is_video_url(mobile_video),
        has_legacy_video=is_video_url(u["video_url"]),
    )


def pick_media_for_device(effective: EffectiveMedia, device: str) -> Optional[str]:
    """URL to render on ``device``; a real video beats an image."""
    if device == "mobile":
        return effective.mobile_video_url if effective.has_mobile_video else effective.mobile_image_url
    return effective.desktop_video_url if effective.has_desktop_video else effective.desktop_image_url


# Site popup settings
_SHARED_FIELDS = (
    "title",
    "subtitle",
    "button_text",
    *MEDIA_FIELDS,
    "download_url",
    "download_name",
    "download_text",
    "success_title",
    "success_message",
    "testimonial_quote",
    "testimonial_author",
    "testimonial_avatar_url",
    "success_link1_text",
    "success_link1_url",
    "success_link2_text",
    "success_link2_url",
    "form_badge_url",
    "success_badge_url",
)

_TESTIMONIAL_DEFAULTS = {
    "testimonial_enabled": False,
    "testimonial_enabled_desktop": True,
    "testimonial_enabled_mobile": True,
    "testimonial_stars": 5,
}

WELCOME_DEFAULTS = {
    "enabled": False,
    "delay": 3000,
    "dismiss_days": 7,
    "session_only": True,
    "session_expiry_hours": 24,
    "cta_type": "email",
    **_TESTIMONIAL_DEFAULTS,
}

EXIT_DEFAULTS = {
    "enabled": False,
    "dismiss_days": 7,
    "delay_after_welcome": 30,
    "cta_type": "email",
    **_TESTIMONIAL_DEFAULTS,
}

# Welcome popup values inherited from the older single email popup
_LEGACY_WELCOME_FIELDS = {
    "enabled": "email_popup_enabled",
    "title": "email_popup_title",
    "subtitle": "email_popup_subtitle",
    "button_text": "email_popup_button_text",
    "image_url": "email_popup_image_url",
}


def _popup_config(
    settings: Any,
    prefix: str,
    defaults: Dict[str, Any],
    legacy: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    config: Dict[str, Any] = {name: None for name in _SHARED_FIELDS}
    config.update(defaults)
    if settings is None:
        return config
    for name in list(config):
        value = _get(settings, f"{prefix}_{name}")
        if value is None and legacy and name in legacy:
            value = _get(settings, legacy[name])
        if value is None:
            value = defaults.get(name)
        config[name] = value
    return config


def get_popup_settings(settings: Any) -> Dict[str, Dict[str, Any]]:
    """Welcome and exit popup configuration with defaults applied.

    Without a settings row both popups are disabled.
    """
    if settings is not None and isinstance(settings, Mapping) and not settings:
        settings = None
    return {
        "welcome": _popup_config(settings, "welcome_popup", WELCOME_DEFAULTS, _LEGACY_WELCOME_FIELDS),
        "exit": _popup_config(settings, "exit_popup", EXIT_DEFAULTS),
    }


# Dismissal rules
def _parse_instant(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return models.as_utc(value)
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as written by Date.now()
        return datetime.fromtimestamp(value / 1000, tz=models.now_utc().tzinfo)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return _parse_instant(int(text))
        try:
            return models.as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def was_dismissed_within(dismissed_at: Any, window: timedelta, now: Optional[datetime] = None) -> bool:
    instant = _parse_instant(dismissed_at)
    if instant is None:
        return False
    now = now or models.now_utc()
    return (now - instant) < window


def was_dismissed_within_days(dismissed_at: Any, days: float, now: Optional[datetime] = None) -> bool:
    """True when ``dismissed_at`` is less than ``days`` ago; absent or invalid is False."""
    return was_dismissed_within(dismissed_at, timedelta(days=days), now)


@dataclass
class VisitorPopupState:
    """What the browser remembers about a visitor's popups."""
    submitted: bool = False
    welcome_dismissed_at: Any = None
    welcome_shown_this_session: bool = False
    welcome_shown_at: Any = None
    exit_dismissed_at: Any = None
    custom_dismissed_at: Dict[str, Any] = field(default_factory=dict)
    active_popup: Optional[str] = None


def welcome_rule(config: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "enabled": bool(config.get("enabled")),
        "session_only": bool(config.get("session_only", True)),
        "session_expiry_hours": config.get("session_expiry_hours") or 24,
        "dismiss_days": config.get("dismiss_days") or 7,
    }


def exit_rule(config: Mapping[str, Any], *, welcome_enabled: bool = False) -> Dict[str, Any]:
    delay = config.get("delay_after_welcome")
    return {
        "enabled": bool(config.get("enabled")),
        "dismiss_days": config.get("dismiss_days") or 7,
        # The exit popup waits until the welcome popup has had its turn
        "wait_for_welcome": bool(welcome_enabled),
        "delay_after_welcome": 30 if delay is None else delay,
    }


def custom_rule(popup: Any) -> Dict[str, Any]:
    return {"id": _get(popup, "id"), "dismiss_days": _get(popup, "dismiss_days") or 7}


def popup_rules(
    popup_settings: Dict[str, Dict[str, Any]],
    custom_popup: Any = None,
) -> Dict[str, Any]:
    """Resolved dismissal rules, rendered for the popup script."""
    return {
        "welcome": welcome_rule(popup_settings["welcome"]),
        "exit": exit_rule(popup_settings["exit"], welcome_enabled=bool(popup_settings["welcome"].get("enabled"))),
        "custom": custom_rule(custom_popup) if custom_popup is not None else None,
    }


def can_show_welcome(config: Mapping[str, Any], state: VisitorPopupState, now: Optional[datetime] = None) -> bool:
    rule = welcome_rule(config)
    if not rule["enabled"] or state.submitted or state.active_popup:
        return False
    if rule["session_only"]:
        if state.welcome_shown_this_session:
            return False
        return not was_dismissed_within(
            state.welcome_dismissed_at, timedelta(hours=rule["session_expiry_hours"]), now,
        )
    return not was_dismissed_within_days(state.welcome_dismissed_at, rule["dismiss_days"], now)


def can_show_exit(
    config: Mapping[str, Any],
    state: VisitorPopupState,
    *,
    welcome_enabled: bool = False,
    now: Optional[datetime] = None,
) -> bool:
    rule = exit_rule(config, welcome_enabled=welcome_enabled)
    if not rule["enabled"] or state.submitted or state.active_popup:
        return False
    if was_dismissed_within_days(state.exit_dismissed_at, rule["dismiss_days"], now):
        return False
    if rule["wait_for_welcome"]:
        shown_at = _parse_instant(state.welcome_shown_at)
        if shown_at is None:
            return False
        now = now or models.now_utc()
        if (now - shown_at) < timedelta(seconds=rule["delay_after_welcome"]):
            return False
    return True


def can_show_custom(popup: Any, state: VisitorPopupState, now: Optional[datetime] = None) -> bool:
    rule = custom_rule(popup)
    if state.active_popup and state.active_popup != rule["id"]:
        return False
    dismissed_at = state.custom_dismissed_at.get(rule["id"])
    return not was_dismissed_within_days(dismissed_at, rule["dismiss_days"], now)




def should_show_popup(
    kind: str,
    state: VisitorPopupState,
    *,
    popup_settings: Optional[Dict[str, Dict[str, Any]]] = None,
    popup: Any = None,
    now: Optional[datetime] = None,
) -> bool:
    """Single entry point over the welcome/exit/custom rules."""
    if kind == "custom":
        return popup is not None and can_show_custom(popup, state, now)
    popup_settings = popup_settings or get_popup_settings(None)
    if kind == "welcome":
        return can_show_welcome(popup_settings["welcome"], state, now)
    if kind == "exit":
        return can_show_exit(
            popup_settings["exit"],
            state,
            welcome_enabled=bool(popup_settings["welcome"].get("enabled")),
            now=now,
        )
    raise ValueError(f"Unknown popup kind: {kind}")


def popup_to_payload(popup: models.CustomPopup) -> Dict[str, Any]:
    """Public JSON for a custom popup, with list fields always decoded."""
    payload = schemas.CustomPopup.model_validate(popup).model_dump(by_alias=True, mode="json")
    payload["targetPages"] = list(popup.target_pages or [])
    payload["targetProductIds"] = list(popup.target_product_ids or [])
    return payload


def render_context(
    popup_settings: Dict[str, Dict[str, Any]],
    custom_popup: Optional[models.CustomPopup],
) -> Dict[str, Any]:
    """Template context for ``partials/popups.html``."""
    context: Dict[str, Any] = {
        "settings": popup_settings,
        "custom": popup_to_payload(custom_popup) if custom_popup is not None else None,
        "storage_keys": STORAGE_KEYS,
        "rules": popup_rules(popup_settings, custom_popup),
    }
    for name in ("welcome", "exit"):
        context[f"{name}_media"] = {
            "form": get_effective_popup_media(popup_settings[name], False).to_dict(),
            "success": get_effective_popup_media(popup_settings[name], True).to_dict(),
        }
    if custom_popup is not None:
        context["custom_media"] = {
            "form": get_effective_popup_media(custom_popup, False).to_dict(),
            "success": get_effective_popup_media(custom_popup, True).to_dict(),
        }
    return context
