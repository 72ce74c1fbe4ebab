import pytest

from storefront.utils.feature_flags import (
    FeatureFlagKey,
    blog_enabled,
    get_feature_flags,
    is_feature_enabled,
    popups_enabled,
    refresh_feature_flag_cache,
)

_ENV_FLAG_MAPPING = {
    "FEATURE_POPUPS_ENABLED": "feature_popups_enabled",
    "FEATURE_BLOG_ENABLED": "feature_blog_enabled",
    "FEATURE_TRACKING_ENABLED": "feature_tracking_enabled",
}


@pytest.fixture(autouse=True)
def reset_flags(monkeypatch):
    """Clear env + cached values for each test to avoid cross-contamination."""
    for env_name in _ENV_FLAG_MAPPING:
        monkeypatch.delenv(env_name, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


def test_get_feature_flags_defaults_true():
    assert get_feature_flags() == {
        "feature_popups_enabled": True,
        "feature_blog_enabled": True,
        "feature_tracking_enabled": True,
    }


@pytest.mark.parametrize("env_name,flag_key", list(_ENV_FLAG_MAPPING.items()))
def test_individual_flag_disabled_via_env(monkeypatch, env_name: str, flag_key: FeatureFlagKey):
    monkeypatch.setenv(env_name, "false")
    refresh_feature_flag_cache()

    assert get_feature_flags()[flag_key] is False
    assert is_feature_enabled(flag_key) is False


@pytest.mark.parametrize("raw_value", ["maybe", "junk", "2", None])
def test_invalid_value_falls_back_to_default(monkeypatch, raw_value):
    if raw_value is None:
        monkeypatch.delenv("FEATURE_POPUPS_ENABLED", raising=False)
    else:
        monkeypatch.setenv("FEATURE_POPUPS_ENABLED", raw_value)
    refresh_feature_flag_cache()

    assert popups_enabled() is True


def test_values_are_cached_until_refresh(monkeypatch):
    assert blog_enabled() is True
    monkeypatch.setenv("FEATURE_BLOG_ENABLED", "off")
    assert blog_enabled() is True
    refresh_feature_flag_cache()
    assert blog_enabled() is False
