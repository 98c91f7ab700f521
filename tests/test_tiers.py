import pytest

from shaking_news.tiers import (
    FEATURE_NAMES,
    GUEST_FEATURES,
    MEMBER_FEATURES,
    PRO_FEATURES,
    UserTier,
    get_features_for_tier,
    get_required_tier_for_feature,
    is_feature_enabled,
    parse_tier,
)


def test_features_for_each_tier():
    assert get_features_for_tier(UserTier.GUEST) is GUEST_FEATURES
    assert get_features_for_tier("member") is MEMBER_FEATURES
    assert get_features_for_tier("pro") is PRO_FEATURES


def test_unknown_tier_falls_back_to_guest():
    assert parse_tier("admin") is UserTier.GUEST
    assert parse_tier(None) is UserTier.GUEST
    assert get_features_for_tier("admin") is GUEST_FEATURES


def test_guest_has_nothing_and_pro_has_everything():
    assert not any(GUEST_FEATURES.to_dict().values())
    assert all(PRO_FEATURES.to_dict().values())


def test_tiers_are_monotonic():
    for name in FEATURE_NAMES:
        guest = getattr(GUEST_FEATURES, name)
        member = getattr(MEMBER_FEATURES, name)
        pro = getattr(PRO_FEATURES, name)
        assert guest <= member <= pro, name


def test_member_features():
    assert is_feature_enabled("member", "custom_rss_enabled")
    assert is_feature_enabled("member", "cloud_sync_enabled")
    assert not is_feature_enabled("member", "opml_import_export_enabled")
    assert not is_feature_enabled("member", "stats_full_enabled")


def test_required_tier_for_feature():
    assert get_required_tier_for_feature("rotation_mode_selectable") is UserTier.MEMBER
    assert get_required_tier_for_feature("opml_import_export_enabled") is UserTier.PRO
    assert get_required_tier_for_feature("health_reminders_enabled") is UserTier.PRO


def test_unknown_feature_raises():
    with pytest.raises(ValueError):
        is_feature_enabled("pro", "time_travel")
    with pytest.raises(ValueError):
        get_required_tier_for_feature("time_travel")
