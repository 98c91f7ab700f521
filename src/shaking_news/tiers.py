"""用户层级与功能开关

三层用户模式：访客（guest）、会员（member）、专业版（pro）。
"""

from dataclasses import dataclass, fields, asdict
from enum import Enum
from typing import Union


class UserTier(Enum):
    """用户层级"""

    GUEST = "guest"
    MEMBER = "member"
    PRO = "pro"


@dataclass(frozen=True)
class FeatureConfig:
    """功能开关配置"""

    # 旋转设置
    rotation_mode_selectable: bool
    rotation_interval_adjustable: bool
    rotation_angle_adjustable: bool

    # 显示设置
    font_size_adjustable: bool
    layout_mode_selectable: bool

    # 新闻源
    custom_rss_enabled: bool
    opml_import_export_enabled: bool

    # 广告
    ads_disableable: bool

    # 统计
    stats_preview_enabled: bool  # 模糊预览
    stats_full_enabled: bool
    health_reminders_enabled: bool
    exercise_goals_enabled: bool

    # 其他
    keyboard_shortcuts_enabled: bool
    cloud_sync_enabled: bool

    def to_dict(self) -> dict:
        return asdict(self)


FEATURE_NAMES: tuple[str, ...] = tuple(f.name for f in fields(FeatureConfig))

# 访客：即开即用，无需登录，功能受限
GUEST_FEATURES = FeatureConfig(**{name: False for name in FEATURE_NAMES})

# 会员：免费登录，解锁自定义功能
MEMBER_FEATURES = FeatureConfig(
    rotation_mode_selectable=True,
    rotation_interval_adjustable=True,
    rotation_angle_adjustable=True,
    font_size_adjustable=True,
    layout_mode_selectable=True,
    custom_rss_enabled=True,
    opml_import_export_enabled=False,
    ads_disableable=False,
    stats_preview_enabled=True,
    stats_full_enabled=False,
    health_reminders_enabled=False,
    exercise_goals_enabled=False,
    keyboard_shortcuts_enabled=False,
    cloud_sync_enabled=True,
)

# Pro：付费订阅，解锁全部高级功能
PRO_FEATURES = FeatureConfig(**{name: True for name in FEATURE_NAMES})

_TIER_FEATURES = {
    UserTier.GUEST: GUEST_FEATURES,
    UserTier.MEMBER: MEMBER_FEATURES,
    UserTier.PRO: PRO_FEATURES,
}

# 从低到高
TIER_ORDER = (UserTier.GUEST, UserTier.MEMBER, UserTier.PRO)


def parse_tier(tier: Union[UserTier, str, None]) -> UserTier:
    """解析层级，无法识别时按访客处理"""
    if isinstance(tier, UserTier):
        return tier
    try:
        return UserTier(tier)
    except ValueError:
        return UserTier.GUEST


def get_features_for_tier(tier: Union[UserTier, str, None]) -> FeatureConfig:
    """根据用户层级获取功能配置"""
    return _TIER_FEATURES[parse_tier(tier)]


def _check_feature(feature: str) -> None:
    if feature not in FEATURE_NAMES:
        raise ValueError(f"未知功能: {feature}")


def is_feature_enabled(tier: Union[UserTier, str, None], feature: str) -> bool:
    """检查特定功能是否对指定层级可用"""
    _check_feature(feature)
    return getattr(get_features_for_tier(tier), feature)


def get_required_tier_for_feature(feature: str) -> UserTier:
    """获取功能所需的最低层级"""
    _check_feature(feature)
    for tier in TIER_ORDER:
        if getattr(_TIER_FEATURES[tier], feature):
            return tier
    return UserTier.PRO
