"""用户设置：默认值、取值范围、校验与按层级更新"""

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Union

from .errors import SettingsError, TierError
from .tiers import UserTier, get_features_for_tier, get_required_tier_for_feature

logger = logging.getLogger(__name__)

FONT_SIZE_OPTIONS = ("small", "medium", "large", "xlarge")
LAYOUT_MODE_OPTIONS = ("normal", "compact")
ROTATION_MODE_OPTIONS = ("fixed", "continuous")
THEME_OPTIONS = ("light", "dark", "system")
LANGUAGE_OPTIONS = ("zh", "en")

SETTINGS_LIMITS: dict[str, tuple[int, int]] = {
    "rotation_interval": (5, 60),  # 秒
    "tilt_angle": (8, 25),  # 度
    "daily_goal": (10, 100),
}

_OPTIONS: dict[str, tuple[str, ...]] = {
    "rotation_mode": ROTATION_MODE_OPTIONS,
    "font_size": FONT_SIZE_OPTIONS,
    "layout_mode": LAYOUT_MODE_OPTIONS,
    "theme": THEME_OPTIONS,
    "language": LANGUAGE_OPTIONS,
}

_BOOL_KEYS = ("animation_enabled", "ads_enabled", "health_reminders_enabled")

# 修改某项设置所需的功能开关，未列出的设置任何已登录层级都可修改
SETTING_FEATURES: dict[str, str] = {
    "rotation_mode": "rotation_mode_selectable",
    "rotation_interval": "rotation_interval_adjustable",
    "tilt_angle": "rotation_angle_adjustable",
    "font_size": "font_size_adjustable",
    "layout_mode": "layout_mode_selectable",
    "ads_enabled": "ads_disableable",
    "daily_goal": "exercise_goals_enabled",
    "health_reminders_enabled": "health_reminders_enabled",
    "news_sources": "custom_rss_enabled",
    "active_source": "custom_rss_enabled",
}

# 保存设置本身需要云同步
SAVE_FEATURE = "cloud_sync_enabled"


@dataclass(frozen=True)
class UserSettings:
    """用户设置，访客使用默认值且不可修改"""

    rotation_mode: str = "continuous"
    rotation_interval: int = 30
    tilt_angle: int = 15
    font_size: str = "medium"
    layout_mode: str = "normal"
    theme: str = "system"
    language: str = "zh"
    animation_enabled: bool = True
    ads_enabled: bool = True
    daily_goal: int = 30
    health_reminders_enabled: bool = False
    news_sources: tuple[str, ...] = field(default_factory=lambda: ("everydaynews",))
    active_source: str = "everydaynews"

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        """从存储的数据恢复设置

        未知字段忽略；类型或取值无效的字段回退为默认值；数值超出范围时截断。
        """
        defaults = cls()
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name in SETTINGS_LIMITS and _is_number(value):
                value = clamp_setting_value(f.name, value)
            if f.name == "news_sources" and isinstance(value, list):
                value = tuple(value)
            if _validate_field(f.name, value):
                logger.warning(f"设置项 {f.name} 无效，使用默认值 {getattr(defaults, f.name)!r}")
                continue
            values[f.name] = value
        return replace(defaults, **values)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["news_sources"] = list(self.news_sources)
        return data


DEFAULT_SETTINGS = UserSettings()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_setting_value(key: str, value: Union[int, float]) -> bool:
    """验证数值型设置是否在有效范围内"""
    low, high = SETTINGS_LIMITS[key]
    return low <= value <= high


def clamp_setting_value(key: str, value: Union[int, float]) -> int:
    """将设置值限制在有效范围内"""
    low, high = SETTINGS_LIMITS[key]
    return int(max(low, min(high, value)))


def _validate_field(key: str, value: Any) -> list[str]:
    if key in _OPTIONS:
        if value not in _OPTIONS[key]:
            return [f"{key} 必须是 {'/'.join(_OPTIONS[key])} 之一，实际为 {value!r}"]
        return []
    if key in SETTINGS_LIMITS:
        if not _is_number(value):
            return [f"{key} 必须是数字"]
        if not validate_setting_value(key, value):
            low, high = SETTINGS_LIMITS[key]
            return [f"{key} 必须在 {low}-{high} 之间，实际为 {value}"]
        return []
    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            return [f"{key} 必须是布尔值"]
        return []
    if key == "news_sources":
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(s, str) and s for s in value
        ):
            return ["news_sources 必须是非空字符串列表"]
        return []
    if key == "active_source":
        if not isinstance(value, str) or not value:
            return ["active_source 必须是非空字符串"]
        return []
    return [f"未知设置项: {key}"]


def validate_settings(data: dict) -> list[str]:
    """验证设置字典，返回错误列表"""
    errors = []
    for key, value in data.items():
        errors.extend(_validate_field(key, value))
    return errors


def apply_settings_update(
    current: UserSettings, update: dict, tier: Union[UserTier, str, None]
) -> UserSettings:
    """按用户层级应用设置更新，返回新的设置对象

    值无效时抛出 SettingsError；层级不足时抛出 TierError。
    """
    features = get_features_for_tier(tier)
    if not getattr(features, SAVE_FEATURE):
        raise TierError(SAVE_FEATURE, get_required_tier_for_feature(SAVE_FEATURE).value)

    errors = validate_settings(update)
    if errors:
        raise SettingsError(errors)

    for key in update:
        feature = SETTING_FEATURES.get(key)
        if feature and not getattr(features, feature):
            raise TierError(feature, get_required_tier_for_feature(feature).value)

    values = dict(update)
    if "news_sources" in values:
        values["news_sources"] = tuple(values["news_sources"])

    new_settings = replace(current, **values)
    if new_settings.active_source not in new_settings.news_sources:
        raise SettingsError([f"active_source {new_settings.active_source!r} 不在 news_sources 中"])
    return new_settings
