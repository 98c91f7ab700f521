"""上游响应归一化模块

上游聚合 API 各个接口的信封结构和字段名并不统一：
有的把列表直接放在 ``data``，有的嵌套在 ``data.items``；
链接可能叫 ``url`` 或 ``link``，热度可能叫 ``hot``、``hot_value``、``heat`` 或 ``score``。
这里用一张字段偏好表（FieldProfile）描述每一类接口，由同一个归一化函数处理。
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Type, Union

from .errors import PayloadError
from .models import HotItem, TrendingItem

logger = logging.getLogger(__name__)

Item = Union[HotItem, TrendingItem]


@dataclass(frozen=True)
class FieldProfile:
    """一类接口的信封与字段偏好配置"""

    name: str
    item_type: Type[Item]
    title_keys: Sequence[str] = ("title",)
    url_keys: Sequence[str] = ("url", "link")
    hot_keys: Sequence[str] = ("hot",)
    url_default: Optional[str] = None
    required_code: Optional[int] = None
    nested_key: Optional[str] = None


HOT_LIST = FieldProfile(
    name="hot-list",
    item_type=HotItem,
    hot_keys=("hot", "hot_value"),
    nested_key="items",
)

# 历史上的今天：列表嵌套在 data.items，"热度" 实际是年份
TODAY_IN_HISTORY = FieldProfile(
    name="today-in-history",
    item_type=HotItem,
    hot_keys=("year",),
    nested_key="items",
)

TRENDING = FieldProfile(
    name="trending",
    item_type=TrendingItem,
    title_keys=("title", "keyword"),
    hot_keys=("hot", "heat", "score"),
    url_default="#",
    required_code=200,
)

PROFILE_OVERRIDES: dict[str, FieldProfile] = {
    "today-in-history": TODAY_IN_HISTORY,
}


def profile_for_hot_list(source_id: str) -> FieldProfile:
    """获取热榜源对应的字段配置"""
    return PROFILE_OVERRIDES.get(source_id, HOT_LIST)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def pick(raw: dict, keys: Sequence[str]) -> Any:
    """按偏好顺序取第一个非空字段，0 视为有效值"""
    for key in keys:
        value = raw.get(key)
        if not _is_blank(value):
            return value
    return None


def unwrap_envelope(payload: Any, profile: FieldProfile) -> list:
    """从信封中取出原始条目列表"""
    if not isinstance(payload, dict):
        raise PayloadError(f"{profile.name}: 响应不是 JSON 对象")

    if profile.required_code is not None:
        code = payload.get("code")
        if code != profile.required_code:
            raise PayloadError(
                f"{profile.name}: code={code} message={payload.get('message')}"
            )

    data = payload.get("data")
    if isinstance(data, list):
        return data
    if profile.nested_key and isinstance(data, dict):
        nested = data.get(profile.nested_key)
        if isinstance(nested, list):
            return nested
    raise PayloadError(f"{profile.name}: data 字段结构无法识别")


def normalize_item(raw: Any, profile: FieldProfile) -> Optional[Item]:
    """归一化单个条目，缺少标题或链接时返回 None"""
    if not isinstance(raw, dict):
        return None

    title = pick(raw, profile.title_keys)
    url = pick(raw, profile.url_keys)
    if url is None:
        url = profile.url_default

    if _is_blank(title) or _is_blank(url):
        return None

    hot = pick(raw, profile.hot_keys)
    return profile.item_type(
        title=str(title).strip(),
        url=str(url).strip(),
        hot=hot,
    )


def normalize_items(payload: Any, profile: FieldProfile) -> list[Item]:
    """把上游响应归一化为统一条目列表

    信封无法识别时抛出 PayloadError；单个条目不合法时直接丢弃。
    """
    raw_items = unwrap_envelope(payload, profile)

    items = []
    dropped = 0
    for raw in raw_items:
        item = normalize_item(raw, profile)
        if item is None:
            dropped += 1
            continue
        items.append(item)

    if dropped:
        logger.debug(f"{profile.name}: 丢弃 {dropped} 条缺少标题或链接的条目")
    return items
