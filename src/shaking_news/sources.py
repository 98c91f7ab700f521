"""热榜 / 趋势数据源定义"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Source:
    """数据源定义"""

    id: str
    name: str
    icon: str


# 热榜源
HOT_LIST_SOURCES: list[Source] = [
    Source(id="douyin", name="抖音热搜", icon="🎵"),
    Source(id="weibo", name="微博热搜", icon="🔴"),
    Source(id="bilibili", name="B站热搜", icon="📺"),
    Source(id="zhihu", name="知乎热榜", icon="❓"),
    Source(id="baidu", name="百度热搜", icon="🔍"),
    Source(id="toutiao", name="头条热榜", icon="📰"),
    Source(id="today-in-history", name="历史上的今天", icon="📅"),
    # 掘金、网易上游路径尚未确认，暂不展示
    # Source(id="juejin", name="掘金热榜", icon="💎"),
    # Source(id="netease", name="网易新闻", icon="📰"),
]

# 趋势卡片可选的源
TRENDING_SOURCES: list[Source] = [
    s for s in HOT_LIST_SOURCES if s.id != "today-in-history"
]

# 内部 id 与上游路径不一致时的映射，未列出的 id 原样使用
API_PATH_MAP: dict[str, str] = {
    "baidu": "baidu/hot",
    "bilibili": "bili",
    "juejin": "juejin",
    "netease": "netease",
}

_SOURCES_BY_ID: dict[str, Source] = {s.id: s for s in HOT_LIST_SOURCES}


def get_source(source_id: str) -> Optional[Source]:
    """按 id 获取数据源，未知 id 返回 None"""
    return _SOURCES_BY_ID.get(source_id)


def resolve_api_path(source_id: str) -> str:
    """获取上游 API 路径"""
    return API_PATH_MAP.get(source_id, source_id)


def list_sources(trending: bool = False) -> list[Source]:
    """列出热榜源，trending 为 True 时列出趋势卡片可选的源"""
    return list(TRENDING_SOURCES if trending else HOT_LIST_SOURCES)


def is_known_source(source_id: str) -> bool:
    return source_id in _SOURCES_BY_ID


def is_trending_source(source_id: str) -> bool:
    return any(s.id == source_id for s in TRENDING_SOURCES)
