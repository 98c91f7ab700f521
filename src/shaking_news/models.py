"""数据类模块"""

import hashlib
import html
import json
import re
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")

HotValue = Union[str, int, float]


@dataclass(frozen=True)
class HotItem:
    """热榜条目"""

    title: str
    url: str
    hot: Optional[HotValue] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TrendingItem:
    """趋势条目"""

    title: str
    url: str
    hot: Optional[HotValue] = None
    icon: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DailyNewsItem:
    """每日 60 秒新闻，整体替换，不做合并"""

    news: tuple[str, ...]
    tip: str = ""
    date: str = ""
    lunar_date: str = ""
    image: str = ""
    cover: str = ""
    link: str = ""
    updated: str = ""
    day_of_week: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "DailyNewsItem":
        """从上游 data 字段创建"""
        news = data.get("news")
        if not isinstance(news, list):
            raise ValueError("daily news 缺少 news 列表")
        return cls(
            news=tuple(str(n) for n in news),
            tip=str(data.get("tip") or ""),
            date=str(data.get("date") or ""),
            lunar_date=str(data.get("lunar_date") or ""),
            image=str(data.get("image") or ""),
            cover=str(data.get("cover") or ""),
            link=str(data.get("link") or ""),
            updated=str(data.get("updated") or ""),
            day_of_week=str(data.get("day_of_week") or ""),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["news"] = list(self.news)
        return data


@dataclass(frozen=True)
class AiNewsItem:
    """AI 资讯条目"""

    title: str
    link: str
    description: str = ""
    pic: str = ""
    source: str = ""
    date: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Optional["AiNewsItem"]:
        title = str(data.get("title") or "").strip()
        link = str(data.get("link") or "").strip()
        if not title or not link:
            return None
        return cls(
            title=title,
            link=link,
            description=str(data.get("description") or ""),
            pic=str(data.get("pic") or ""),
            source=str(data.get("source") or ""),
            date=str(data.get("date") or ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RssItem:
    """RSS 订阅条目"""

    id: str
    title: str
    url: str
    source: str
    description: Optional[str] = None
    published: Optional[datetime] = None
    image_url: Optional[str] = None

    @classmethod
    def from_feed_entry(cls, entry: dict, source_url: str) -> Optional["RssItem"]:
        """从 feed entry 创建 RssItem"""
        title = (entry.get("title") or "").strip()
        link = (entry.get("link") or "").strip()

        if not title or not link:
            return None

        guid = entry.get("id") or hashlib.md5(f"{link}{title}".encode()).hexdigest()[:16]

        description = entry.get("summary") or entry.get("description") or ""
        image_url = _extract_image(entry, description)

        # 清理 HTML 标签
        if description:
            description = html.unescape(re.sub(r"<[^>]+>", "", description)).strip()[:500]

        published = None
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if parsed:
            try:
                published = datetime(*parsed[:6])
            except (TypeError, ValueError):
                published = None

        return cls(
            id=guid,
            title=title,
            url=link,
            source=source_url,
            description=description or None,
            published=published,
            image_url=image_url,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["published"] = self.published.isoformat() if self.published else None
        return data


def _extract_image(entry: dict, description: str) -> Optional[str]:
    """依次从 enclosure、media:content、描述中的 <img> 提取配图"""
    for enclosure in entry.get("enclosures") or []:
        if (enclosure.get("type") or "").startswith("image") and enclosure.get("href"):
            return enclosure["href"]

    for key in ("media_content", "media_thumbnail"):
        media = entry.get(key) or []
        if media and media[0].get("url"):
            return media[0]["url"]

    match = re.search(r'<img[^>]+src="([^"]+)"', description or "")
    if match:
        return match.group(1)
    return None


@dataclass(frozen=True)
class NewsItem:
    """默认新闻源 / 首页新闻条目"""

    id: str
    title: str
    source: str
    published_at: str
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_rss_item(cls, item: RssItem, source: Optional[str] = None) -> "NewsItem":
        """把 RSS 条目转换为首页新闻条目"""
        return cls(
            id=item.id,
            title=item.title,
            source=item.source or source or "",
            published_at=item.published.isoformat() if item.published else "",
            description=item.description,
            url=item.url,
            image_url=item.image_url,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """单次上游请求的结果"""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status: Optional[int] = None
    fetched_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def ok(cls, data: T) -> "FetchResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, status: Optional[int] = None) -> "FetchResult[T]":
        return cls(success=False, error=error, status=status)


def to_json(value) -> str:
    """把条目（或条目列表）序列化为 JSON 字符串"""
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        payload = [v.to_dict() for v in value]
    else:
        payload = value.to_dict()
    return json.dumps(payload, ensure_ascii=False, indent=2)
