"""新闻获取模块"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import aiohttp
import feedparser

from .config import Config
from .errors import FetchError, PayloadError
from .models import (
    AiNewsItem,
    DailyNewsItem,
    FetchResult,
    HotItem,
    NewsItem,
    RssItem,
    TrendingItem,
)
from .normalizer import TRENDING, normalize_items, profile_for_hot_list
from .sources import resolve_api_path

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_NEWS_SOURCE = "everydaynews"


def check_status(status: int, source: Optional[str] = None) -> None:
    """非 2xx 响应视为失败"""
    if not 200 <= status < 300:
        raise FetchError(f"HTTP {status}", status=status, source=source)


class NewsFetcher:
    """上游聚合 API 与 RSS 获取器

    除 get_news 带重试外，每个方法最多发起一次网络请求。
    所有失败都收敛为 FetchResult.fail，不向外抛出异常。
    """

    def __init__(self, config: Config):
        self.config = config
        self.timeout = aiohttp.ClientTimeout(total=config.fetch_timeout)
        self.headers = {"User-Agent": config.user_agent}

    def _api_url(self, path: str) -> str:
        return f"{self.config.api_base_url}/{path.lstrip('/')}"

    async def _request(self, url: str, source: Optional[str] = None) -> bytes:
        """发起 GET 请求，返回原始响应体"""
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(url, headers=self.headers) as response:
                check_status(response.status, source)
                return await response.read()

    async def _get_json(self, url: str, source: Optional[str] = None) -> Any:
        raw = await self._request(url, source)
        return json.loads(raw)

    async def _get_json_with_retry(self, url: str, source: Optional[str] = None) -> Any:
        """带指数退避重试的 JSON 请求，仅对网络层失败重试"""
        retries = self.config.fetch_retry_times
        delay = self.config.retry_delay
        for attempt in range(retries + 1):
            try:
                return await self._get_json(url, source)
            except (FetchError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                if attempt >= retries:
                    raise
                logger.warning(f"重试 {source or url} ({attempt + 1}/{retries}): {e}")
                await asyncio.sleep(delay)
                delay *= 2

    async def _guard(
        self, label: str, call: Callable[[], Awaitable[T]]
    ) -> FetchResult[T]:
        """执行一次获取，把所有失败收敛为 FetchResult"""
        try:
            data = await call()
        except FetchError as e:
            if e.status == 429:
                logger.warning(f"{label} 被上游限流 (HTTP 429)")
            else:
                logger.warning(f"获取 {label} 失败: {e}")
            return FetchResult.fail(str(e), status=e.status)
        except asyncio.TimeoutError:
            logger.warning(f"获取 {label} 超时")
            return FetchResult.fail("请求超时")
        except aiohttp.ClientError as e:
            logger.warning(f"获取 {label} 网络错误: {e}")
            return FetchResult.fail(f"网络错误: {e}")
        except (PayloadError, ValueError) as e:
            logger.warning(f"{label} 响应格式错误: {e}")
            return FetchResult.fail(f"响应格式错误: {e}")
        except Exception as e:
            logger.error(f"获取 {label} 出现未知错误: {e}", exc_info=True)
            return FetchResult.fail(str(e))
        return FetchResult.ok(data)

    @staticmethod
    def _unwrap_data(payload: Any, label: str) -> Any:
        """取出 {code, message, data} 信封中的 data"""
        if not isinstance(payload, dict):
            raise PayloadError(f"{label}: 响应不是 JSON 对象")
        code = payload.get("code")
        if code is not None and code != 200:
            raise PayloadError(f"{label}: code={code} message={payload.get('message')}")
        return payload.get("data")

    async def get_hot_list(self, source_id: str) -> FetchResult[list[HotItem]]:
        """获取热榜"""
        url = self._api_url(resolve_api_path(source_id))
        profile = profile_for_hot_list(source_id)

        async def call() -> list[HotItem]:
            payload = await self._get_json(url, source_id)
            return normalize_items(payload, profile)

        result = await self._guard(f"热榜 {source_id}", call)
        if result.success:
            logger.info(f"获取热榜 {source_id}: {len(result.data)} 条")
        return result

    async def get_trending(self, source_id: str = "douyin") -> FetchResult[list[TrendingItem]]:
        """获取趋势榜"""
        url = self._api_url(source_id)

        async def call() -> list[TrendingItem]:
            payload = await self._get_json(url, source_id)
            return normalize_items(payload, TRENDING)

        result = await self._guard(f"趋势 {source_id}", call)
        if result.success:
            logger.info(f"获取趋势 {source_id}: {len(result.data)} 条")
        return result

    async def get_daily_news(self) -> FetchResult[DailyNewsItem]:
        """获取每日 60 秒新闻"""
        url = self._api_url("60s?encoding=json")

        async def call() -> DailyNewsItem:
            payload = await self._get_json(url, "60s")
            data = self._unwrap_data(payload, "60s")
            if not isinstance(data, dict):
                raise PayloadError("60s: data 不是对象")
            return DailyNewsItem.from_dict(data)

        return await self._guard("每日新闻", call)

    async def get_ai_news(self) -> FetchResult[list[AiNewsItem]]:
        """获取 AI 资讯"""
        url = self._api_url("ai-news")

        async def call() -> list[AiNewsItem]:
            payload = await self._get_json(url, "ai-news")
            data = self._unwrap_data(payload, "ai-news")
            news = data.get("news") if isinstance(data, dict) else None
            if not isinstance(news, list):
                raise PayloadError("ai-news: 缺少 news 列表")
            items = []
            for raw in news:
                item = AiNewsItem.from_dict(raw) if isinstance(raw, dict) else None
                if item:
                    items.append(item)
            return items

        result = await self._guard("AI 资讯", call)
        if result.success:
            logger.info(f"获取 AI 资讯: {len(result.data)} 条")
        return result

    async def get_news(
        self, language: str = "zh", source: Optional[str] = None
    ) -> FetchResult[list[NewsItem]]:
        """获取默认新闻源（{date, content[]}），网络失败时按退避策略重试"""
        base = self.config.news_api_base_url
        name = f"{source}.json" if source else "latest.json"
        url = f"{base}/{name}?lang={language}"
        label = source or DEFAULT_NEWS_SOURCE

        async def call() -> list[NewsItem]:
            payload = await self._get_json_with_retry(url, label)
            if not isinstance(payload, dict):
                raise PayloadError(f"{label}: 响应不是 JSON 对象")
            date = payload.get("date")
            content = payload.get("content")
            if not isinstance(date, str) or not isinstance(content, list):
                raise PayloadError(f"{label}: 缺少 date 或 content")
            return [
                NewsItem(
                    id=f"{date}-{index}",
                    title=str(title),
                    source=label,
                    published_at=date,
                )
                for index, title in enumerate(content)
            ]

        result = await self._guard(f"新闻 {label}", call)
        if result.success:
            logger.info(f"获取新闻 {label} ({language}): {len(result.data)} 条")
        return result

    async def get_rss_feed(self, url: str) -> FetchResult[list[RssItem]]:
        """获取并解析 RSS / Atom 订阅"""

        async def call() -> list[RssItem]:
            raw = await self._request(url, url)
            feed = feedparser.parse(raw)
            if feed.bozo and not feed.entries:
                raise PayloadError("RSS 解析失败")

            items = []
            for entry in feed.entries:
                item = RssItem.from_feed_entry(entry, url)
                if item:
                    items.append(item)
            return items

        result = await self._guard(f"RSS {url}", call)
        if result.success:
            logger.info(f"获取 RSS {url}: {len(result.data)} 条")
        return result
