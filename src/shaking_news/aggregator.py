"""新闻聚合模块：在获取器外包一层缓存，对外提供各类数据"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Awaitable, Callable, Iterable, Optional

from .cache import TTLCache
from .config import Config
from .fetcher import NewsFetcher
from .models import (
    AiNewsItem,
    DailyNewsItem,
    FetchResult,
    HotItem,
    NewsItem,
    RssItem,
    TrendingItem,
)
from .sources import HOT_LIST_SOURCES

logger = logging.getLogger(__name__)

KEY_DAILY = "daily"
KEY_AI_NEWS = "ai-news"
PREFIX_HOT = "hot:"
PREFIX_TRENDING = "trending:"
PREFIX_RSS = "rss:"
PREFIX_NEWS = "news:"


def _freeze(result: FetchResult) -> FetchResult:
    """把成功结果中的列表转为元组，缓存值对所有读者只读"""
    if result.success and isinstance(result.data, list):
        return replace(result, data=tuple(result.data))
    return result


class NewsAggregator:
    """新闻聚合器"""

    def __init__(
        self,
        config: Config,
        fetcher: Optional[NewsFetcher] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.config = config
        # 空缓存的 len() 为 0，必须用 is None 判断是否注入
        self.fetcher = fetcher if fetcher is not None else NewsFetcher(config)
        self.cache = (
            cache if cache is not None else TTLCache(max_entries=config.cache_max_entries)
        )

    async def _cached(
        self, key: str, ttl: int, factory: Callable[[], Awaitable[FetchResult]]
    ) -> FetchResult:
        async def load() -> FetchResult:
            return _freeze(await factory())

        # 失败结果不缓存，下次调用重新请求上游
        return await self.cache.get_or_set(
            key, ttl, load, should_cache=lambda r: r.success
        )

    # --- FetchResult 接口，成功时 data 为元组 ---

    async def hot_list_result(self, source_id: str) -> FetchResult[tuple[HotItem, ...]]:
        return await self._cached(
            f"{PREFIX_HOT}{source_id}",
            self.config.ttl_hot_list,
            lambda: self.fetcher.get_hot_list(source_id),
        )

    async def trending_result(self, source_id: str) -> FetchResult[tuple[TrendingItem, ...]]:
        return await self._cached(
            f"{PREFIX_TRENDING}{source_id}",
            self.config.ttl_trending,
            lambda: self.fetcher.get_trending(source_id),
        )

    async def daily_news_result(self) -> FetchResult[DailyNewsItem]:
        return await self._cached(
            KEY_DAILY, self.config.ttl_daily, self.fetcher.get_daily_news
        )

    async def ai_news_result(self) -> FetchResult[tuple[AiNewsItem, ...]]:
        return await self._cached(
            KEY_AI_NEWS, self.config.ttl_ai_news, self.fetcher.get_ai_news
        )

    async def rss_result(self, url: str) -> FetchResult[tuple[RssItem, ...]]:
        return await self._cached(
            f"{PREFIX_RSS}{url}",
            self.config.ttl_rss,
            lambda: self.fetcher.get_rss_feed(url),
        )

    async def news_result(
        self, language: str = "zh", source: Optional[str] = None
    ) -> FetchResult[tuple[NewsItem, ...]]:
        return await self._cached(
            f"{PREFIX_NEWS}{language}:{source or 'latest'}",
            self.config.ttl_news,
            lambda: self.fetcher.get_news(language, source),
        )

    # --- 面向展示层的接口：失败时降级为空，每次返回新的列表 ---

    async def fetch_hot_list(self, source_id: str) -> list[HotItem]:
        """获取热榜，失败返回空列表"""
        result = await self.hot_list_result(source_id)
        return list(result.data) if result.success else []

    async def fetch_hot_lists(
        self, source_ids: Optional[Iterable[str]] = None
    ) -> dict[str, list[HotItem]]:
        """并发获取多个热榜，各源相互独立"""
        if source_ids is None:
            source_ids = [s.id for s in HOT_LIST_SOURCES]
        source_ids = list(source_ids)

        lists = await asyncio.gather(*(self.fetch_hot_list(sid) for sid in source_ids))
        return dict(zip(source_ids, lists))

    async def fetch_trending(self, source_id: str = "douyin") -> Optional[list[TrendingItem]]:
        """获取趋势榜，失败返回 None，空列表表示确实没有数据"""
        result = await self.trending_result(source_id)
        return list(result.data) if result.success else None

    async def get_trending_list(self, source_id: str = "douyin") -> list[TrendingItem]:
        return await self.fetch_trending(source_id) or []

    async def fetch_daily_news(self) -> Optional[DailyNewsItem]:
        result = await self.daily_news_result()
        return result.data if result.success else None

    async def fetch_ai_news(self) -> Optional[list[AiNewsItem]]:
        result = await self.ai_news_result()
        return list(result.data) if result.success else None

    async def fetch_news(
        self, language: str = "zh", source: Optional[str] = None
    ) -> Optional[list[NewsItem]]:
        """获取默认新闻源，失败返回 None"""
        result = await self.news_result(language, source)
        return list(result.data) if result.success else None

    async def fetch_rss_feeds(self, urls: Iterable[str]) -> list[RssItem]:
        """并发获取多个 RSS 订阅，合并后按发布时间倒序"""
        urls = list(urls)
        results = await asyncio.gather(*(self.rss_result(url) for url in urls))

        all_items: list[RssItem] = []
        for url, result in zip(urls, results):
            if result.success:
                all_items.extend(result.data)
            else:
                logger.warning(f"RSS 源 {url} 获取失败: {result.error}")

        all_items.sort(key=lambda x: x.published or datetime.min, reverse=True)
        return all_items

    async def get_home_page_news(
        self,
        language: str = "zh",
        source: Optional[str] = None,
        rss_urls: Iterable[str] = (),
    ) -> list[NewsItem]:
        """首页新闻

        指定 source 时直接取该新闻源；否则优先合并用户启用的 RSS 订阅，
        RSS 全部失败或没有条目时回退到默认新闻源。
        """
        if source:
            return await self.fetch_news(language, source) or []

        rss_urls = list(rss_urls)
        if rss_urls:
            rss_items = await self.fetch_rss_feeds(rss_urls)
            if rss_items:
                return [NewsItem.from_rss_item(item) for item in rss_items]
            logger.info("RSS 订阅没有可用条目，回退到默认新闻源")

        return await self.fetch_news(language) or []

    # --- 缓存管理 ---

    def refresh(self, kind: Optional[str] = None, source_id: Optional[str] = None) -> int:
        """清除缓存，kind 为 hot / trending / rss / news / daily / ai，均为空时全部清除

        kind 为 news 时 source_id 表示语言，例如 refresh("news", "zh")。
        """
        if kind is None:
            count = len(self.cache)
            self.cache.clear()
            logger.info(f"已清除全部缓存: {count} 条")
            return count

        if kind == "daily":
            return int(self.cache.delete(KEY_DAILY))
        if kind == "ai":
            return int(self.cache.delete(KEY_AI_NEWS))
        if kind == "news":
            prefix = PREFIX_NEWS if source_id is None else f"{PREFIX_NEWS}{source_id}:"
            return self.cache.invalidate_prefix(prefix)

        prefixes = {"hot": PREFIX_HOT, "trending": PREFIX_TRENDING, "rss": PREFIX_RSS}
        if kind not in prefixes:
            raise ValueError(f"未知的缓存类型: {kind}")
        prefix = prefixes[kind]
        if source_id is not None:
            return int(self.cache.delete(f"{prefix}{source_id}"))
        return self.cache.invalidate_prefix(prefix)
