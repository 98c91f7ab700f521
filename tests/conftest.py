"""测试公共 fixture"""

from unittest.mock import AsyncMock

import pytest

from shaking_news.aggregator import NewsAggregator
from shaking_news.cache import TTLCache
from shaking_news.config import Config
from shaking_news.fetcher import NewsFetcher


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def config():
    return Config(retry_delay=0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetcher(config):
    """网络请求被替换为 AsyncMock 的获取器，测试中设置 _get_json 的返回值"""
    f = NewsFetcher(config)
    f._get_json = AsyncMock()
    return f


@pytest.fixture
def aggregator(config, fetcher, clock):
    return NewsAggregator(config, fetcher=fetcher, cache=TTLCache(clock=clock))
