"""摇头看新闻 - 新闻 / 热榜聚合与归一化"""

from .config import Config
from .sources import HOT_LIST_SOURCES, TRENDING_SOURCES, Source, get_source, resolve_api_path
from .models import (
    AiNewsItem,
    DailyNewsItem,
    FetchResult,
    HotItem,
    NewsItem,
    RssItem,
    TrendingItem,
)
from .fetcher import NewsFetcher
from .cache import TTLCache
from .aggregator import NewsAggregator
from .tiers import UserTier, FeatureConfig, get_features_for_tier, is_feature_enabled
from .settings import UserSettings, apply_settings_update, validate_settings
from .scheduler import NewsPreloader

__version__ = "1.0.0"
__all__ = [
    "Config",
    "HOT_LIST_SOURCES",
    "TRENDING_SOURCES",
    "Source",
    "get_source",
    "resolve_api_path",
    "AiNewsItem",
    "DailyNewsItem",
    "FetchResult",
    "HotItem",
    "NewsItem",
    "RssItem",
    "TrendingItem",
    "NewsFetcher",
    "TTLCache",
    "NewsAggregator",
    "UserTier",
    "FeatureConfig",
    "get_features_for_tier",
    "is_feature_enabled",
    "UserSettings",
    "apply_settings_update",
    "validate_settings",
    "NewsPreloader",
]
