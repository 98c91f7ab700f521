"""配置管理模块"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class Config:
    """应用配置类"""

    # 上游聚合 API
    api_base_url: str = "https://60s.viki.moe/v2"
    user_agent: str = "ShakingHeadNews/1.0"

    # 默认新闻源（everydaynews）
    news_api_base_url: str = "https://news.ravelloh.top"

    # 抓取设置
    fetch_timeout: int = 15
    fetch_retry_times: int = 3
    retry_delay: float = 1.0

    # 缓存配置（秒）
    cache_max_entries: int = 1000
    ttl_daily: int = 1800
    ttl_ai_news: int = 1800
    ttl_hot_list: int = 300
    ttl_trending: int = 60
    ttl_rss: int = 1800
    ttl_news: int = 3600

    # 预加载任务配置
    preload_interval: int = 300
    timezone: str = "Asia/Shanghai"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Config":
        """从环境变量加载配置"""
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls(
            api_base_url=os.getenv("API_BASE_URL", "https://60s.viki.moe/v2").rstrip("/"),
            user_agent=os.getenv("USER_AGENT", "").strip() or "ShakingHeadNews/1.0",
            news_api_base_url=os.getenv(
                "NEWS_API_BASE_URL", "https://news.ravelloh.top"
            ).rstrip("/"),
            fetch_timeout=int(os.getenv("FETCH_TIMEOUT", "15")),
            fetch_retry_times=int(os.getenv("FETCH_RETRY_TIMES", "3")),
            retry_delay=float(os.getenv("RETRY_DELAY", "1.0")),
            cache_max_entries=int(os.getenv("CACHE_MAX_ENTRIES", "1000")),
            ttl_daily=int(os.getenv("TTL_DAILY", "1800")),
            ttl_ai_news=int(os.getenv("TTL_AI_NEWS", "1800")),
            ttl_hot_list=int(os.getenv("TTL_HOT_LIST", "300")),
            ttl_trending=int(os.getenv("TTL_TRENDING", "60")),
            ttl_rss=int(os.getenv("TTL_RSS", "1800")),
            ttl_news=int(os.getenv("TTL_NEWS", "3600")),
            preload_interval=int(os.getenv("PRELOAD_INTERVAL", "300")),
            timezone=os.getenv("TIMEZONE", "Asia/Shanghai"),
        )

    def validate(self) -> list[str]:
        """验证配置，返回错误列表"""
        errors = []
        if not self.api_base_url.startswith(("http://", "https://")):
            errors.append(f"API_BASE_URL 无效: {self.api_base_url}")
        if not self.news_api_base_url.startswith(("http://", "https://")):
            errors.append(f"NEWS_API_BASE_URL 无效: {self.news_api_base_url}")
        if self.fetch_timeout <= 0:
            errors.append("FETCH_TIMEOUT 必须大于 0")
        if self.fetch_retry_times < 0 or self.retry_delay < 0:
            errors.append("FETCH_RETRY_TIMES 和 RETRY_DELAY 不能为负数")
        if self.cache_max_entries <= 0:
            errors.append("CACHE_MAX_ENTRIES 必须大于 0")
        for name in ("ttl_daily", "ttl_ai_news", "ttl_hot_list", "ttl_trending", "ttl_rss", "ttl_news"):
            if getattr(self, name) < 0:
                errors.append(f"{name.upper()} 不能为负数")
        if self.preload_interval <= 0:
            errors.append("PRELOAD_INTERVAL 必须大于 0")
        return errors
