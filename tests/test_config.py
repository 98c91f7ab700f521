from shaking_news.config import Config

ENV_KEYS = (
    "API_BASE_URL",
    "USER_AGENT",
    "FETCH_TIMEOUT",
    "CACHE_MAX_ENTRIES",
    "TTL_DAILY",
    "TTL_AI_NEWS",
    "TTL_HOT_LIST",
    "TTL_TRENDING",
    "TTL_RSS",
    "TTL_NEWS",
    "NEWS_API_BASE_URL",
    "FETCH_RETRY_TIMES",
    "RETRY_DELAY",
    "PRELOAD_INTERVAL",
    "TIMEZONE",
)


def _clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_match_upstream_contract():
    config = Config()
    assert config.api_base_url == "https://60s.viki.moe/v2"
    assert config.ttl_daily == 1800
    assert config.ttl_ai_news == 1800
    assert config.ttl_hot_list == 300
    assert config.ttl_trending == 60
    assert config.validate() == []


def test_from_env_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "API_BASE_URL=https://mirror.example.com/v2/\n"
        "TTL_TRENDING=30\n"
        "FETCH_TIMEOUT=5\n"
    )
    config = Config.from_env(str(env_file))
    assert config.api_base_url == "https://mirror.example.com/v2"
    assert config.ttl_trending == 30
    assert config.fetch_timeout == 5
    assert config.ttl_hot_list == 300
    assert config.user_agent == "ShakingHeadNews/1.0"


def test_environment_overrides(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("TTL_HOT_LIST", "120")
    config = Config.from_env(str(tmp_path / "missing.env"))
    assert config.ttl_hot_list == 120


def test_validate_reports_errors():
    config = Config(api_base_url="ftp://nope", fetch_timeout=0, ttl_rss=-1)
    errors = config.validate()
    assert len(errors) == 3


def test_news_source_settings(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "NEWS_API_BASE_URL=https://news.example.com/\n"
        "FETCH_RETRY_TIMES=1\n"
        "RETRY_DELAY=0.25\n"
    )
    config = Config.from_env(str(env_file))
    assert config.news_api_base_url == "https://news.example.com"
    assert config.fetch_retry_times == 1
    assert config.retry_delay == 0.25
    assert config.ttl_news == 3600


def test_validate_news_settings():
    config = Config(news_api_base_url="news.example.com", fetch_retry_times=-1)
    assert len(config.validate()) == 2
