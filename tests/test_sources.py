from shaking_news.sources import (
    API_PATH_MAP,
    HOT_LIST_SOURCES,
    TRENDING_SOURCES,
    get_source,
    is_known_source,
    is_trending_source,
    list_sources,
    resolve_api_path,
)


def test_get_source_returns_metadata():
    source = get_source("bilibili")
    assert source is not None
    assert source.name == "B站热搜"
    assert source.icon == "📺"


def test_get_source_unknown_is_none():
    assert get_source("not-a-source") is None
    assert not is_known_source("not-a-source")


def test_resolve_api_path_uses_remap_table():
    assert resolve_api_path("bilibili") == "bili"
    assert resolve_api_path("baidu") == "baidu/hot"


def test_resolve_api_path_passes_unknown_ids_through():
    assert resolve_api_path("weibo") == "weibo"
    assert resolve_api_path("some-new-endpoint") == "some-new-endpoint"


def test_source_ids_are_unique():
    ids = [s.id for s in HOT_LIST_SOURCES]
    assert len(ids) == len(set(ids))
    assert list_sources() == HOT_LIST_SOURCES


def test_trending_sources_exclude_today_in_history():
    ids = {s.id for s in TRENDING_SOURCES}
    assert "today-in-history" not in ids
    assert "douyin" in ids


def test_remap_targets_are_non_empty():
    assert all(path for path in API_PATH_MAP.values())


def test_list_sources_for_trending():
    assert list_sources(trending=True) == TRENDING_SOURCES
    assert is_trending_source("weibo")
    assert not is_trending_source("today-in-history")
    assert not is_trending_source("not-a-source")
