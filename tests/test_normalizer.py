import pytest

from shaking_news.errors import PayloadError
from shaking_news.models import HotItem, TrendingItem
from shaking_news.normalizer import (
    HOT_LIST,
    TODAY_IN_HISTORY,
    TRENDING,
    normalize_item,
    normalize_items,
    pick,
    profile_for_hot_list,
)


def test_pick_prefers_earlier_keys():
    assert pick({"url": "u", "link": "l"}, ("url", "link")) == "u"


def test_pick_skips_blank_values():
    assert pick({"url": "", "link": "l"}, ("url", "link")) == "l"
    assert pick({"url": None, "link": "l"}, ("url", "link")) == "l"
    assert pick({}, ("url", "link")) is None


def test_pick_keeps_zero():
    assert pick({"hot": 0, "hot_value": 9}, ("hot", "hot_value")) == 0


def test_profile_for_hot_list():
    assert profile_for_hot_list("today-in-history") is TODAY_IN_HISTORY
    assert profile_for_hot_list("weibo") is HOT_LIST
    assert profile_for_hot_list("unknown") is HOT_LIST


def test_hot_list_accepts_flat_data():
    payload = {"data": [{"title": "A", "url": "u1", "hot": "100万"}]}
    assert normalize_items(payload, HOT_LIST) == [HotItem(title="A", url="u1", hot="100万")]


def test_hot_list_accepts_nested_items():
    payload = {"data": {"items": [{"title": "A", "link": "l1"}]}}
    assert normalize_items(payload, HOT_LIST) == [HotItem(title="A", url="l1", hot=None)]


def test_today_in_history_maps_year_to_hot():
    payload = {"data": {"items": [{"title": "X", "link": "L", "year": "1990"}]}}
    assert normalize_items(payload, TODAY_IN_HISTORY) == [HotItem(title="X", url="L", hot="1990")]


def test_items_without_title_or_url_are_dropped():
    payload = {
        "data": [
            {"title": "ok", "url": "u"},
            {"title": "", "url": "u"},
            {"title": "no url"},
            "not a dict",
        ]
    }
    assert normalize_items(payload, HOT_LIST) == [HotItem(title="ok", url="u")]


def test_unrecognized_envelope_raises():
    with pytest.raises(PayloadError):
        normalize_items({"data": "oops"}, HOT_LIST)
    with pytest.raises(PayloadError):
        normalize_items(["not", "an", "object"], HOT_LIST)
    with pytest.raises(PayloadError):
        normalize_items({}, HOT_LIST)


def test_trending_requires_code_200():
    with pytest.raises(PayloadError):
        normalize_items({"code": 500, "message": "err", "data": []}, TRENDING)
    with pytest.raises(PayloadError):
        normalize_items({"data": []}, TRENDING)


def test_trending_does_not_accept_nested_items():
    with pytest.raises(PayloadError):
        normalize_items({"code": 200, "data": {"items": []}}, TRENDING)


def test_trending_field_fallbacks():
    payload = {
        "code": 200,
        "data": [
            {"keyword": "K", "link": "L2"},
            {"title": "T", "heat": 42},
            {"title": "S", "url": "u", "score": 1.5},
        ],
    }
    assert normalize_items(payload, TRENDING) == [
        TrendingItem(title="K", url="L2", hot=None),
        TrendingItem(title="T", url="#", hot=42),
        TrendingItem(title="S", url="u", hot=1.5),
    ]


def test_normalize_item_strips_whitespace():
    item = normalize_item({"title": "  A ", "url": " u "}, HOT_LIST)
    assert item == HotItem(title="A", url="u")
