from __future__ import annotations

import pytest

from services.cache import TTLCache
from services.cache_report import describe_cache, format_remaining


@pytest.mark.parametrize(
    ("remaining_ms", "style", "expected"),
    [
        (59_001, "minutes", "1分 0秒"),
        (58_200, "minutes", "0分 59秒"),
        (3_599_990, "minutes", "60分 0秒"),
        (14_399_000, "minutes", "239分 59秒"),
        (14_399_000, "hours", "3時間 59分 59秒"),
        (3_600_000, "hours", "1時間 0分 0秒"),
        (3_599_000, "hours", "59分 59秒"),
        (3_599_500, "hours", "60分 0秒"),
    ],
)
def test_format_remaining(remaining_ms, style, expected) -> None:
    assert format_remaining(remaining_ms, style) == expected


def test_format_remaining_rejects_unknown_style() -> None:
    with pytest.raises(ValueError):
        format_remaining(1000, "days")


def test_describe_cache_lists_live_entries_in_insertion_order(clock) -> None:
    cache = TTLCache(max_entries=10, ttl_seconds=14400, clock=clock)
    cache.set("a", {"n": 1})
    clock.advance(60)
    cache.set("b", {"n": 2})

    report = describe_cache(cache, "hours")

    assert report == {
        "totalCachedItems": 2,
        "cacheDetails": [
            {"videoid": "a", "remainingTime": "3時間 59分 0秒", "remainingTTL_ms": 14_340_000},
            {"videoid": "b", "remainingTime": "4時間 0分 0秒", "remainingTTL_ms": 14_400_000},
        ],
    }


def test_describe_cache_empty(clock) -> None:
    cache = TTLCache(clock=clock)
    assert describe_cache(cache) == {"totalCachedItems": 0, "cacheDetails": []}
