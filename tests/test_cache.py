"""
Cache-aside behaviour with a mocked Redis client, and degradation without one.
"""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsportal.cache import CacheManager, make_key


def _manager_with(redis_client) -> CacheManager:
    manager = CacheManager()
    manager._redis = redis_client
    return manager


def _scan(keys):
    async def scan_iter(match=None):
        for key in keys:
            yield key
    return scan_iter


def test_make_key_marks_absent_parts():
    assert make_key("news", "list", "feed", "ru", 1, 10, None, "") == "news:list:feed:ru:1:10:-:"


@pytest.mark.asyncio
async def test_without_redis_everything_is_a_miss():
    manager = CacheManager()
    await manager.set("k", {"a": 1})
    assert await manager.get("k") is None
    await manager.invalidate_news(1)
    assert manager.stats == {"hits": 0, "misses": 1, "hit_rate": 0.0}


@pytest.mark.asyncio
async def test_get_decodes_json_and_counts_hits():
    client = MagicMock()
    client.get = AsyncMock(side_effect=[json.dumps({"news": []}), None])
    manager = _manager_with(client)

    assert await manager.get("news:detail:1:ru") == {"news": []}
    assert await manager.get("news:detail:2:ru") is None
    assert manager.stats == {"hits": 1, "misses": 1, "hit_rate": 50.0}


@pytest.mark.asyncio
async def test_redis_errors_degrade_to_miss():
    client = MagicMock()
    client.get = AsyncMock(side_effect=ConnectionError("down"))
    client.set = AsyncMock(side_effect=ConnectionError("down"))
    manager = _manager_with(client)

    await manager.set("k", {"a": 1}, ttl=5)
    assert await manager.get("k") is None


@pytest.mark.asyncio
async def test_set_serialises_with_ttl():
    client = MagicMock()
    client.set = AsyncMock()
    manager = _manager_with(client)

    await manager.set("categories:list:tm", [{"id": 1}], ttl=60)
    client.set.assert_awaited_once_with("categories:list:tm", json.dumps([{"id": 1}], default=str), ex=60)


@pytest.mark.asyncio
async def test_invalidate_news_drops_lists_and_detail():
    client = MagicMock()
    client.scan_iter = MagicMock(side_effect=[_scan(["news:list:a"])(), _scan(["news:detail:4:ru"])()])
    client.delete = AsyncMock()
    manager = _manager_with(client)

    await manager.invalidate_news(4)

    patterns = [call.kwargs["match"] for call in client.scan_iter.call_args_list]
    assert patterns == ["news:list:*", "news:detail:4:*"]
    assert client.delete.await_count == 2


@pytest.mark.asyncio
async def test_invalidate_categories_drops_all_news_views():
    client = MagicMock()
    client.scan_iter = MagicMock(side_effect=[_scan([])(), _scan([])()])
    client.delete = AsyncMock()
    manager = _manager_with(client)

    await manager.invalidate_categories()

    patterns = [call.kwargs["match"] for call in client.scan_iter.call_args_list]
    assert patterns == ["categories:*", "news:*"]
    client.delete.assert_not_awaited()
