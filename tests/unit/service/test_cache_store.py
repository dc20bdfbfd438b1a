import json
from datetime import timedelta
from unittest.mock import patch

import pytest

from app.model.node import CacheEntry
from app.service.cache_store import (
    CACHE_DURATION,
    InMemoryCacheStore,
    JsonFileCacheStore,
    is_cache_valid,
)


@pytest.mark.unit
class TestIsCacheValid:
    """Test cases for the freshness window."""

    def test_freshness_window_is_six_hours(self):
        assert CACHE_DURATION == timedelta(hours=6)

    def test_just_inside_window(self, now):
        entry = CacheEntry(last_updated=now - timedelta(hours=5, minutes=59), data=[])

        assert is_cache_valid(entry, now) is True

    def test_just_outside_window(self, now):
        entry = CacheEntry(last_updated=now - timedelta(hours=6, minutes=1), data=[])

        assert is_cache_valid(entry, now) is False

    def test_exactly_at_window_is_stale(self, now):
        entry = CacheEntry(last_updated=now - CACHE_DURATION, data=[])

        assert is_cache_valid(entry, now) is False

    def test_without_timestamp(self, now):
        assert is_cache_valid(CacheEntry(data=[]), now) is False

    def test_without_entry(self, now):
        assert is_cache_valid(None, now) is False

    def test_naive_timestamp_is_treated_as_utc(self, now):
        entry = CacheEntry.model_validate({"lastUpdated": "2026-10-16T11:00:00", "data": []})

        assert is_cache_valid(entry, now) is True


@pytest.mark.unit
class TestJsonFileCacheStore:
    """Test cases for the JSON file cache."""

    @pytest.mark.asyncio
    async def test_read_missing_file(self, temp_dir):
        store = JsonFileCacheStore(temp_dir / "nodes_cache.json")

        assert await store.read() is None

    @pytest.mark.asyncio
    async def test_write_then_read(self, temp_dir, now, enriched_node):
        store = JsonFileCacheStore(temp_dir / "nodes_cache.json")

        assert await store.write(CacheEntry(last_updated=now, data=[enriched_node])) is True
        entry = await store.read()

        assert entry.last_updated == now
        assert entry.data == [enriched_node]

    @pytest.mark.asyncio
    async def test_file_format(self, temp_dir, now, enriched_node):
        path = temp_dir / "nodes_cache.json"
        store = JsonFileCacheStore(path)

        await store.write(CacheEntry(last_updated=now, data=[enriched_node]))
        document = json.loads(path.read_text(encoding="utf-8"))

        assert set(document) == {"lastUpdated", "data"}
        assert document["lastUpdated"].startswith("2026-10-16T12:00:00")
        assert document["data"][0]["nodeId"] == "0xabc"
        assert document["data"][0]["walruscanUrl"] == "https://walruscan.com/mainnet/operator/0xabc"
        assert document["data"][0]["geo"] == {"country": "DE", "region": "Hesse", "city": "Frankfurt am Main"}
        assert not (temp_dir / "nodes_cache.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_write_replaces_whole_document(self, temp_dir, now, enriched_node):
        store = JsonFileCacheStore(temp_dir / "nodes_cache.json")
        await store.write(CacheEntry(last_updated=now - timedelta(hours=7), data=[enriched_node]))

        await store.write(CacheEntry(last_updated=now, data=[]))
        entry = await store.read()

        assert entry.last_updated == now
        assert entry.data == []

    @pytest.mark.asyncio
    async def test_write_creates_parent_directories(self, temp_dir, now):
        path = temp_dir / "nested" / "cache" / "nodes_cache.json"
        store = JsonFileCacheStore(path)

        assert await store.write(CacheEntry(last_updated=now, data=[])) is True
        assert path.exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [
        "",
        "{not json",
        '{"lastUpdated": "yesterday", "data": []}',
        '{"lastUpdated": "2026-10-16T12:00:00Z", "data": "nodes"}',
        "[]",
    ])
    async def test_read_unreadable_file_is_absent(self, temp_dir, content):
        path = temp_dir / "nodes_cache.json"
        path.write_text(content, encoding="utf-8")

        assert await JsonFileCacheStore(path).read() is None

    @pytest.mark.asyncio
    async def test_read_invalid_utf8_is_absent(self, temp_dir):
        """A file with bytes that are not UTF-8 is treated as no cache."""
        path = temp_dir / "nodes_cache.json"
        path.write_bytes(b'{"lastUpdated": "2026-10-16T12:00:00Z", "data": [], "x": "\xff\xfe"}')

        assert await JsonFileCacheStore(path).read() is None

    @pytest.mark.asyncio
    async def test_reads_document_without_node_ids(self, temp_dir):
        """Older documents stored nodes without a nodeId."""
        path = temp_dir / "nodes_cache.json"
        path.write_text(json.dumps({
            "lastUpdated": "2026-10-16T10:00:00.000Z",
            "data": [{
                "nodeUrl": "h.example.com:9185",
                "nodeName": "N1",
                "nodeStatus": "Active",
                "walruscanUrl": "https://walruscan.com/mainnet/operator/n1",
                "geo": {"country": "US", "region": "Oregon", "city": "Portland"},
            }],
        }), encoding="utf-8")

        entry = await JsonFileCacheStore(path).read()

        assert entry.data[0].node_id == "Unknown"
        assert entry.data[0].geo.city == "Portland"

    @pytest.mark.asyncio
    async def test_write_failure_returns_false(self, temp_dir, now):
        store = JsonFileCacheStore(temp_dir / "nodes_cache.json")

        with patch("aiofiles.os.replace", side_effect=OSError("disk full")):
            assert await store.write(CacheEntry(last_updated=now, data=[])) is False

        assert await store.read() is None
        assert not (temp_dir / "nodes_cache.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_write_into_file_path_parent_fails_soft(self, temp_dir, now):
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileCacheStore(blocker / "nodes_cache.json")

        assert await store.write(CacheEntry(last_updated=now, data=[])) is False


@pytest.mark.unit
class TestInMemoryCacheStore:

    @pytest.mark.asyncio
    async def test_empty_by_default(self):
        assert await InMemoryCacheStore().read() is None

    @pytest.mark.asyncio
    async def test_write_then_read(self, now, enriched_node):
        store = InMemoryCacheStore()

        assert await store.write(CacheEntry(last_updated=now, data=[enriched_node])) is True
        entry = await store.read()

        assert entry.data == [enriched_node]

    @pytest.mark.asyncio
    async def test_returned_entries_are_copies(self, now, enriched_node):
        store = InMemoryCacheStore(CacheEntry(last_updated=now, data=[enriched_node]))

        first = await store.read()
        first.data.clear()

        assert len((await store.read()).data) == 1
