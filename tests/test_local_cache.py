from __future__ import annotations

import asyncio

import pytest

from quotebook.core.errors import StorageError
from quotebook.domain.quotes import Quote, QuoteType
from quotebook.domain.seed import reconcile_snapshot
from quotebook.services import local_cache
from quotebook.services.local_cache import LocalQuoteCache

SERVER = [Quote(id="s1", name="Server", text="fresh", type=QuoteType.TEACHER, timestamp=20)]
LOCAL = [Quote(id="l1", name="Local", text="cached", type=QuoteType.STUDENT, timestamp=10)]


def _fetcher(result):
    async def fetch():
        return result
    return fetch


async def _failing_fetch():
    raise StorageError("offline")


def test_reconcile_prefers_non_empty_cache():
    assert reconcile_snapshot([], SERVER) == SERVER
    assert reconcile_snapshot(LOCAL, SERVER) == LOCAL


@pytest.mark.asyncio
async def test_empty_cache_adopts_fetched_set(tmp_path):
    cache = LocalQuoteCache(tmp_path / "cache.json")
    assert await cache.load(_fetcher(SERVER)) == SERVER
    assert cache.read() == SERVER


@pytest.mark.asyncio
async def test_non_empty_cache_stays_authoritative(tmp_path):
    cache = LocalQuoteCache(tmp_path / "cache.json")
    cache.write(LOCAL)
    assert await cache.load(_fetcher(SERVER)) == LOCAL
    assert cache.read() == LOCAL


@pytest.mark.asyncio
async def test_commit_replaces_snapshot_with_server_state(tmp_path):
    cache = LocalQuoteCache(tmp_path / "cache.json")
    cache.write(LOCAL)
    assert await cache.commit(_fetcher(SERVER)) == SERVER
    assert await cache.load(_fetcher([])) == SERVER


@pytest.mark.asyncio
async def test_fetch_failure_falls_back_to_cache(tmp_path):
    cache = LocalQuoteCache(tmp_path / "cache.json")
    cache.write(LOCAL)
    assert await cache.load(_failing_fetch) == LOCAL

    empty = LocalQuoteCache(tmp_path / "empty.json")
    with pytest.raises(StorageError):
        await empty.load(_failing_fetch)


def test_unreadable_cache_counts_as_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("garbage", encoding="utf-8")
    assert LocalQuoteCache(path).read() == []


@pytest.mark.asyncio
async def test_cache_file_io_runs_in_worker_threads(tmp_path, monkeypatch):
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(local_cache.asyncio, "to_thread", recording_to_thread)
    cache = LocalQuoteCache(tmp_path / "cache.json")
    await cache.load(_fetcher(SERVER))
    await cache.commit(_fetcher(LOCAL))
    assert offloaded == ["read", "write", "write"]
