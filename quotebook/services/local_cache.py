"""
Client-side snapshot cache of the quote collection.

Mirrors what a browser keeps in local storage: the last-known collection
as one JSON document. On load an empty cache adopts the server's set,
otherwise the cache wins until a mutation round-trip succeeds and
``commit`` replaces it with the server's collection. Two clients editing
concurrently can therefore drop each other's changes (last write wins per
snapshot, no per-record merge).
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Awaitable, Callable, Sequence

from quotebook.core.errors import StorageError
from quotebook.domain.quotes import Quote
from quotebook.domain.seed import reconcile_snapshot
from quotebook.repositories.json_storage import save

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[Sequence[Quote]]]


class LocalQuoteCache:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> list[Quote]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [Quote.from_dict(item) for item in raw]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("discarding unreadable quote cache %s: %s", self.path, exc)
            return []

    def write(self, quotes: Sequence[Quote]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        save(self.path, {q.id: q for q in quotes})

    async def load(self, fetch: Fetch) -> list[Quote]:
        """Reconcile the cache with a fresh fetch and persist the result."""
        cached = await asyncio.to_thread(self.read)
        try:
            fetched = await fetch()
        except StorageError:
            if cached:
                logger.warning("fetch failed, serving %d cached quotes", len(cached))
                return cached
            raise
        quotes = reconcile_snapshot(cached, fetched)
        await asyncio.to_thread(self.write, quotes)
        return quotes

    async def commit(self, fetch: Fetch) -> list[Quote]:
        """After a successful mutation the server's collection becomes the snapshot."""
        quotes = list(await fetch())
        await asyncio.to_thread(self.write, quotes)
        return quotes
