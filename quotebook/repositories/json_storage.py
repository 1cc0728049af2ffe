"""
JSON-file persistence adapter.

The whole collection lives in memory and is mirrored to a single
pretty-printed JSON array. Every mutation rewrites the complete document
through a temp file plus ``os.replace`` so readers only ever see a full
snapshot; the in-memory view is swapped only after the write succeeded.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Optional

from quotebook.core.errors import StorageError
from quotebook.domain.quotes import Quote, QuoteCreate, build_quote, new_quote_id, newest_first
from quotebook.domain.seed import seed_payloads

logger = logging.getLogger(__name__)


def load(path: Path) -> Optional[dict[str, Quote]]:
    """Read the document; None when it does not exist yet."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of quotes")
    quotes = [Quote.from_dict(item) for item in raw]
    return {quote.id: quote for quote in quotes}


def save(path: Path, quotes: dict[str, Quote]) -> None:
    payload = json.dumps([q.to_dict() for q in newest_first(quotes.values())], ensure_ascii=False, indent=2)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonQuoteRepository:
    """File-backed backend, lazily initialized on first use."""

    kind = "file"

    def __init__(self, path: Path | str, *, seed: bool = True) -> None:
        self.path = Path(path)
        self._seed = seed
        self._quotes: dict[str, Quote] = {}
        self._ready = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        if self._ready:
            return
        async with self._lock:
            if self._ready:
                return
            try:
                loaded = await asyncio.to_thread(load, self.path)
            except (OSError, ValueError, KeyError, TypeError) as exc:
                logger.exception("could not read quotes file %s", self.path)
                raise StorageError(f"could not read {self.path}") from exc
            if loaded is None:
                snapshot = {}
                if self._seed:
                    for payload in seed_payloads():
                        quote = build_quote(payload)
                        snapshot[quote.id] = quote
                await self._persist(snapshot)
                logger.info("file backend created %s with %d seed quotes", self.path, len(snapshot))
            else:
                self._quotes = loaded
                logger.info("file backend loaded %d quotes from %s", len(loaded), self.path)
            self._ready = True

    async def close(self) -> None:
        return None

    async def _persist(self, snapshot: dict[str, Quote]) -> None:
        """Write the full snapshot, then adopt it. Caller holds the lock."""
        try:
            await asyncio.to_thread(save, self.path, snapshot)
        except OSError as exc:
            logger.exception("could not write quotes file %s", self.path)
            raise StorageError(f"could not write {self.path}") from exc
        self._quotes = snapshot

    async def list_quotes(self) -> list[Quote]:
        await self.initialize()
        return newest_first(self._quotes.values())

    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        await self.initialize()
        return self._quotes.get(quote_id)

    async def create_quote(self, payload: QuoteCreate) -> Quote:
        await self.initialize()
        async with self._lock:
            quote = build_quote(payload)
            while quote.id in self._quotes:
                quote = replace(quote, id=new_quote_id())
            snapshot = dict(self._quotes)
            snapshot[quote.id] = quote
            await self._persist(snapshot)
        logger.info("created quote %s", quote.id)
        return quote

    async def update_quote(self, quote_id: str, changes: dict) -> Optional[Quote]:
        await self.initialize()
        async with self._lock:
            current = self._quotes.get(quote_id)
            if current is None:
                return None
            merged = replace(current, **changes)
            snapshot = dict(self._quotes)
            snapshot[quote_id] = merged
            await self._persist(snapshot)
        logger.info("updated quote %s (%s)", quote_id, ", ".join(sorted(changes)) or "no fields")
        return merged

    async def delete_quote(self, quote_id: str) -> bool:
        await self.initialize()
        async with self._lock:
            if quote_id not in self._quotes:
                return False
            snapshot = dict(self._quotes)
            del snapshot[quote_id]
            await self._persist(snapshot)
        logger.info("deleted quote %s", quote_id)
        return True
