"""Process-lifetime quote store backed by a plain dict."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Optional

from quotebook.domain.quotes import Quote, QuoteCreate, build_quote, new_quote_id, newest_first
from quotebook.domain.seed import seed_payloads

logger = logging.getLogger(__name__)


class MemoryQuoteRepository:
    """Ephemeral backend, seeded at construction unless ``seed=False``."""

    kind = "memory"

    def __init__(self, *, seed: bool = True) -> None:
        self._quotes: dict[str, Quote] = {}
        self._lock = asyncio.Lock()
        if seed:
            for payload in seed_payloads():
                quote = build_quote(payload)
                self._quotes[quote.id] = quote
        logger.info("memory backend ready with %d quotes", len(self._quotes))

    async def initialize(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def list_quotes(self) -> list[Quote]:
        return newest_first(self._quotes.values())

    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        return self._quotes.get(quote_id)

    async def create_quote(self, payload: QuoteCreate) -> Quote:
        async with self._lock:
            quote = build_quote(payload)
            while quote.id in self._quotes:
                quote = replace(quote, id=new_quote_id())
            self._quotes[quote.id] = quote
        logger.info("created quote %s", quote.id)
        return quote

    async def update_quote(self, quote_id: str, changes: dict) -> Optional[Quote]:
        async with self._lock:
            current = self._quotes.get(quote_id)
            if current is None:
                return None
            merged = replace(current, **changes)
            self._quotes[quote_id] = merged
        logger.info("updated quote %s (%s)", quote_id, ", ".join(sorted(changes)) or "no fields")
        return merged

    async def delete_quote(self, quote_id: str) -> bool:
        async with self._lock:
            removed = self._quotes.pop(quote_id, None)
        if removed is not None:
            logger.info("deleted quote %s", quote_id)
        return removed is not None
