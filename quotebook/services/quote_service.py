"""Quote use cases: validate at the boundary, delegate to the backend."""
from __future__ import annotations

from typing import Any, Optional

from quotebook.core.errors import NotFoundError
from quotebook.domain.filters import QuoteFilters, visible_quotes
from quotebook.domain.quotes import Quote, validate_create, validate_update
from quotebook.repositories.base import QuoteRepository


class QuoteService:
    def __init__(self, repository: QuoteRepository) -> None:
        self.repository = repository

    async def list_quotes(self, filters: Optional[QuoteFilters] = None) -> list[Quote]:
        quotes = await self.repository.list_quotes()
        if filters is None:
            return list(quotes)
        return visible_quotes(quotes, filters)

    async def get_quote(self, quote_id: str) -> Quote:
        quote = await self.repository.get_quote(quote_id)
        if quote is None:
            raise NotFoundError(quote_id)
        return quote

    async def create_quote(self, payload: Any) -> Quote:
        data = validate_create(payload)
        return await self.repository.create_quote(data)

    async def update_quote(self, quote_id: str, payload: Any) -> Quote:
        changes = validate_update(payload)
        quote = await self.repository.update_quote(quote_id, changes)
        if quote is None:
            raise NotFoundError(quote_id)
        return quote

    async def delete_quote(self, quote_id: str) -> None:
        if not await self.repository.delete_quote(quote_id):
            raise NotFoundError(quote_id)
