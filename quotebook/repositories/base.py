"""Capability contract every quote storage backend satisfies."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from quotebook.domain.quotes import Quote, QuoteCreate


@runtime_checkable
class QuoteRepository(Protocol):
    """
    Async persistence contract.

    Payloads arrive already validated. Mutations are durable before they
    return. Medium failures raise StorageError; a missing id is reported
    through the return value (None / False), never as an exception.
    """

    kind: str

    async def initialize(self) -> None: ...

    async def close(self) -> None: ...

    async def list_quotes(self) -> Sequence[Quote]: ...

    async def get_quote(self, quote_id: str) -> Optional[Quote]: ...

    async def create_quote(self, payload: QuoteCreate) -> Quote: ...

    async def update_quote(self, quote_id: str, changes: dict) -> Optional[Quote]: ...

    async def delete_quote(self, quote_id: str) -> bool: ...
