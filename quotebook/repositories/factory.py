"""Select the storage backend from configuration at startup."""
from __future__ import annotations

from quotebook.core.config import Settings, get_settings
from quotebook.repositories.base import QuoteRepository
from quotebook.repositories.json_storage import JsonQuoteRepository
from quotebook.repositories.memory import MemoryQuoteRepository
from quotebook.repositories.sql_repository import SQLQuoteRepository


def build_repository(settings: Settings | None = None) -> QuoteRepository:
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryQuoteRepository(seed=settings.seed_on_empty)
    if backend == "file":
        return JsonQuoteRepository(settings.quotes_file, seed=settings.seed_on_empty)
    if backend == "sql":
        return SQLQuoteRepository(seed=settings.seed_on_empty)
    raise ValueError(f"Unknown storage backend: {backend}")
