"""
Persistence adapters.

Three interchangeable quote backends (memory, JSON file, SQL table) behind
the QuoteRepository contract. Services depend on the contract, never on a
concrete backend.
"""

from .base import QuoteRepository
from .factory import build_repository
from .json_storage import JsonQuoteRepository
from .memory import MemoryQuoteRepository
from .sql_repository import SQLQuoteRepository

__all__ = [
    "QuoteRepository",
    "build_repository",
    "JsonQuoteRepository",
    "MemoryQuoteRepository",
    "SQLQuoteRepository",
]
