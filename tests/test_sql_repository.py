"""
SQL backend specifics against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from quotebook.core.errors import StorageError
from quotebook.db.session import Base
from quotebook.domain.quotes import Quote, QuoteCreate, QuoteType
from quotebook.domain.seed import SEED_QUOTES
from quotebook.repositories.sql_repository import SQLQuoteRepository


@pytest.mark.asyncio
async def test_seed_is_not_duplicated_after_restart(sql_env):
    repo = SQLQuoteRepository()
    try:
        seeded = await repo.list_quotes()
        assert [q.name for q in seeded] == ["Sarah Jenkins", "Herr Müller"]
        await repo.create_quote(QuoteCreate(name="Real", text="quote", timestamp=1))
    finally:
        await repo.close()

    restarted = SQLQuoteRepository()
    try:
        quotes = await restarted.list_quotes()
    finally:
        await restarted.close()
    assert len(quotes) == len(SEED_QUOTES) + 1
    assert sum(1 for q in quotes if q.name == "Herr Müller") == 1


@pytest.mark.asyncio
async def test_import_keeps_ids_and_skips_existing(sql_env):
    repo = SQLQuoteRepository(seed=False)
    incoming = [
        Quote(id="a", name="A", text="first", type=QuoteType.TEACHER, timestamp=2),
        Quote(id="b", name="B", text="second", type=QuoteType.NONE, timestamp=1),
    ]
    try:
        assert await repo.import_quotes(incoming) == 2
        assert await repo.import_quotes(incoming) == 0
        assert await repo.get_quote("a") == incoming[0]
        assert await repo.list_quotes() == incoming
    finally:
        await repo.close()


@pytest.mark.asyncio
async def test_backend_failure_surfaces_as_storage_error(sql_env):
    repo = SQLQuoteRepository(seed=False)
    try:
        await repo.initialize()
        async with repo.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        with pytest.raises(StorageError):
            await repo.list_quotes()
        with pytest.raises(StorageError):
            await repo.create_quote(QuoteCreate(name="x", text="y", timestamp=1))
    finally:
        await repo.close()


def test_missing_database_url_is_a_configuration_error(monkeypatch):
    from quotebook.core import config as core_config
    from quotebook.db import session as db_session

    monkeypatch.delenv("DATABASE_URL", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    try:
        with pytest.raises(RuntimeError):
            SQLQuoteRepository().engine
    finally:
        core_config.get_settings.cache_clear()
        db_session.get_engine.cache_clear()
