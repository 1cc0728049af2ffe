from __future__ import annotations

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Make the quotebook package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quotebook.core import config as core_config  # noqa: E402
from quotebook.db import session as db_session  # noqa: E402
from quotebook.repositories.json_storage import JsonQuoteRepository  # noqa: E402
from quotebook.repositories.memory import MemoryQuoteRepository  # noqa: E402
from quotebook.repositories.sql_repository import SQLQuoteRepository  # noqa: E402


@pytest.fixture()
def sql_env(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()

    yield db_file

    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()


def make_repository(kind: str, tmp_path: Path, *, seed: bool = False):
    if kind == "memory":
        return MemoryQuoteRepository(seed=seed)
    if kind == "file":
        return JsonQuoteRepository(tmp_path / "data" / "quotes.json", seed=seed)
    return SQLQuoteRepository(seed=seed)


@pytest_asyncio.fixture(params=["memory", "file", "sql"])
async def repository(request, tmp_path, sql_env):
    repo = make_repository(request.param, tmp_path)
    await repo.initialize()
    yield repo
    await repo.close()
