from __future__ import annotations

import pytest

from quotebook.core import config as core_config
from quotebook.repositories.factory import build_repository
from quotebook.repositories.json_storage import JsonQuoteRepository
from quotebook.repositories.memory import MemoryQuoteRepository
from quotebook.repositories.sql_repository import SQLQuoteRepository


@pytest.fixture()
def fresh_settings():
    core_config.get_settings.cache_clear()
    yield core_config.get_settings
    core_config.get_settings.cache_clear()


def test_defaults(monkeypatch, fresh_settings):
    for var in ("APP_ENV", "STORAGE_BACKEND", "QUOTES_FILE", "SEED_ON_EMPTY", "ADMIN_TOKEN", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = fresh_settings()
    assert settings.app_env == "dev"
    assert settings.storage_backend == "file"
    assert settings.quotes_file == core_config.DEFAULT_QUOTES_FILE
    assert settings.seed_on_empty is True
    assert settings.admin_token == ""
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch, tmp_path, fresh_settings):
    monkeypatch.setenv("STORAGE_BACKEND", " SQL ")
    monkeypatch.setenv("QUOTES_FILE", str(tmp_path / "q.json"))
    monkeypatch.setenv("SEED_ON_EMPTY", "no")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://zitate.example/")
    settings = fresh_settings()
    assert settings.storage_backend == "sql"
    assert settings.quotes_file == tmp_path / "q.json"
    assert settings.seed_on_empty is False
    assert settings.public_base_url == "https://zitate.example"


def test_unknown_backend_is_rejected(monkeypatch, fresh_settings):
    monkeypatch.setenv("STORAGE_BACKEND", "redis")
    with pytest.raises(ValueError):
        fresh_settings()


@pytest.mark.parametrize(
    "backend, expected",
    [("memory", MemoryQuoteRepository), ("file", JsonQuoteRepository), ("sql", SQLQuoteRepository)],
)
def test_factory_selects_backend(monkeypatch, tmp_path, fresh_settings, backend, expected):
    monkeypatch.setenv("STORAGE_BACKEND", backend)
    monkeypatch.setenv("QUOTES_FILE", str(tmp_path / "q.json"))
    repo = build_repository(fresh_settings())
    assert isinstance(repo, expected)
    assert repo.kind == backend


@pytest.mark.parametrize("raw, expected", [("maybe", True), ("", True), ("off", False), ("0", False), ("YES", True)])
def test_seed_flag_falls_back_to_default_when_malformed(monkeypatch, fresh_settings, raw, expected):
    monkeypatch.setenv("SEED_ON_EMPTY", raw)
    assert fresh_settings().seed_on_empty is expected


def test_port_falls_back_to_default_when_malformed(monkeypatch, fresh_settings):
    monkeypatch.setenv("PORT", "abc")
    monkeypatch.setenv("HOST", "0.0.0.0")
    settings = fresh_settings()
    assert settings.port == 8000
    assert settings.host == "0.0.0.0"


def test_port_from_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("PORT", "9001")
    assert fresh_settings().port == 9001
