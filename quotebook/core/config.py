"""
Configuration helpers for the Quotebook backend.

Settings are read from environment variables once and cached, so routers,
services and repositories never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

STORAGE_BACKENDS = ("memory", "file", "sql")
DEFAULT_QUOTES_FILE = Path(__file__).resolve().parents[2] / "data" / "quotes.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    storage_backend: str
    quotes_file: Path
    database_url: str
    seed_on_empty: bool
    admin_token: str
    log_level: str
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        return default

    backend = (os.getenv("STORAGE_BACKEND") or "file").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}")

    quotes_file = (os.getenv("QUOTES_FILE") or "").strip()

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        storage_backend=backend,
        quotes_file=Path(quotes_file) if quotes_file else DEFAULT_QUOTES_FILE,
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        seed_on_empty=_bool(os.getenv("SEED_ON_EMPTY"), True),
        admin_token=(os.getenv("ADMIN_TOKEN") or "").strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        host=(os.getenv("HOST") or "127.0.0.1").strip(),
        port=_int(os.getenv("PORT"), 8000),
    )
