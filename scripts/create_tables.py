"""Create the quotes table on DATABASE_URL (no seeding)."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.exc import SQLAlchemyError

from quotebook.core.config import get_settings
from quotebook.core.logging import configure_logging
from quotebook.db import models  # noqa: F401  # ensure models are imported for metadata
from quotebook.db.session import Base, get_engine


async def create_all() -> None:
    engine = get_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    try:
        asyncio.run(create_all())
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
