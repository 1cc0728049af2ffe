#!/usr/bin/env python3
"""
Copy the quote JSON document into the SQL table, keeping ids.

Usage:
  DATABASE_URL=postgresql+asyncpg://... python scripts/migrate_json_to_sql.py [--file data/quotes.json]
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quotebook.core.config import get_settings
from quotebook.core.errors import StorageError
from quotebook.core.logging import configure_logging
from quotebook.repositories.json_storage import load
from quotebook.repositories.sql_repository import SQLQuoteRepository


async def migrate(path: Path) -> int:
    try:
        quotes = load(path)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise SystemExit(f"Could not read {path}: {exc}") from exc
    if quotes is None:
        raise SystemExit(f"File not found: {path}")
    repo = SQLQuoteRepository(seed=False)
    try:
        return await repo.import_quotes(quotes.values())
    finally:
        await repo.close()


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Migrate quotes from the JSON file into the SQL table")
    ap.add_argument("--file", default=str(settings.quotes_file), help="Path to the quotes JSON document")
    args = ap.parse_args()

    configure_logging(settings.log_level)
    try:
        imported = asyncio.run(migrate(Path(args.file)))
    except StorageError as exc:
        raise SystemExit(f"Migration failed: {exc.message}") from exc
    print(f"OK: {imported} quotes imported")


if __name__ == "__main__":
    main()
