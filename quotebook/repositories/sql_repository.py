"""Quote backend on a relational table, one statement per operation."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from quotebook.core.errors import StorageError
from quotebook.db.models import QuoteRow
from quotebook.db.session import Base, get_engine, get_sessionmaker
from quotebook.domain.quotes import Quote, QuoteCreate, QuoteType, new_quote_id
from quotebook.domain.seed import seed_payloads

logger = logging.getLogger(__name__)

_COLUMNS = (QuoteRow.id, QuoteRow.name, QuoteRow.text, QuoteRow.type, QuoteRow.timestamp)


def _to_quote(row) -> Quote:
    return Quote(
        id=row.id,
        name=row.name,
        text=row.text,
        type=QuoteType(row.type),
        timestamp=int(row.timestamp),
    )


def _row_values(values: dict) -> dict:
    out = dict(values)
    if "type" in out:
        out["type"] = QuoteType(out["type"]).value
    return out


class SQLQuoteRepository:
    """CRUD helpers over the ``quotes`` table using an async SQLAlchemy session."""

    kind = "sql"

    def __init__(self, engine: AsyncEngine | None = None, *, seed: bool = True) -> None:
        self._engine = engine
        self._sessions = None
        self._seed = seed
        self._ready = False
        self._init_lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def _session(self):
        if self._sessions is None:
            self._sessions = get_sessionmaker(self.engine)
        return self._sessions()

    @asynccontextmanager
    async def _guard(self, action: str):
        try:
            yield
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("database error during %s", action)
            raise StorageError(f"database error during {action}") from exc

    async def initialize(self) -> None:
        if self._ready:
            return
        async with self._init_lock, self._guard("initialize"):
            if self._ready:
                return
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            async with self._session() as session:
                count = (await session.execute(select(func.count()).select_from(QuoteRow))).scalar_one()
                if count == 0 and self._seed:
                    payloads = seed_payloads()
                    for payload in payloads:
                        await session.execute(insert(QuoteRow).values(id=new_quote_id(), **_row_values(payload.model_dump())))
                    await session.commit()
                    logger.info("sql backend seeded %d quotes", len(payloads))
                else:
                    logger.info("sql backend ready with %d quotes", count)
            self._ready = True

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def list_quotes(self) -> list[Quote]:
        await self.initialize()
        async with self._guard("list"):
            async with self._session() as session:
                result = await session.execute(select(*_COLUMNS).order_by(QuoteRow.timestamp.desc()))
                return [_to_quote(row) for row in result.all()]

    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        await self.initialize()
        async with self._guard("get"):
            async with self._session() as session:
                result = await session.execute(select(*_COLUMNS).where(QuoteRow.id == quote_id))
                row = result.first()
        return _to_quote(row) if row is not None else None

    async def create_quote(self, payload: QuoteCreate) -> Quote:
        await self.initialize()
        stmt = (
            insert(QuoteRow)
            .values(id=new_quote_id(), **_row_values(payload.model_dump()))
            .returning(*_COLUMNS)
        )
        async with self._guard("create"):
            async with self._session() as session:
                row = (await session.execute(stmt)).one()
                await session.commit()
        quote = _to_quote(row)
        logger.info("created quote %s", quote.id)
        return quote

    async def update_quote(self, quote_id: str, changes: dict) -> Optional[Quote]:
        if not changes:
            return await self.get_quote(quote_id)
        await self.initialize()
        stmt = (
            update(QuoteRow)
            .where(QuoteRow.id == quote_id)
            .values(**_row_values(changes))
            .returning(*_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        async with self._guard("update"):
            async with self._session() as session:
                row = (await session.execute(stmt)).first()
                await session.commit()
        if row is None:
            return None
        logger.info("updated quote %s (%s)", quote_id, ", ".join(sorted(changes)))
        return _to_quote(row)

    async def delete_quote(self, quote_id: str) -> bool:
        await self.initialize()
        stmt = delete(QuoteRow).where(QuoteRow.id == quote_id).execution_options(synchronize_session=False)
        async with self._guard("delete"):
            async with self._session() as session:
                result = await session.execute(stmt)
                await session.commit()
        deleted = bool(result.rowcount)
        if deleted:
            logger.info("deleted quote %s", quote_id)
        return deleted

    async def import_quotes(self, quotes) -> int:
        """Insert existing quotes keeping their ids; rows already present are skipped."""
        await self.initialize()
        imported = 0
        async with self._guard("import"):
            async with self._session() as session:
                existing = set((await session.execute(select(QuoteRow.id))).scalars().all())
                for quote in quotes:
                    if quote.id in existing:
                        continue
                    await session.execute(insert(QuoteRow).values(**quote.to_dict()))
                    existing.add(quote.id)
                    imported += 1
                await session.commit()
        logger.info("imported %d quotes", imported)
        return imported
