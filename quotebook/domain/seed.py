"""Bootstrap data for empty stores and the client snapshot reconciliation rule."""
from __future__ import annotations

from typing import Optional, Sequence

from quotebook.domain.quotes import Quote, QuoteCreate, QuoteType, now_ms

# (name, text, type, age in ms); the Teacher example is the older one
SEED_QUOTES = (
    (
        "Herr Müller",
        "Geschichte besteht nicht nur aus Daten und Namen, sie ist der Klatsch der Vergangenheit.",
        QuoteType.TEACHER,
        100_000_000,
    ),
    (
        "Sarah Jenkins",
        "Können wir heute bitte draußen Unterricht machen? Die Sonne ruft förmlich meinen Namen.",
        QuoteType.STUDENT,
        50_000_000,
    ),
)


def seed_payloads(now: Optional[int] = None) -> list[QuoteCreate]:
    reference = now_ms() if now is None else now
    return [
        QuoteCreate(name=name, text=text, type=quote_type, timestamp=reference - age)
        for name, text, quote_type, age in SEED_QUOTES
    ]


def reconcile_snapshot(cached: Sequence[Quote], fetched: Sequence[Quote]) -> list[Quote]:
    """
    Last-write-wins per snapshot: an empty cache adopts the fetched set,
    otherwise the cache stays authoritative. No per-record merge happens, so
    edits made by another client since the cache was written are not visible
    until the next successful mutation round-trip.
    """
    if not cached:
        return list(fetched)
    return list(cached)
