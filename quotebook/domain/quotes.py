"""Quote entity and the validation boundary for insert/update payloads."""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from quotebook.core.errors import ValidationError

QUOTE_FIELDS = ("name", "text", "type", "timestamp")

# signed 64-bit epoch milliseconds, the range every backend can store
TIMESTAMP_MIN = -(2**63)
TIMESTAMP_MAX = 2**63 - 1


class QuoteType(str, Enum):
    """Speaker role, used for classification and filtering only."""

    TEACHER = "Teacher"
    STUDENT = "Student"
    NONE = "None"


def now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Quote:
    id: str
    name: str
    text: str
    type: QuoteType
    timestamp: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Quote":
        """Build a Quote from a persisted record; raises KeyError/ValueError/TypeError when malformed."""
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            text=str(data["text"]),
            type=QuoteType(data.get("type") or QuoteType.NONE.value),
            timestamp=int(data["timestamp"]),
        )


class QuoteCreate(BaseModel):
    """Insert payload. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(min_length=1)
    text: StrictStr = Field(min_length=1)
    type: QuoteType = QuoteType.NONE
    timestamp: StrictInt = Field(default_factory=now_ms, ge=TIMESTAMP_MIN, le=TIMESTAMP_MAX)


class QuoteUpdate(BaseModel):
    """Partial update payload: only keys present in the input are validated and applied."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = Field(None, min_length=1)
    text: Optional[StrictStr] = Field(None, min_length=1)
    type: Optional[QuoteType] = None
    timestamp: Optional[StrictInt] = Field(None, ge=TIMESTAMP_MIN, le=TIMESTAMP_MAX)

    @field_validator("name", "text", "type", "timestamp", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # runs only for keys the caller actually sent
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


def _field_errors(exc: PydanticValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.append({"field": field, "message": err.get("msg", "invalid value")})
    return errors


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError([{"field": "body", "message": "expected a JSON object"}])
    return payload


def validate_create(payload: Any) -> QuoteCreate:
    """Admit an untrusted input bag as an insert payload or raise ValidationError listing every violation."""
    data = _require_object(payload)
    try:
        return QuoteCreate.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors(exc)) from exc


def validate_update(payload: Any) -> dict:
    """Return only the supplied, valid fields of an update as a dict of changes."""
    data = _require_object(payload)
    try:
        return QuoteUpdate.model_validate(data).changes()
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors(exc)) from exc


def new_quote_id() -> str:
    return str(uuid.uuid4())


def build_quote(payload: QuoteCreate) -> Quote:
    """Turn a validated insert payload into a Quote with a fresh id."""
    return Quote(
        id=new_quote_id(),
        name=payload.name,
        text=payload.text,
        type=payload.type,
        timestamp=payload.timestamp,
    )


def newest_first(quotes: Iterable[Quote]) -> list[Quote]:
    return sorted(quotes, key=lambda q: q.timestamp, reverse=True)
