"""Error taxonomy shared by validation, services and storage backends."""
from __future__ import annotations


class QuoteError(Exception):
    def __init__(self, message: str, code: str = "invalid", status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ValidationError(QuoteError):
    """Raised when caller input violates one or more field constraints."""

    def __init__(self, errors: list[dict]):
        self.errors = list(errors)
        message = "; ".join(f"{err['field']}: {err['message']}" for err in self.errors)
        super().__init__(message or "invalid input", "invalid", 400)


class NotFoundError(QuoteError):
    """Raised when the target quote id does not exist."""

    def __init__(self, quote_id: str):
        super().__init__(f"Quote {quote_id} not found", "not_found", 404)
        self.quote_id = quote_id


class StorageError(QuoteError):
    """Raised when the persistence medium (disk, database) fails."""

    def __init__(self, message: str):
        super().__init__(message, "storage_error", 500)
