# app/core/errors.py

"""
Error taxonomy for ingestion and review.

Ingestion errors carry a stable code that is surfaced per file; they never
escape the per-file loop.
"""

from typing import Optional


class IngestionError(Exception):
    """Base class for errors that fail a single uploaded file."""

    code = "PROCESSING_ERROR"
    outcome = "processing_failed"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class FileValidationError(IngestionError):
    """Upload rejected before parsing (type, size or unknown bank)."""

    def __init__(self, code: str, outcome: str, message: str, details: Optional[str] = None):
        super().__init__(message, details)
        self.code = code
        self.outcome = outcome


class SpreadsheetParseError(IngestionError):
    code = "EMPTY_FILE"
    outcome = "parse_empty"


class SchemaValidationError(IngestionError):
    code = "MISSING_COLUMNS"
    outcome = "schema_invalid"

    def __init__(self, bank: str, missing: list[str]):
        super().__init__(
            f"Missing required columns for {bank}",
            f"Faltan columnas requeridas: {', '.join(missing)}",
        )
        self.bank = bank
        self.missing = missing


class TransformError(IngestionError):
    code = "TRANSFORM_ERROR"
    outcome = "transform_empty"


class StoreError(Exception):
    """The data store rejected an insert, update or query."""


class StaleReviewError(Exception):
    """A review decision was made against an outdated Movement."""


class LocaleParseError(ValueError):
    """A non-empty date or amount could not be parsed."""

    def __init__(self, field: str, raw):
        super().__init__(f"Unparseable {field}: {raw!r}")
        self.field = field
        self.raw = raw
