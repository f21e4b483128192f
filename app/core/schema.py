# app/core/schema.py

"""
Structural gate for uploaded statements.

Checks the header of a parsed sheet against the bank's required columns
before any row is transformed.
"""

from typing import Any, Mapping

from app.core.errors import SchemaValidationError
from app.models.raw_rows import REQUIRED_COLUMNS


def missing_columns(bank: str, first_row: Mapping[str, Any]) -> list[str]:
    """Required columns absent from `first_row`, in declared order."""
    try:
        required = REQUIRED_COLUMNS[bank]
    except KeyError:
        raise ValueError(f"Unknown bank: {bank}") from None
    return [col for col in required if col not in first_row]


def validate_schema(bank: str, first_row: Mapping[str, Any]) -> None:
    """Raise SchemaValidationError if any required column is missing."""
    missing = missing_columns(bank, first_row)
    if missing:
        raise SchemaValidationError(bank, missing)
