# app/core/__init__.py

from app.core.adapters import (
    BankAdapter,
    CaixabankAdapter,
    SantanderAdapter,
    TransformResult,
    detect_bank,
    get_adapter,
)
from app.core.classification import classify
from app.core.ingestion import IngestionPipeline
from app.core.normalizers import (
    parse_amount,
    parse_amount_strict,
    parse_date,
    parse_date_strict,
    truncate,
)
from app.core.review import ReviewEngine, build_ledger_entry
from app.core.schema import missing_columns, validate_schema

__all__ = [
    "BankAdapter",
    "CaixabankAdapter",
    "SantanderAdapter",
    "TransformResult",
    "detect_bank",
    "get_adapter",
    "classify",
    "IngestionPipeline",
    "parse_amount",
    "parse_amount_strict",
    "parse_date",
    "parse_date_strict",
    "truncate",
    "ReviewEngine",
    "build_ledger_entry",
    "missing_columns",
    "validate_schema",
]
