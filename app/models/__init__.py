# app/models/__init__.py

from app.models.movement import (
    Concept,
    ExpenseLedgerEntry,
    Movement,
    MovementCreate,
)
from app.models.raw_rows import (
    BankId,
    CaixabankRow,
    SantanderRow,
    RawRow,
    REQUIRED_COLUMNS,
    OPTIONAL_COLUMNS,
)
from app.models.ingestion import (
    BatchResult,
    BatchStatus,
    BatchSummary,
    ErrorCode,
    FileOutcome,
    FileResult,
    RowError,
)
from app.models.review import (
    ReviewCommitResult,
    ReviewDecision,
    ReviewItemResult,
    ReviewRequest,
    ReviewStatus,
)

__all__ = [
    # Movement
    "Concept",
    "ExpenseLedgerEntry",
    "Movement",
    "MovementCreate",
    # Raw rows
    "BankId",
    "CaixabankRow",
    "SantanderRow",
    "RawRow",
    "REQUIRED_COLUMNS",
    "OPTIONAL_COLUMNS",
    # Ingestion
    "BatchResult",
    "BatchStatus",
    "BatchSummary",
    "ErrorCode",
    "FileOutcome",
    "FileResult",
    "RowError",
    # Review
    "ReviewCommitResult",
    "ReviewDecision",
    "ReviewItemResult",
    "ReviewRequest",
    "ReviewStatus",
]
