# app/models/ingestion.py

from typing import Optional, Literal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


# ============================================
# Per-file outcome
# ============================================

FileOutcome = Literal[
    "committed",
    "type_rejected",
    "size_rejected",
    "bank_unrecognized",
    "schema_invalid",
    "parse_empty",
    "transform_empty",
    "store_failed",
    "processing_failed",
]

ErrorCode = Literal[
    "NO_FILES",
    "INVALID_FILE_TYPE",
    "FILE_TOO_LARGE",
    "EMPTY_FILE",
    "UNKNOWN_BANK_TYPE",
    "MISSING_COLUMNS",
    "TRANSFORM_ERROR",
    "PROCESSING_ERROR",
]

BatchStatus = Literal["success", "partial", "failure"]


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RowError(_CamelModel):
    """A source row that was dropped during transformation."""

    row: int = Field(description="Spreadsheet row number (header is row 1)")
    reason: str


class FileResult(_CamelModel):
    """Outcome of ingesting one uploaded file."""

    filename: str
    success: bool
    outcome: FileOutcome
    bank: Optional[str] = None
    records_processed: Optional[int] = None
    rows_skipped: int = 0
    row_errors: list[RowError] = Field(default_factory=list)

    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None
    details: Optional[str] = None
    missing_columns: Optional[list[str]] = None


class BatchSummary(_CamelModel):
    total_success: int
    total_errors: int


class BatchResult(_CamelModel):
    """Aggregated result of one upload request."""

    success: bool
    processed_files: int
    results: list[FileResult]
    summary: BatchSummary

    @classmethod
    def from_results(cls, results: list[FileResult]) -> "BatchResult":
        ok = sum(1 for r in results if r.success)
        return cls(
            success=bool(results) and ok == len(results),
            processed_files=len(results),
            results=results,
            summary=BatchSummary(total_success=ok, total_errors=len(results) - ok),
        )

    @property
    def status(self) -> BatchStatus:
        if self.summary.total_success == 0:
            return "failure"
        if self.summary.total_errors == 0:
            return "success"
        return "partial"

    @property
    def http_status(self) -> int:
        return {"success": 200, "partial": 207, "failure": 400}[self.status]

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
