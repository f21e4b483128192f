# app/models/review.py

from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

from app.models.movement import UNCATEGORIZED, Movement


ReviewStatus = Literal["reviewed", "skipped", "stale", "failed"]


class ReviewDecision(BaseModel):
    """A reviewer's choice for one pending movement."""

    movement_id: int
    category: Optional[int] = None
    mark_reviewed: bool = True
    version: Optional[int] = Field(
        default=None,
        description="Version the reviewer saw; defaults to the stored one",
    )

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_eligible(self) -> bool:
        return self.mark_reviewed and self.category not in (None, UNCATEGORIZED)


class ReviewRequest(BaseModel):
    decisions: list[ReviewDecision]


class ReviewItemResult(BaseModel):
    """Outcome for a single movement in a review commit."""

    movement_id: int
    status: ReviewStatus
    category: Optional[int] = None
    promoted: bool = False
    ledger_entry_id: Optional[int] = None
    error: Optional[str] = None


class ReviewCommitResult(BaseModel):
    """Result of committing a batch of review decisions."""

    success: bool
    reviewed: int
    promoted: int
    skipped: int
    stale: int
    failed: int
    results: list[ReviewItemResult]
    pending: list[Movement] = Field(default_factory=list)
    # False when the pending list could not be re-fetched after the writes
    pending_refreshed: bool = True

    @classmethod
    def from_items(
        cls,
        items: list[ReviewItemResult],
        pending: Optional[list[Movement]],
    ) -> "ReviewCommitResult":
        counts = {status: 0 for status in ("reviewed", "skipped", "stale", "failed")}
        for item in items:
            counts[item.status] += 1
        return cls(
            success=counts["stale"] == 0 and counts["failed"] == 0,
            promoted=sum(1 for i in items if i.promoted),
            results=items,
            pending=pending or [],
            pending_refreshed=pending is not None,
            **counts,
        )
