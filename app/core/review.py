# app/core/review.py

"""
Review engine.

Moves movements from pending to reviewed with the category chosen by the
reviewer, and mirrors reviewed expenses into the expense ledger.

For each movement the ledger insert and the movement update form one unit:
the ledger entry is written first, the movement update is guarded by the
movement's version, and if the update does not go through the ledger entry
is deleted again.
"""

import asyncio
import logging

from app.core.errors import StaleReviewError, StoreError
from app.core.stores import ConceptCatalog, ExpenseLedgerStore, MovementStore
from app.models import (
    Concept,
    ExpenseLedgerEntry,
    Movement,
    ReviewCommitResult,
    ReviewDecision,
    ReviewItemResult,
)

logger = logging.getLogger(__name__)


def build_ledger_entry(movement: Movement, category: int) -> ExpenseLedgerEntry:
    """Ledger entry for a reviewed expense, dated by its value date."""
    booked = movement.value_date or movement.operation_date
    if booked is None:
        raise ValueError(f"Movement {movement.id} has no date to book it under")

    return ExpenseLedgerEntry(
        year=booked.year,
        month=booked.month,
        description=movement.description,
        amount=movement.amount,
        category=category,
        reviewed=True,
        movement_id=movement.id,
    )


class ReviewEngine:
    """Human-in-the-loop review of imported movements."""

    def __init__(
        self,
        movements: MovementStore,
        ledger: ExpenseLedgerStore,
        concepts: ConceptCatalog,
    ):
        self.movements = movements
        self.ledger = ledger
        self.concepts = concepts

    async def list_pending(self, expenses_only: bool = True) -> list[Movement]:
        return await self.movements.query_unreviewed(expenses_only=expenses_only)

    async def list_concepts(self) -> list[Concept]:
        return await self.concepts.list_ordered_by_label()

    async def commit(
        self,
        decisions: list[ReviewDecision],
        expenses_only: bool = True,
    ) -> ReviewCommitResult:
        """
        Apply review decisions.

        Only decisions marked reviewed and carrying a category are applied;
        the rest are reported as skipped. Eligible movements are processed
        concurrently. The pending list is re-fetched afterwards; if that
        fails the results are still returned, flagged with
        `pending_refreshed=False`.
        """
        seen: set[int] = set()
        eligible: list[ReviewDecision] = []
        for decision in decisions:
            if decision.is_eligible and decision.movement_id not in seen:
                eligible.append(decision)
                seen.add(decision.movement_id)

        outcomes = iter(await asyncio.gather(*(self._review_one(d) for d in eligible)))
        eligible_ids = {id(d) for d in eligible}

        items = []
        for decision in decisions:
            if id(decision) in eligible_ids:
                items.append(next(outcomes))
            else:
                items.append(
                    ReviewItemResult(
                        movement_id=decision.movement_id,
                        status="skipped",
                        category=decision.category,
                    )
                )

        # The writes above are already applied; a failed re-fetch must not hide them
        try:
            pending = await self.list_pending(expenses_only=expenses_only)
        except StoreError as e:
            logger.error("Could not re-fetch pending movements after commit: %s", e)
            pending = None

        result = ReviewCommitResult.from_items(items, pending)

        logger.info(
            "Review commit: %d reviewed, %d promoted, %d skipped, %d stale, %d failed",
            result.reviewed,
            result.promoted,
            result.skipped,
            result.stale,
            result.failed,
        )
        return result

    async def _review_one(self, decision: ReviewDecision) -> ReviewItemResult:
        movement_id = decision.movement_id
        category = decision.category

        try:
            movement = await self.movements.get_by_id(movement_id)
            if movement is None:
                raise StaleReviewError(f"Movement {movement_id} not found")
            if movement.reviewed:
                raise StaleReviewError(f"Movement {movement_id} is already reviewed")

            expected = decision.version if decision.version is not None else movement.version
            if movement.version != expected:
                raise StaleReviewError(
                    f"Movement {movement_id} changed since it was listed "
                    f"(version {movement.version}, expected {expected})"
                )

            entry = None
            if movement.is_expense:
                entry = await self.ledger.insert(build_ledger_entry(movement, category))

            try:
                updated = await self.movements.update_by_id(
                    movement_id,
                    {"reviewed": True, "category": category, "version": expected + 1},
                    expected_version=expected,
                )
                if updated is None:
                    raise StaleReviewError(f"Movement {movement_id} changed while committing")
            except (StoreError, StaleReviewError):
                if entry is not None:
                    await self._compensate(entry)
                raise

        except StaleReviewError as e:
            logger.warning("Stale review rejected: %s", e)
            return ReviewItemResult(
                movement_id=movement_id,
                status="stale",
                category=category,
                error=str(e),
            )
        except (StoreError, ValueError) as e:
            logger.error("Review of movement %s failed: %s", movement_id, e)
            return ReviewItemResult(
                movement_id=movement_id,
                status="failed",
                category=category,
                error=str(e),
            )

        return ReviewItemResult(
            movement_id=movement_id,
            status="reviewed",
            category=category,
            promoted=entry is not None,
            ledger_entry_id=entry.id if entry is not None else None,
        )

    async def _compensate(self, entry: ExpenseLedgerEntry) -> None:
        """Undo a ledger insert whose movement update did not go through."""
        try:
            await self.ledger.delete(entry.id)
        except StoreError:
            logger.exception(
                "Could not delete ledger entry %s for movement %s; it is orphaned",
                entry.id,
                entry.movement_id,
            )
            raise
