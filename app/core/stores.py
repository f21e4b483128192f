# app/core/stores.py

"""
Store interfaces consumed by the ingestion pipeline and review engine.

Implementations live in app.database (Supabase) and in the test suite
(in-memory). Every method raises StoreError when the store rejects the call.
"""

from typing import Any, Optional, Protocol

from app.models import Concept, ExpenseLedgerEntry, Movement, MovementCreate


class MovementStore(Protocol):

    async def insert_many(self, movements: list[MovementCreate]) -> int:
        """Insert all movements in one call; returns the number stored."""
        ...

    async def query_unreviewed(self, expenses_only: bool = False) -> list[Movement]:
        """Unreviewed movements ordered by value date."""
        ...

    async def get_by_id(self, movement_id: int) -> Optional[Movement]:
        ...

    async def update_by_id(
        self,
        movement_id: int,
        patch: dict[str, Any],
        expected_version: int,
    ) -> Optional[Movement]:
        """
        Apply `patch` only if the stored version equals `expected_version`.

        Returns the updated movement, or None if no row matched.
        """
        ...


class ExpenseLedgerStore(Protocol):

    async def insert(self, entry: ExpenseLedgerEntry) -> ExpenseLedgerEntry:
        ...

    async def delete(self, entry_id: int) -> None:
        ...


class ConceptCatalog(Protocol):

    async def list_ordered_by_label(self) -> list[Concept]:
        ...
