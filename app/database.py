# app/database.py

"""
Supabase-backed stores.

The client is created by the application's lifespan and handed to each
store; nothing here holds a module-level connection. supabase-py's client
is synchronous, so every request runs in the threadpool to keep the event
loop free.
"""

from typing import Any, Optional
import logging

from fastapi.concurrency import run_in_threadpool
from supabase import create_client, Client

from app.config import Settings
from app.core.errors import StoreError
from app.models import Concept, ExpenseLedgerEntry, Movement, MovementCreate

logger = logging.getLogger(__name__)


def create_supabase_client(settings: Settings) -> Client:
    return create_client(settings.supabase_url, settings.supabase_key)


def _movement_column(field: str) -> str:
    return Movement.model_fields[field].alias or field


async def _execute(query) -> Any:
    """Run a built query off the event loop; any failure becomes a StoreError."""
    try:
        return await run_in_threadpool(query.execute)
    except Exception as e:
        raise StoreError(f"Error en Supabase: {e}") from e


# ============================================
# Movements
# ============================================

class SupabaseMovementStore:
    """Movements table (TbMovimientos)."""

    def __init__(self, client: Client, table: str = "TbMovimientos"):
        self.client = client
        self.table = table

    async def insert_many(self, movements: list[MovementCreate]) -> int:
        if not movements:
            return 0

        records = [m.to_record() for m in movements]
        response = await _execute(self.client.table(self.table).insert(records))
        return len(response.data) if response.data else 0

    async def query_unreviewed(self, expenses_only: bool = False) -> list[Movement]:
        reviewed = _movement_column("reviewed")
        query = (
            self.client.table(self.table)
            .select("*")
            .or_(f"{reviewed}.is.false,{reviewed}.is.null")
        )
        if expenses_only:
            query = query.lt(_movement_column("amount"), 0)

        response = await _execute(query.order(_movement_column("value_date")))
        return [Movement.model_validate(row) for row in response.data]

    async def get_by_id(self, movement_id: int) -> Optional[Movement]:
        response = await _execute(
            self.client.table(self.table)
            .select("*")
            .eq("id", movement_id)
        )
        return Movement.model_validate(response.data[0]) if response.data else None

    async def update_by_id(
        self,
        movement_id: int,
        patch: dict[str, Any],
        expected_version: int,
    ) -> Optional[Movement]:
        updates = {_movement_column(k): v for k, v in patch.items()}
        response = await _execute(
            self.client.table(self.table)
            .update(updates)
            .eq("id", movement_id)
            .eq(_movement_column("version"), expected_version)
        )
        return Movement.model_validate(response.data[0]) if response.data else None


# ============================================
# Expense ledger
# ============================================

class SupabaseExpenseLedgerStore:
    """Expense ledger table (TbGastos)."""

    def __init__(self, client: Client, table: str = "TbGastos"):
        self.client = client
        self.table = table

    async def insert(self, entry: ExpenseLedgerEntry) -> ExpenseLedgerEntry:
        response = await _execute(self.client.table(self.table).insert(entry.to_record()))
        if not response.data:
            raise StoreError("Ledger insert returned no row")
        return ExpenseLedgerEntry.model_validate(response.data[0])

    async def delete(self, entry_id: int) -> None:
        await _execute(self.client.table(self.table).delete().eq("id", entry_id))


# ============================================
# Concept catalog
# ============================================

class SupabaseConceptCatalog:
    """Category catalog (TbConceptos)."""

    def __init__(self, client: Client, table: str = "TbConceptos"):
        self.client = client
        self.table = table

    async def list_ordered_by_label(self) -> list[Concept]:
        label = Concept.model_fields["label"].alias
        response = await _execute(
            self.client.table(self.table)
            .select(f"id, {label}")
            .order(label)
        )
        return [Concept.model_validate(row) for row in response.data]
