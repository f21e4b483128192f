# tests/test_database.py

"""
Tests for the Supabase stores against a recording fake client.
"""

import asyncio
import threading
from decimal import Decimal

import pytest

from app.core.errors import StoreError
from app.database import (
    SupabaseConceptCatalog,
    SupabaseExpenseLedgerStore,
    SupabaseMovementStore,
)
from app.models import ExpenseLedgerEntry


def run(coro):
    return asyncio.run(coro)


class FakeResponse:

    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable query builder; records the calls and the executing thread."""

    def __init__(self, client, table):
        self.client = client
        self.calls = [("table", table)]

    def __getattr__(self, name):
        def chain(*args):
            self.calls.append((name, *args))
            return self
        return chain

    def execute(self):
        self.client.executed.append(self.calls)
        self.client.threads.append(threading.get_ident())
        if self.client.error is not None:
            raise self.client.error
        return FakeResponse(self.client.data)


class FakeClient:

    def __init__(self, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error
        self.executed = []
        self.threads = []

    def table(self, name):
        return FakeQuery(self, name)


MOVEMENT_ROW = {
    "id": 1,
    "Fecha": "2024-03-15",
    "FechaValor": "2024-03-15",
    "Descripcion": "Recibo - Endesa luz",
    "Importe": "-42.50",
    "Divisa": "EUR",
    "Revisado": False,
    "Version": 1,
}


class TestThreadpool:

    def test_execute_runs_off_the_event_loop(self):
        client = FakeClient(data=[MOVEMENT_ROW])
        store = SupabaseMovementStore(client)

        async def fetch():
            return threading.get_ident(), await store.get_by_id(1)

        loop_thread, movement = run(fetch())

        assert movement.id == 1
        assert movement.amount == Decimal("-42.50")
        assert client.threads and client.threads[0] != loop_thread

    def test_client_error_becomes_store_error(self):
        store = SupabaseMovementStore(FakeClient(error=RuntimeError("timeout")))

        with pytest.raises(StoreError, match="timeout"):
            run(store.query_unreviewed(expenses_only=True))


class TestMovementStore:

    def test_unreviewed_expenses_query(self):
        client = FakeClient(data=[MOVEMENT_ROW])

        pending = run(SupabaseMovementStore(client).query_unreviewed(expenses_only=True))

        assert [m.id for m in pending] == [1]
        calls = client.executed[0]
        assert ("or_", "Revisado.is.false,Revisado.is.null") in calls
        assert ("lt", "Importe", 0) in calls
        assert calls[-1] == ("order", "FechaValor")

    def test_update_guarded_by_version(self):
        client = FakeClient(data=[])

        updated = run(SupabaseMovementStore(client).update_by_id(
            1, {"reviewed": True, "category": 7, "version": 2}, expected_version=1,
        ))

        assert updated is None
        calls = client.executed[0]
        assert ("update", {"Revisado": True, "Tipo": 7, "Version": 2}) in calls
        assert ("eq", "Version", 1) in calls


class TestLedgerAndCatalog:

    def test_ledger_insert_without_row_fails(self):
        store = SupabaseExpenseLedgerStore(FakeClient(data=[]))
        entry = ExpenseLedgerEntry(
            year=2024, month=3, description="Recibo", amount=Decimal("-1"),
            category=7, reviewed=True, movement_id=1,
        )

        with pytest.raises(StoreError):
            run(store.insert(entry))

    def test_concepts_ordered_by_label(self):
        client = FakeClient(data=[{"id": 3, "Tipo": "Alimentación"}])

        concepts = run(SupabaseConceptCatalog(client).list_ordered_by_label())

        assert [c.label for c in concepts] == ["Alimentación"]
        assert client.executed[0][-1] == ("order", "Tipo")
