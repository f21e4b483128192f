# tests/conftest.py

"""
Shared fixtures: in-memory stores, fake uploads and spreadsheet builders.
"""

import io
import os
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

# Settings are read at import time by app.main
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-key")

from app.config import Settings
from app.core.errors import StoreError
from app.core.ingestion import IngestionPipeline
from app.core.review import ReviewEngine
from app.models import Concept, ExpenseLedgerEntry, Movement, MovementCreate

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS = "application/vnd.ms-excel"


# ============================================
# In-memory stores
# ============================================

class InMemoryMovementStore:

    def __init__(self):
        self.rows: dict[int, Movement] = {}
        self.next_id = 1
        self.insert_calls = 0
        self.fail_insert = False
        self.fail_update = False

    async def insert_many(self, movements: list[MovementCreate]) -> int:
        self.insert_calls += 1
        if self.fail_insert:
            raise StoreError("insert rejected")
        for m in movements:
            self.rows[self.next_id] = Movement(id=self.next_id, **m.model_dump())
            self.next_id += 1
        return len(movements)

    async def query_unreviewed(self, expenses_only: bool = False) -> list[Movement]:
        rows = [m for m in self.rows.values() if not m.reviewed]
        if expenses_only:
            rows = [m for m in rows if m.amount < 0]
        return sorted(rows, key=lambda m: (m.value_date is None, m.value_date or date.min))

    async def get_by_id(self, movement_id: int):
        return self.rows.get(movement_id)

    async def update_by_id(self, movement_id, patch, expected_version):
        if self.fail_update:
            raise StoreError("update rejected")
        current = self.rows.get(movement_id)
        if current is None or current.version != expected_version:
            return None
        updated = Movement.model_validate({**current.model_dump(), **patch})
        self.rows[movement_id] = updated
        return updated

    def add(self, **fields) -> Movement:
        movement = Movement(id=self.next_id, **fields)
        self.rows[self.next_id] = movement
        self.next_id += 1
        return movement


class InMemoryLedgerStore:

    def __init__(self):
        self.entries: dict[int, ExpenseLedgerEntry] = {}
        self.next_id = 1
        self.deleted: list[int] = []
        self.fail_insert = False

    async def insert(self, entry: ExpenseLedgerEntry) -> ExpenseLedgerEntry:
        if self.fail_insert:
            raise StoreError("ledger insert rejected")
        stored = entry.model_copy(update={"id": self.next_id})
        self.entries[self.next_id] = stored
        self.next_id += 1
        return stored

    async def delete(self, entry_id: int) -> None:
        self.entries.pop(entry_id, None)
        self.deleted.append(entry_id)


class InMemoryConceptCatalog:

    def __init__(self, concepts: list[Concept]):
        self.concepts = concepts

    async def list_ordered_by_label(self) -> list[Concept]:
        return sorted(self.concepts, key=lambda c: c.label)


# ============================================
# Uploads
# ============================================

class FakeUpload:
    """Quacks like starlette's UploadFile and records whether it was closed."""

    def __init__(self, filename: str, content: bytes, content_type: str = XLSX, size: int | None = None):
        self.filename = filename
        self.content_type = content_type
        self.size = len(content) if size is None else size
        self._buffer = io.BytesIO(content)
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)

    async def close(self) -> None:
        self.closed = True


def make_xlsx(rows: list[dict], columns: list[str] | None = None) -> bytes:
    buffer = io.BytesIO()
    pd.DataFrame(rows, columns=columns).to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


def caixabank_row(**overrides) -> dict:
    row = {
        "F. Operación": "15/03/2024",
        "F. Valor": "15/03/2024",
        "Concepto común": "Recibo",
        "Concepto propio": "Endesa luz",
        "Ingreso (+)": None,
        "Gasto (-)": 42.5,
        "Saldo (+)": 1500.25,
        "Saldo (-)": None,
        "Divisa": "EUR",
        "Oficina": "0123",
    }
    row.update(overrides)
    return row


def santander_row(**overrides) -> dict:
    row = {
        "Fecha Operación": "01/02/2024",
        "Fecha Valor": "02/02/2024",
        "Concepto": "Transferencia recibida Nomina",
        "Importe": "1.234,56",
        "Divisa": "EUR",
        "Saldo": "5.000,00",
        "Referencia 1": "REF-001",
        "Referencia 2": None,
        "Información adicional": "Empresa SL",
    }
    row.update(overrides)
    return row


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def settings() -> Settings:
    return Settings(supabase_url="http://localhost:54321", supabase_key="test-key")


@pytest.fixture
def movement_store() -> InMemoryMovementStore:
    return InMemoryMovementStore()


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def concept_catalog() -> InMemoryConceptCatalog:
    return InMemoryConceptCatalog([
        Concept(id=7, label="Suministros"),
        Concept(id=3, label="Alimentación"),
        Concept(id=9, label="Ocio"),
    ])


@pytest.fixture
def pipeline(movement_store, settings) -> IngestionPipeline:
    return IngestionPipeline(movement_store, settings)


@pytest.fixture
def engine(movement_store, ledger_store, concept_catalog) -> ReviewEngine:
    return ReviewEngine(movement_store, ledger_store, concept_catalog)


@pytest.fixture
def pending_expense(movement_store) -> Movement:
    return movement_store.add(
        operation_date=date(2024, 3, 14),
        value_date=date(2024, 3, 15),
        description="Recibo - Endesa luz",
        amount=Decimal("-42.50"),
        category=2,
    )
