# app/models/movement.py

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

DESCRIPTION_MAX = 255
OFFICE_MAX = 20
REFERENCE_MAX = 100

# Category code meaning "no category"
UNCATEGORIZED = 0


class MovementCreate(BaseModel):
    """A normalized bank movement, as produced by a bank adapter.

    Field aliases are the column names of the movements table.
    """

    operation_date: Optional[date] = Field(default=None, alias="Fecha")
    value_date: Optional[date] = Field(default=None, alias="FechaValor")
    description: str = Field(default="", alias="Descripcion", max_length=DESCRIPTION_MAX)
    amount: Decimal = Field(alias="Importe")
    currency: str = Field(default="EUR", alias="Divisa")
    balance_after: Optional[Decimal] = Field(default=None, alias="Saldo")
    balance_currency: Optional[str] = Field(default=None, alias="DivisaSaldo")
    office: Optional[str] = Field(default=None, alias="Oficina", max_length=OFFICE_MAX)
    reference_1: Optional[str] = Field(default=None, alias="Referencia1", max_length=REFERENCE_MAX)
    reference_2: Optional[str] = Field(default=None, alias="Referencia2", max_length=REFERENCE_MAX)
    reference_3: Optional[str] = Field(default=None, alias="Referencia3", max_length=REFERENCE_MAX)
    reference_4: Optional[str] = Field(default=None, alias="Referencia4", max_length=REFERENCE_MAX)
    reference_5: Optional[str] = Field(default=None, alias="Referencia5", max_length=REFERENCE_MAX)
    reference_6: Optional[str] = Field(default=None, alias="Referencia6", max_length=REFERENCE_MAX)
    category: Optional[int] = Field(default=None, alias="Tipo")
    reviewed: bool = Field(default=False, alias="Revisado")
    version: int = Field(default=1, alias="Version")

    class Config:
        populate_by_name = True

    @field_validator("reviewed", mode="before")
    @classmethod
    def _null_reviewed(cls, v):
        return False if v is None else v

    @field_validator("version", mode="before")
    @classmethod
    def _null_version(cls, v):
        return 1 if v is None else v

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    def to_record(self) -> dict:
        """Row as sent to the movements table."""
        return self.model_dump(by_alias=True, mode="json")


class Movement(MovementCreate):
    """A stored movement."""

    id: int

    class Config:
        populate_by_name = True
        from_attributes = True

    @model_validator(mode="after")
    def _reviewed_requires_category(self):
        if self.reviewed and self.category is None:
            raise ValueError("a reviewed movement must have a category")
        return self


class Concept(BaseModel):
    """Category catalog entry."""

    id: int
    label: str = Field(alias="Tipo")

    class Config:
        populate_by_name = True


class ExpenseLedgerEntry(BaseModel):
    """A confirmed expense, grouped by year and month."""

    id: Optional[int] = None
    year: int = Field(alias="Año")
    month: int = Field(alias="Mes", ge=1, le=12)
    description: str = Field(alias="Concepto")
    amount: Decimal = Field(alias="Importe")
    category: int = Field(alias="Tipo")
    reviewed: bool = Field(default=True, alias="Revisado")
    movement_id: Optional[int] = Field(default=None, alias="MovimientoId")

    class Config:
        populate_by_name = True

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude={"id"})
