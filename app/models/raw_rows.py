# app/models/raw_rows.py

"""
Raw spreadsheet rows, one model per bank.

Aliases are the literal column headers of each bank's export. Rows are only
built after the schema validator has confirmed the required headers exist,
so optional columns simply default to None.
"""

from typing import Any, Literal, Union
from pydantic import BaseModel, Field

BankId = Literal["caixabank", "santander"]


class CaixabankRow(BaseModel):
    """One line of a Caixabank movements export."""

    bank: Literal["caixabank"] = "caixabank"
    operation_date: Any = Field(alias="F. Operación")
    value_date: Any = Field(alias="F. Valor")
    income: Any = Field(alias="Ingreso (+)")
    expense: Any = Field(alias="Gasto (-)")
    currency: Any = Field(alias="Divisa")
    balance_positive: Any = Field(default=None, alias="Saldo (+)")
    balance_negative: Any = Field(default=None, alias="Saldo (-)")
    office: Any = Field(default=None, alias="Oficina")
    common_concept: Any = Field(default=None, alias="Concepto común")
    own_concept: Any = Field(default=None, alias="Concepto propio")
    reference_1: Any = Field(default=None, alias="Referencia 1")
    reference_2: Any = Field(default=None, alias="Referencia 2")
    extra_concept_1: Any = Field(default=None, alias="Concepto complementario 1")
    extra_concept_2: Any = Field(default=None, alias="Concepto complementario 2")

    class Config:
        populate_by_name = True
        extra = "ignore"


class SantanderRow(BaseModel):
    """One line of a Santander movements export."""

    bank: Literal["santander"] = "santander"
    operation_date: Any = Field(alias="Fecha Operación")
    value_date: Any = Field(alias="Fecha Valor")
    concept: Any = Field(alias="Concepto")
    amount: Any = Field(alias="Importe")
    currency: Any = Field(alias="Divisa")
    balance: Any = Field(default=None, alias="Saldo")
    reference_1: Any = Field(default=None, alias="Referencia 1")
    reference_2: Any = Field(default=None, alias="Referencia 2")
    additional_info: Any = Field(default=None, alias="Información adicional")

    class Config:
        populate_by_name = True
        extra = "ignore"


RawRow = Union[CaixabankRow, SantanderRow]


def _required_aliases(model: type[BaseModel]) -> list[str]:
    return [f.alias for f in model.model_fields.values() if f.is_required()]


def _optional_aliases(model: type[BaseModel]) -> list[str]:
    return [
        f.alias for name, f in model.model_fields.items()
        if not f.is_required() and name != "bank"
    ]


ROW_MODELS: dict[str, type[BaseModel]] = {
    "caixabank": CaixabankRow,
    "santander": SantanderRow,
}

REQUIRED_COLUMNS: dict[str, list[str]] = {
    bank: _required_aliases(model) for bank, model in ROW_MODELS.items()
}

OPTIONAL_COLUMNS: dict[str, list[str]] = {
    bank: _optional_aliases(model) for bank, model in ROW_MODELS.items()
}
