# app/core/adapters.py

"""
Bank adapters.

One adapter per supported bank maps that bank's raw export rows onto the
canonical MovementCreate schema. Adapters are pure: the same rows always
produce the same movements.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence
import logging

from pydantic import BaseModel

from app.core.normalizers import (
    normalize_text,
    parse_amount,
    parse_amount_strict,
    parse_date,
    parse_date_strict,
    truncate,
)
from app.models import (
    CaixabankRow,
    MovementCreate,
    RowError,
    SantanderRow,
    REQUIRED_COLUMNS,
    OPTIONAL_COLUMNS,
)
from app.models.movement import DESCRIPTION_MAX, OFFICE_MAX, REFERENCE_MAX

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "EUR"

# Data starts on the second spreadsheet row (the first is the header)
FIRST_DATA_ROW = 2


class TransformResult:
    """Movements produced from a sheet, plus what was left out."""

    def __init__(self):
        self.movements: list[MovementCreate] = []
        self.skipped: int = 0
        self.row_errors: list[RowError] = []

    def __len__(self) -> int:
        return len(self.movements)


class BankAdapter(ABC):
    """Maps one bank's export rows onto movements."""

    bank: str
    mapping_version: str
    row_model: type[BaseModel]

    def __init__(self, strict: bool = True):
        self.strict = strict

    @property
    def required_columns(self) -> list[str]:
        return REQUIRED_COLUMNS[self.bank]

    @property
    def optional_columns(self) -> list[str]:
        return OPTIONAL_COLUMNS[self.bank]

    def transform(
        self,
        raw_rows: Iterable[Mapping[str, Any]],
        row_numbers: Optional[Sequence[int]] = None,
    ) -> TransformResult:
        """
        Transform every raw row.

        Rows that fail to map are dropped and reported under their
        spreadsheet row number. Without `row_numbers` the rows are assumed
        to be contiguous from the first data row. Rows the adapter
        deliberately ignores are only counted.
        """
        result = TransformResult()
        raw_rows = list(raw_rows)
        if row_numbers is None:
            row_numbers = range(FIRST_DATA_ROW, FIRST_DATA_ROW + len(raw_rows))

        for row_number, raw in zip(row_numbers, raw_rows):
            try:
                row = self.row_model.model_validate(raw)
                movement = self.transform_row(row)
            except (ValueError, TypeError, ArithmeticError) as e:
                logger.warning(
                    "%s row %d dropped: %s", self.bank, row_number, e
                )
                result.row_errors.append(RowError(row=row_number, reason=str(e)))
                continue

            if movement is None:
                result.skipped += 1
                continue

            result.movements.append(movement)

        return result

    @abstractmethod
    def transform_row(self, row: BaseModel) -> Optional[MovementCreate]:
        """Map one validated row; return None to skip it."""

    # ============================================
    # Field helpers
    # ============================================

    def _date(self, raw: Any):
        return parse_date_strict(raw) if self.strict else parse_date(raw)

    def _amount(self, raw: Any) -> Decimal:
        return parse_amount_strict(raw) if self.strict else parse_amount(raw)

    @staticmethod
    def _currency(raw: Any) -> str:
        return (normalize_text(raw) or DEFAULT_CURRENCY).upper()


class CaixabankAdapter(BankAdapter):
    """
    Caixabank exports split amounts into income and expense columns, and the
    description into a common and an own concept.
    """

    bank = "caixabank"
    mapping_version = "caixabank-v1"
    row_model = CaixabankRow

    def transform_row(self, row: CaixabankRow) -> Optional[MovementCreate]:
        operation_date = self._date(row.operation_date)
        value_date = self._date(row.value_date)

        # Summary and footer lines carry no dates
        if operation_date is None and value_date is None:
            return None

        amount = self._amount(row.income) - self._amount(row.expense)

        parts = [normalize_text(row.common_concept), normalize_text(row.own_concept)]
        description = " - ".join(p for p in parts if p)

        currency = self._currency(row.currency)

        balance = None
        if normalize_text(row.balance_positive) or normalize_text(row.balance_negative):
            balance = self._amount(row.balance_positive) - self._amount(row.balance_negative)

        return MovementCreate(
            operation_date=operation_date,
            value_date=value_date,
            description=description[:DESCRIPTION_MAX],
            amount=amount,
            currency=currency,
            balance_after=balance,
            balance_currency=currency if balance is not None else None,
            office=truncate(row.office, OFFICE_MAX),
            reference_1=truncate(row.reference_1, REFERENCE_MAX),
            reference_2=truncate(row.reference_2, REFERENCE_MAX),
            reference_3=truncate(row.extra_concept_1, REFERENCE_MAX),
            reference_4=truncate(row.extra_concept_2, REFERENCE_MAX),
        )


class SantanderAdapter(BankAdapter):
    """Santander exports carry a single signed amount and no branch office."""

    bank = "santander"
    mapping_version = "santander-v1"
    row_model = SantanderRow

    def transform_row(self, row: SantanderRow) -> Optional[MovementCreate]:
        currency = self._currency(row.currency)

        balance = None
        if normalize_text(row.balance):
            balance = self._amount(row.balance)

        return MovementCreate(
            operation_date=self._date(row.operation_date),
            value_date=self._date(row.value_date),
            description=truncate(row.concept, DESCRIPTION_MAX) or "",
            amount=self._amount(row.amount),
            currency=currency,
            balance_after=balance,
            balance_currency=currency if balance is not None else None,
            office=None,
            reference_1=truncate(row.reference_1, REFERENCE_MAX),
            reference_2=truncate(row.reference_2, REFERENCE_MAX),
            reference_3=truncate(row.additional_info, REFERENCE_MAX),
        )


# ============================================
# Registry
# ============================================

# Checked in this order when detecting the bank from a filename
ADAPTERS: dict[str, type[BankAdapter]] = {
    SantanderAdapter.bank: SantanderAdapter,
    CaixabankAdapter.bank: CaixabankAdapter,
}


def detect_bank(filename: str | None) -> str | None:
    """Bank whose name appears (case-insensitively) in the filename."""
    if not filename:
        return None
    name = filename.lower()
    for bank in ADAPTERS:
        if bank in name:
            return bank
    return None


def get_adapter(bank: str, strict: bool = True) -> BankAdapter:
    try:
        return ADAPTERS[bank](strict=strict)
    except KeyError:
        raise ValueError(f"No adapter registered for bank: {bank}") from None
