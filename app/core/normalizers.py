# app/core/normalizers.py

"""
Locale-aware normalization for Spanish bank exports.

Dates come as dd/mm/yyyy text, spreadsheet date cells or spreadsheet serial
numbers. Amounts come as numbers or as text using '.' for thousands and ','
for decimals (1.234,56).
"""

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any
import math
import numbers
import re

from app.core.errors import LocaleParseError

# Day zero of spreadsheet serial dates (accounts for the 1900 leap year bug)
SPREADSHEET_EPOCH = date(1899, 12, 30)

# Serial numbers outside this range are not plausible statement dates
_SERIAL_MIN = 1
_SERIAL_MAX = 2958465  # 9999-12-31

ZERO = Decimal("0")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _date_or_raise(raw: Any) -> date | None:
    if _is_blank(raw):
        return None

    # datetime first: it is a subclass of date (pandas Timestamp too)
    if isinstance(raw, datetime):
        return raw.date()

    if isinstance(raw, date):
        return raw

    if isinstance(raw, bool):
        raise LocaleParseError("date", raw)

    if isinstance(raw, numbers.Real):
        if math.isnan(raw) or not _SERIAL_MIN <= raw <= _SERIAL_MAX:
            raise LocaleParseError("date", raw)
        return SPREADSHEET_EPOCH + timedelta(days=int(raw))

    if isinstance(raw, str):
        text = raw.strip()
        for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass

    raise LocaleParseError("date", raw)


def _amount_or_raise(raw: Any) -> Decimal:
    if _is_blank(raw):
        return ZERO

    if isinstance(raw, bool):
        raise LocaleParseError("amount", raw)

    if isinstance(raw, Decimal):
        return raw

    if isinstance(raw, numbers.Integral):
        return Decimal(int(raw))

    if isinstance(raw, numbers.Real):
        if math.isinf(raw):
            raise LocaleParseError("amount", raw)
        # str() keeps the shortest repr, avoiding binary artefacts
        return Decimal(str(float(raw)))

    if isinstance(raw, str):
        cleaned = re.sub(r"[^\d.,+-]", "", raw)
        cleaned = cleaned.replace(".", "").replace(",", ".")
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            raise LocaleParseError("amount", raw) from None
        if not value.is_finite():
            raise LocaleParseError("amount", raw)
        return value

    raise LocaleParseError("amount", raw)


def parse_date(raw: Any) -> date | None:
    """
    Parse a statement date.

    Returns None for empty or unparseable input; never raises.
    """
    try:
        return _date_or_raise(raw)
    except LocaleParseError:
        return None


def parse_date_strict(raw: Any) -> date | None:
    """Like parse_date, but raises LocaleParseError on non-empty garbage."""
    return _date_or_raise(raw)


def parse_amount(raw: Any) -> Decimal:
    """
    Parse a statement amount.

    Handles:
    - ints, floats and Decimals
    - Spanish formatted text ("1.234,56", "-42,50 €")

    Returns 0 for empty or unparseable input.
    """
    try:
        return _amount_or_raise(raw)
    except LocaleParseError:
        return ZERO


def parse_amount_strict(raw: Any) -> Decimal:
    """Like parse_amount, but raises LocaleParseError on non-empty garbage."""
    return _amount_or_raise(raw)


def normalize_text(value: Any) -> str | None:
    """Cell value as stripped text; blanks become None."""
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def truncate(value: Any, limit: int) -> str | None:
    """Normalize a cell to text and cut it to `limit` characters."""
    text = normalize_text(value)
    if text is None:
        return None
    return text[:limit]
