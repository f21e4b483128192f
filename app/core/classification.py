# app/core/classification.py

"""
Initial category hint for a movement.

The reviewer picks the final category; this only pre-fills a suggestion.
"""

from decimal import Decimal

from app.models.movement import UNCATEGORIZED

TRANSFER = 1
DIRECT_DEBIT = 2
CARD = 3
DEPOSIT = 4
OTHER_INCOME = 5
OTHER_EXPENSE = 6

# Order matters: first match wins
KEYWORD_RULES: list[tuple[str, int]] = [
    ("transferencia", TRANSFER),
    ("recibo", DIRECT_DEBIT),
    ("tarjeta", CARD),
    ("ingreso", DEPOSIT),
]


def classify(amount: Decimal | float, description: str | None) -> int:
    """
    Classify a movement from its description and amount sign.

    Keyword rules are checked in order against the lower-cased description;
    when none matches, non-negative amounts are other income and negative
    ones other expense. A blank description is left uncategorized.
    """
    if not description or not description.strip():
        return UNCATEGORIZED

    text = description.lower()
    for keyword, code in KEYWORD_RULES:
        if keyword in text:
            return code

    return OTHER_INCOME if amount >= 0 else OTHER_EXPENSE
