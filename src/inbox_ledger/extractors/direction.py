"""
Direction inference (expense vs income).
"""

from ..lexicon import DEFAULT_LEXICON, Lexicon
from ..schemas.parsed_record import Direction


def infer_direction(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> Direction:
    """
    Classify normalized email text as income or expense.

    Income markers are checked first so "pago recibido" is income even
    though it contains "pago". Unflagged emails default to expense.
    """
    if any(keyword in text for keyword in lexicon.income_keywords):
        return Direction.INCOME
    if any(keyword in text for keyword in lexicon.expense_keywords):
        return Direction.EXPENSE
    return Direction.EXPENSE
