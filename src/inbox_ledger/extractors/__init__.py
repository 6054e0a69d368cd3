"""
Email transaction extractors.

Provides one pure function per analytical stage:
- normalize_email: Lower-cased matching text
- extract_amount: Amount and currency
- infer_direction: Expense or income
- extract_merchant: Merchant name
- infer_category: Category label
- normalize_date: ISO calendar date

Each stage is independently testable.
"""

from .amount import AmountResult, detect_currency, extract_amount, normalize_number
from .category import infer_category
from .dates import normalize_date
from .direction import infer_direction
from .merchant import extract_merchant, split_sender
from .normalizer import NormalizedEmail, normalize_email

__all__ = [
    "normalize_email",
    "NormalizedEmail",
    "extract_amount",
    "detect_currency",
    "normalize_number",
    "AmountResult",
    "infer_direction",
    "extract_merchant",
    "split_sender",
    "infer_category",
    "normalize_date",
]
