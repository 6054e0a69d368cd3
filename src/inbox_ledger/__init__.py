"""
Transactional email → structured financial record.

A deterministic, testable engine that turns receipts, bills and transfer
notices of unknown structure and locale into ledger records with a
confidence score gating auto-confirmation vs human review.
"""

from .parser import EmailTransactionParser, parse
from .schemas import Direction, ParsedRecord, ReviewStatus, SourceChannel

__version__ = "0.1.0"

__all__ = [
    "EmailTransactionParser",
    "parse",
    "ParsedRecord",
    "Direction",
    "ReviewStatus",
    "SourceChannel",
]
