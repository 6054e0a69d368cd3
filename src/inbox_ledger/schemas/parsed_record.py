"""
Canonical parsed financial record (SSOT).

This is THE single source of truth for what the extraction engine
produces from one email. Persistence, the review queue and downstream
aggregation all read this schema.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Direction(str, Enum):
    """Whether money leaves or enters the user's accounts."""

    EXPENSE = "expense"
    INCOME = "income"


class SourceChannel(str, Enum):
    """How a record entered the ledger."""

    EMAIL_INGESTED = "emailIngested"
    MANUAL_ENTRY = "manualEntry"


class ReviewStatus(str, Enum):
    """
    Human-in-the-loop state of a record.

    PENDING_REVIEW: User should confirm or correct the record
    CONFIRMED: Accepted, either automatically or by the user
    DISCARDED: Rejected by the user (never set by the parser)
    """

    PENDING_REVIEW = "pendingReview"
    CONFIRMED = "confirmed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class ParsedRecord:
    """
    Structured financial fact derived from one email.

    `id` equals the source message id so re-parsing a message overwrites
    the previous record instead of duplicating it.
    """

    id: str
    date: str  # ISO format YYYY-MM-DD
    amount: Decimal  # Never negative; 0 when no amount was found
    currency: str  # ISO code, e.g. "CLP"
    direction: Direction
    category: str
    merchant: str
    description: str  # Subject line, verbatim
    source_channel: SourceChannel
    source_message_id: str
    confidence_score: float  # [0.0, 1.0]
    raw_extract_snippet: str
    review_status: ReviewStatus

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "date": self.date,
            "amount": str(self.amount),
            "currency": self.currency,
            "direction": self.direction.value,
            "category": self.category,
            "merchant": self.merchant,
            "description": self.description,
            "source_channel": self.source_channel.value,
            "source_message_id": self.source_message_id,
            "confidence_score": self.confidence_score,
            "raw_extract_snippet": self.raw_extract_snippet,
            "review_status": self.review_status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedRecord":
        """Deserialize from dictionary."""
        return cls(
            id=data["id"],
            date=data["date"],
            amount=Decimal(str(data["amount"])),
            currency=data["currency"],
            direction=Direction(data["direction"]),
            category=data["category"],
            merchant=data["merchant"],
            description=data.get("description", ""),
            source_channel=SourceChannel(
                data.get("source_channel", SourceChannel.EMAIL_INGESTED.value)
            ),
            source_message_id=data.get("source_message_id", data["id"]),
            confidence_score=float(data.get("confidence_score", 0.0)),
            raw_extract_snippet=data.get("raw_extract_snippet", ""),
            review_status=ReviewStatus(
                data.get("review_status", ReviewStatus.PENDING_REVIEW.value)
            ),
        )
