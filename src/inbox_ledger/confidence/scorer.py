"""
Confidence scoring implementation.
"""

from decimal import Decimal
from typing import Optional

from ..config import ReviewThresholds
from ..lexicon import DEFAULT_LEXICON, UNKNOWN_MERCHANT, Lexicon
from ..schemas.parsed_record import ReviewStatus

BASE_SCORE = 0.4
AMOUNT_BONUS = 0.3
MERCHANT_BONUS = 0.2
BILL_KEYWORD_BONUS = 0.2
# Records without an amount are never trustworthy
NO_AMOUNT_SCORE = 0.1


class ConfidenceScorer:
    """
    Computes extraction confidence and the initial review status.

    Signals:
    - An amount was found: strongest signal
    - A merchant was named (not the sentinel)
    - Bill vocabulary is present (utility bills are well structured)
    """

    def __init__(
        self,
        thresholds: Optional[ReviewThresholds] = None,
        lexicon: Lexicon = DEFAULT_LEXICON,
    ):
        """Initialize scorer with thresholds."""
        self.thresholds = thresholds or ReviewThresholds()
        self.lexicon = lexicon

    def score(self, amount: Decimal, merchant: str, text: str) -> float:
        """Score an extraction in [0.0, 1.0]."""
        score = BASE_SCORE

        if amount > 0:
            score += AMOUNT_BONUS
        if merchant != UNKNOWN_MERCHANT and len(merchant) > 2:
            score += MERCHANT_BONUS
        if any(keyword in text for keyword in self.lexicon.bill_keywords):
            score += BILL_KEYWORD_BONUS

        if amount == 0:
            score = NO_AMOUNT_SCORE

        return round(max(0.0, min(score, 1.0)), 2)

    def compute_review_status(self, score: float) -> ReviewStatus:
        """
        Compute review status from a confidence score.

        Rules:
        - CONFIRMED: score strictly above auto_confirm_threshold
        - PENDING_REVIEW: Otherwise
        """
        if score > self.thresholds.auto_confirm_threshold:
            return ReviewStatus.CONFIRMED
        return ReviewStatus.PENDING_REVIEW


def score_confidence(
    amount: Decimal,
    merchant: str,
    text: str,
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> float:
    """Score an extraction with the default thresholds."""
    return ConfidenceScorer(lexicon=lexicon).score(amount, merchant, text)


def compute_review_status(score: float, thresholds: Optional[ReviewThresholds] = None) -> ReviewStatus:
    """Derive the initial review status of a record."""
    return ConfidenceScorer(thresholds=thresholds).compute_review_status(score)
