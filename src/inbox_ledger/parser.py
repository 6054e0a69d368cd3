"""
Record assembler - runs every extraction stage on one email.
"""

import logging
from datetime import date
from typing import Callable, Optional

from .config import ParserConfig
from .confidence import ConfidenceScorer
from .extractors import (
    extract_amount,
    extract_merchant,
    infer_category,
    infer_direction,
    normalize_date,
    normalize_email,
)
from .lexicon import Lexicon
from .schemas.parsed_record import ParsedRecord, SourceChannel

logger = logging.getLogger(__name__)


class EmailTransactionParser:
    """
    Turns the raw fields of a transactional email into a ParsedRecord.

    Stages (in order, on the same normalized text):
    1. Amount and currency
    2. Direction
    3. Merchant
    4. Category
    5. Confidence score and initial review status

    The parser holds only immutable configuration and lookup tables, so
    one instance may be shared freely across threads.
    """

    VERSION = "0.1.0"

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        lexicon: Optional[Lexicon] = None,
        clock: Callable[[], date] = date.today,
    ):
        """
        Initialize parser.

        Args:
            config: Parser configuration (defaults when omitted)
            lexicon: Lookup tables; built from config extensions when omitted
            clock: Returns "today", used when the message date is unusable
        """
        self.config = config or ParserConfig()
        self.lexicon = lexicon or self.config.build_lexicon()
        self.clock = clock
        self.scorer = ConfidenceScorer(thresholds=self.config.review, lexicon=self.lexicon)

    def parse(
        self,
        message_id: str,
        subject: str,
        body: str,
        sender: str,
        date: str,
    ) -> ParsedRecord:
        """
        Parse one email into a best-effort record.

        Messy input never raises; missing signals degrade to sentinel
        values and a low confidence score.

        Args:
            message_id: Stable source message id (becomes the record id)
            subject: Subject line (may be empty)
            body: Decoded plain-text body (may be empty)
            sender: Raw "From" header value
            date: Message date, ISO or any parseable format (may be empty)

        Returns:
            ParsedRecord with review_status decided from confidence
        """
        for name, value in (
            ("message_id", message_id),
            ("subject", subject),
            ("body", body),
            ("sender", sender),
            ("date", date),
        ):
            assert isinstance(value, str), f"{name} must be a str, got {type(value).__name__}"

        normalized = normalize_email(subject, body, sender)

        amount_result = extract_amount(normalized.text, normalized.subject, self.config)
        direction = infer_direction(normalized.text, self.lexicon)
        merchant = extract_merchant(sender, normalized.subject, body, self.lexicon)
        category = infer_category(merchant, normalized.text, self.lexicon)

        confidence = self.scorer.score(amount_result.amount, merchant, normalized.text)
        review_status = self.scorer.compute_review_status(confidence)

        logger.debug(
            f"[{message_id}] amount={amount_result.amount} {amount_result.currency} "
            f"({amount_result.source}, {len(amount_result.candidates)} candidates), "
            f"direction={direction.value}, merchant={merchant!r}, category={category}, "
            f"confidence={confidence}, status={review_status.value}"
        )

        return ParsedRecord(
            id=message_id,
            date=normalize_date(date, self.clock, self.config.date_dayfirst),
            amount=amount_result.amount,
            currency=amount_result.currency,
            direction=direction,
            category=category,
            merchant=merchant,
            description=subject,
            source_channel=SourceChannel.EMAIL_INGESTED,
            source_message_id=message_id,
            confidence_score=confidence,
            raw_extract_snippet=body[: self.config.snippet_length],
            review_status=review_status,
        )


_default_parser: Optional[EmailTransactionParser] = None


def get_default_parser() -> EmailTransactionParser:
    """Return the shared parser built from default configuration."""
    global _default_parser
    if _default_parser is None:
        _default_parser = EmailTransactionParser()
    return _default_parser


def parse(message_id: str, subject: str, body: str, sender: str, date: str) -> ParsedRecord:
    """Parse one email with the default parser."""
    return get_default_parser().parse(message_id, subject, body, sender, date)
