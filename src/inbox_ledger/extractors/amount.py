"""
Amount and currency extraction.

Emails state money in many shapes: "$ 12.500", "R$ 500,00",
"1.99 USD", "Total: 3.500". This module detects the currency first,
collects every numeric candidate, normalizes each one according to the
currency's separator convention and picks exactly one amount.

Supported formats:
- Prefix: symbol or ISO code before the number ("$ 12.500", "USD 10")
- Suffix: number before the symbol or code ("1.99 USD", "10,00 €")
- Anchored: keyword before the number ("total: 3.500", "monto pagado 9990")
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from ..config import ParserConfig

logger = logging.getLogger(__name__)

# Currency markers in priority order. Explicit codes beat the bare "$".
CURRENCY_PATTERNS = [
    (r"(?<![a-z])usd(?![a-z])|u\$s", "USD"),
    (r"r\$|(?<![a-z])brl(?![a-z])", "BRL"),
    (r"€|(?<![a-z])eur(?![a-z])", "EUR"),
    (r"£|(?<![a-z])gbp(?![a-z])", "GBP"),
    (r"(?<![a-z])ars(?![a-z])", "ARS"),
    (r"(?<![a-z])mxn(?![a-z])", "MXN"),
]

_CODE = r"(?<![a-z])(?:clp|usd|brl|eur|gbp|ars|mxn)(?![a-z])"
_SYMBOL = rf"(?:r\$|u\$s|\$|€|£|{_CODE})"
# Bounded so runs of digits without a currency marker scan in linear time
_NUMBER = r"\d(?:[\d.,]{0,30}\d)?"

AMOUNT_PATTERN = re.compile(
    rf"{_SYMBOL}\s?({_NUMBER})"  # prefix
    rf"|(\d[\d.,]{{1,30}}\d)\s?{_SYMBOL}"  # suffix, at least three characters
    rf"|\b(?:monto pagado|pago|total|monto|boleta|factura|clp)\b[:\s]*({_NUMBER})",  # anchored
    re.IGNORECASE,
)

# Bank and merchant subjects routinely state the total
SUBJECT_AMOUNT_PATTERN = re.compile(rf"(?:\$|clp)\s?({_NUMBER})", re.IGNORECASE)


@dataclass(frozen=True)
class AmountResult:
    """Chosen amount plus the evidence it was chosen from."""

    amount: Decimal
    currency: str
    candidates: list[Decimal] = field(default_factory=list)
    source: str = "none"  # subject | plausible_max | first_candidate | none


def detect_currency(text: str, default_currency: str = "CLP") -> str:
    """Detect the currency of an email from its normalized text."""
    for pattern, currency in CURRENCY_PATTERNS:
        if re.search(pattern, text):
            return currency
    return default_currency


def normalize_number(
    raw: str,
    currency: str,
    zero_decimal_currencies: Sequence[str] = ("CLP",),
) -> Optional[Decimal]:
    """
    Parse a raw numeric token using the separator convention of a currency.

    Zero-decimal currencies treat every "." and "," as a thousands separator.
    Otherwise the rightmost separator is decimal when both appear, a lone
    comma is decimal only with exactly two digits after it, and repeated
    dots group thousands.

    Returns:
        Decimal value, or None if the token is not a number
    """
    value = re.sub(r"\s", "", raw)

    if currency in zero_decimal_currencies:
        value = value.replace(".", "").replace(",", "")
    elif "." in value and "," in value:
        if value.rfind(".") > value.rfind(","):
            value = value.replace(",", "")
        else:
            value = value.replace(".", "").replace(",", ".")
    elif "," in value:
        head, _, tail = value.rpartition(",")
        if len(tail) == 2:
            value = head.replace(",", "") + "." + tail
        else:
            value = value.replace(",", "")
    elif value.count(".") > 1:
        value = value.replace(".", "")

    try:
        return Decimal(value)
    except InvalidOperation:
        logger.debug(f"Discarding non-numeric amount candidate {raw!r}")
        return None


def _find_candidates(text: str, subject: str, currency: str, config: ParserConfig) -> list[Decimal]:
    candidates: list[Decimal] = []
    for match in AMOUNT_PATTERN.finditer(f"{subject}\n{text}"):
        raw = match.group(1) or match.group(2) or match.group(3)
        if not raw:
            continue
        value = normalize_number(raw, currency, config.zero_decimal_currencies)
        if value is not None and value > 0:
            candidates.append(value)
    return candidates


def _subject_amount(subject: str, currency: str, config: ParserConfig) -> Optional[Decimal]:
    match = SUBJECT_AMOUNT_PATTERN.search(subject)
    if not match:
        return None
    value = normalize_number(match.group(1), currency, config.zero_decimal_currencies)
    if value is None or value <= 0:
        return None
    return value


def extract_amount(text: str, subject: str, config: Optional[ParserConfig] = None) -> AmountResult:
    """
    Extract the single most likely amount and its currency.

    Strategy:
    1. Detect currency from markers in the normalized text
    2. Collect and normalize every numeric candidate from subject and text
    3. Prefer a "$"-prefixed number in the subject
    4. Otherwise take the largest plausible candidate (the grand total)
    5. Otherwise the first candidate; no candidates means amount 0

    Args:
        text: Normalized (lower-cased) email text
        subject: Original subject line
        config: Parser configuration (defaults when omitted)
    """
    config = config or ParserConfig()
    currency = detect_currency(text, config.default_currency)
    candidates = _find_candidates(text, subject, currency, config)

    if not candidates:
        logger.debug(f"No amount candidates found, currency={currency}")
        return AmountResult(amount=Decimal("0"), currency=currency)

    subject_value = _subject_amount(subject, currency, config)
    if subject_value is not None:
        return AmountResult(subject_value, currency, candidates, "subject")

    plausible = [v for v in candidates if config.plausibility.is_plausible(v)]
    if plausible:
        return AmountResult(max(plausible), currency, candidates, "plausible_max")

    return AmountResult(candidates[0], currency, candidates, "first_candidate")
