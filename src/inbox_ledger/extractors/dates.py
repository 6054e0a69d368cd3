"""
Message date normalization.

Accepts ISO dates, ISO timestamps and RFC 2822 "Date" headers
("Mon, 20 Jan 2026 10:15:00 -0300"), falling back to the injected
clock when the value is empty or unparseable.
"""

import logging
from datetime import date, datetime, time
from typing import Callable

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def normalize_date(
    raw: str,
    today: Callable[[], date] = date.today,
    dayfirst: bool = True,
) -> str:
    """
    Convert a message date to YYYY-MM-DD.

    ISO-8601 values are parsed strictly first so "2026-01-05" is never
    read day-first. The calendar date of the header is kept as written,
    without converting its timezone.
    """
    value = (raw or "").strip()
    if not value:
        return today().isoformat()

    try:
        return date_parser.isoparse(value).date().isoformat()
    except (ValueError, OverflowError):
        pass

    try:
        return date_parser.parse(
            value,
            dayfirst=dayfirst,
            default=datetime.combine(today(), time()),
        ).date().isoformat()
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable message date {value!r}: {e}")
        return today().isoformat()
