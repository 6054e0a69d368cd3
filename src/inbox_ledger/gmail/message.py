"""
Gmail API message decoding.

Turns an already-fetched `users.messages.get` resource into the raw
fields the parser consumes. Fetching, OAuth and paging belong to the
caller; nothing here touches the network.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup

from ..parser import EmailTransactionParser, get_default_parser
from ..schemas.parsed_record import ParsedRecord

logger = logging.getLogger(__name__)

# Gmail search query selecting bills, receipts and transfer notices
FINANCE_SEARCH_QUERY = (
    'subject:(pago OR comprobante OR recibo OR receipt OR invoice OR bill OR factura '
    'OR boleta OR vencimiento OR cargo OR "estado de cuenta" OR "payment confirmed" '
    'OR "transferencia recibida") '
    'OR "total a pagar" OR "fecha de vencimiento" OR "monto pagado" OR "detalle de su cuenta"'
)

# Exceptions raised by malformed message resources
DECODE_ERRORS = (AttributeError, KeyError, TypeError, ValueError, binascii.Error)


def decode_base64url(data: str) -> str:
    """Decode a Gmail base64url body (padding optional) to text."""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def html_to_text(html: str) -> str:
    """Convert an HTML body to whitespace-collapsed plain text."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for element in soup(["script", "style", "head", "meta", "noscript"]):
        element.decompose()

    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def _find_part(payload: dict, mime_type: str) -> Optional[dict]:
    """Depth-first search for the first part of a MIME type with data."""
    if payload.get("mimeType") == mime_type and (payload.get("body") or {}).get("data"):
        return payload
    for part in payload.get("parts", []) or []:
        found = _find_part(part, mime_type)
        if found:
            return found
    return None


@dataclass
class GmailMessage:
    """Raw fields of a Gmail message, ready for parsing."""

    id: str
    subject: str
    sender: str
    date: str  # As found in the Date header (or derived from internalDate)
    body: str  # Plain text

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "GmailMessage":
        """
        Create from a Gmail `users.messages.get` response (format=full).

        Raises:
            KeyError: If the resource has no id or payload
            TypeError: If the payload is not an object
            binascii.Error: If a body is not valid base64url
        """
        payload = data["payload"]
        if not isinstance(payload, dict):
            raise TypeError(f"Message payload must be an object, got {type(payload).__name__}")
        headers = {
            h["name"].lower(): h.get("value", "") for h in payload.get("headers", []) or []
        }

        date = headers.get("date", "")
        if not date and data.get("internalDate"):
            millis = int(data["internalDate"])
            date = datetime.fromtimestamp(millis / 1000, tz=timezone.utc).date().isoformat()

        return cls(
            id=str(data["id"]),
            subject=headers.get("subject", ""),
            sender=headers.get("from", ""),
            date=date,
            body=cls._extract_body(payload),
        )

    @staticmethod
    def _extract_body(payload: dict) -> str:
        """Prefer text/plain, then text/html, then the top-level body."""
        part = _find_part(payload, "text/plain")
        if part:
            return decode_base64url(part["body"]["data"])

        part = _find_part(payload, "text/html")
        if part:
            return html_to_text(decode_base64url(part["body"]["data"]))

        data = (payload.get("body") or {}).get("data")
        return decode_base64url(data) if data else ""


def parse_gmail_message(
    data: dict[str, Any],
    parser: Optional[EmailTransactionParser] = None,
) -> ParsedRecord:
    """Decode and parse one Gmail message resource."""
    parser = parser or get_default_parser()
    message = GmailMessage.from_api_response(data)
    return parser.parse(message.id, message.subject, message.body, message.sender, message.date)


def parse_gmail_messages(
    messages: Iterable[dict[str, Any]],
    parser: Optional[EmailTransactionParser] = None,
) -> list[ParsedRecord]:
    """
    Parse a batch of Gmail message resources in order.

    Messages whose payload cannot be decoded are logged and skipped; the
    rest of the batch continues.
    """
    parser = parser or get_default_parser()
    records: list[ParsedRecord] = []
    failed = 0

    for data in messages:
        try:
            records.append(parse_gmail_message(data, parser))
        except DECODE_ERRORS:
            failed += 1
            message_id = data.get("id", "?") if isinstance(data, dict) else "?"
            logger.exception(f"Failed to decode Gmail message {message_id}")

    logger.info(f"Parsed {len(records)} Gmail messages ({failed} skipped)")
    return records
