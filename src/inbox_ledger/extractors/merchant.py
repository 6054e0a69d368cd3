"""
Merchant name extraction.

Priority:
1. Known service provider in the sender name or subject
2. "<verb preposition> <name>" pattern in the subject
3. Sender display name
4. Local part of the sender address
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..lexicon import DEFAULT_LEXICON, UNKNOWN_MERCHANT, Lexicon

logger = logging.getLogger(__name__)

ANGLE_ADDRESS_PATTERN = re.compile(r"<([^>]*)>")


@dataclass(frozen=True)
class SenderParts:
    """Pieces of a raw "From" header value."""

    display_name: str
    address: str


def split_sender(sender: str) -> SenderParts:
    """Split '"Name" <local@domain>' into display name and address."""
    display_name = sender.split("<")[0].replace('"', "").strip()
    match = ANGLE_ADDRESS_PATTERN.search(sender)
    address = match.group(1).strip() if match else ""
    if not address and "@" in display_name:
        address = display_name
    return SenderParts(display_name=display_name, address=address)


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _from_subject(subject: str, lexicon: Lexicon) -> Optional[str]:
    for pattern in lexicon.merchant_patterns:
        match = re.search(pattern, subject, re.IGNORECASE)
        if not match or not match.group(1):
            continue
        found = match.group(1).strip()
        # Reject generic captures such as "comprobante de Pago ..."
        if 2 < len(found) < 30 and "pago" not in found.lower():
            return found
    return None


def extract_merchant(
    sender: str,
    subject: str,
    body: str = "",
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> str:
    """
    Derive a merchant name for an email.

    Args:
        sender: Raw "From" header, e.g. "PedidosYa <noreply@pedidosya.com>"
        subject: Original subject line
        body: Email body (currently unused by the heuristics)
        lexicon: Lookup tables

    Returns:
        Merchant name, or "Desconocido" when nothing can be derived
    """
    parts = split_sender(sender)
    lower_name = parts.display_name.lower()
    lower_subject = subject.lower()

    for provider in lexicon.service_providers:
        if provider in lower_name or provider in lower_subject:
            logger.debug(f"Merchant from service provider list: {provider}")
            return _capitalize(provider)

    found = _from_subject(subject, lexicon)
    if found:
        logger.debug(f"Merchant from subject pattern: {found}")
        return found

    if parts.display_name and "@" not in parts.display_name:
        return parts.display_name

    local_part = parts.address.split("@")[0].strip()
    return local_part or UNKNOWN_MERCHANT
