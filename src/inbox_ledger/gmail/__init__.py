"""
Gmail message adapter.

Provides:
- Header and base64url body decoding of Gmail API message resources
- Single and batch parsing into ParsedRecords
- The search query used to select financial emails

No network access: callers fetch messages themselves.
"""

from .message import (
    FINANCE_SEARCH_QUERY,
    GmailMessage,
    decode_base64url,
    html_to_text,
    parse_gmail_message,
    parse_gmail_messages,
)

__all__ = [
    "GmailMessage",
    "parse_gmail_message",
    "parse_gmail_messages",
    "decode_base64url",
    "html_to_text",
    "FINANCE_SEARCH_QUERY",
]
