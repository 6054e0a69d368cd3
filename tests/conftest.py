"""Test fixtures and utilities."""

from datetime import date

import pytest

from fixtures import SAMPLE_PEDIDOSYA, build_gmail_message
from inbox_ledger.parser import EmailTransactionParser

FIXED_TODAY = date(2026, 2, 1)


@pytest.fixture
def fixed_clock():
    """Clock pinned to a known date."""
    return lambda: FIXED_TODAY


@pytest.fixture
def parser(fixed_clock) -> EmailTransactionParser:
    """Parser with default configuration and a pinned clock."""
    return EmailTransactionParser(clock=fixed_clock)


@pytest.fixture
def sample_gmail_message() -> dict:
    """Sample Gmail message resource for the PedidosYa receipt."""
    subject, body, sender = SAMPLE_PEDIDOSYA
    return build_gmail_message("18d2f0c9a1b2c3d4", subject, body, sender)
