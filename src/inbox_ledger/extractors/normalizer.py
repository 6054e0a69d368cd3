"""
Text normalization shared by all extraction stages.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedEmail:
    """Lower-cased matching text plus the untouched subject."""

    text: str  # subject, sender and body joined by newlines, lower-cased
    subject: str  # original case, for patterns that rely on capitalization


def normalize_email(subject: str, body: str, sender: str) -> NormalizedEmail:
    """Build the text blob every keyword and regex stage matches against."""
    return NormalizedEmail(
        text=f"{subject}\n{sender}\n{body}".lower(),
        subject=subject,
    )
