"""
SSOT (Single Source of Truth) schemas for the extraction engine.

These canonical schemas are the ONLY models exchanged with collaborators.
"""

from .parsed_record import Direction, ParsedRecord, ReviewStatus, SourceChannel

__all__ = [
    "ParsedRecord",
    "Direction",
    "ReviewStatus",
    "SourceChannel",
]
