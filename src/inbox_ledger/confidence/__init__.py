"""
Confidence scoring module.

Computes the extraction confidence score.
Determines initial review status based on thresholds.
"""

from .scorer import ConfidenceScorer, compute_review_status, score_confidence

__all__ = [
    "ConfidenceScorer",
    "compute_review_status",
    "score_confidence",
]
