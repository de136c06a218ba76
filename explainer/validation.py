"""Validation gate between extraction and classification.

Statement exports carry header, footer and carry-forward rows that column
based extraction cannot tell apart from real transactions. Everything that
reaches classification has passed ``is_valid``.
"""
import logging

from .models import RawCandidate
from .utils import normalize_date

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 3

NOISE_PHRASES = [
    'opening balance', 'closing balance', 'total', 'balance b/f', 'balance c/f',
    'statement', 'account number', 'ifsc', 'branch', 'page', 'date', 'particulars',
    'debit', 'credit', 'amount', 'narration', 'transaction details', 'sr no',
    'sl no', 'serial', 'beginning balance', 'ending balance', 'sub total',
]


def rejection_reason(candidate: RawCandidate):
    """Return why a candidate is rejected, or None when it is valid."""
    if normalize_date(candidate.date) is None:
        return 'invalid date'

    description = (candidate.description or '').strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        return 'description too short'

    desc = description.lower()
    no_amount = not candidate.amount
    for phrase in NOISE_PHRASES:
        if desc == phrase or (no_amount and phrase in desc):
            return f"noise row '{phrase}'"

    if candidate.amount is None or candidate.amount <= 0:
        return 'missing or non-positive amount'
    return None


def is_valid(candidate: RawCandidate) -> bool:
    reason = rejection_reason(candidate)
    if reason:
        logger.debug(f"Rejected candidate {candidate.description!r}: {reason}")
        return False
    return True
