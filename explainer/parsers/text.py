"""Field extraction from free text: SMS/email bodies and PDF statement lines."""
import logging
import re
from typing import Any, Optional

from ..models import RawCandidate
from ..utils import find_amounts, find_date_token

logger = logging.getLogger(__name__)

CREDIT_HINTS = ('cr', 'credit', 'received')

REFERENCE_PATTERNS = [
    re.compile(r'\bupi[/:\s-]+(\d{9,})', re.IGNORECASE),
    re.compile(r'\b(?:ref(?:erence)?|utr)\b\.?\s*(?:no|number|#)?\.?\s*[:\-]?\s*([A-Za-z0-9]{6,})', re.IGNORECASE),
]

_WHITESPACE = re.compile(r'\s+')


def infer_direction(text: str) -> str:
    """Credit when the text mentions a credit marker, debit otherwise.

    Plain substring test: "cr" also fires inside unrelated words.
    """
    lowered = (text or '').lower()
    return 'credit' if any(hint in lowered for hint in CREDIT_HINTS) else 'debit'


def extract_reference(text: str) -> Optional[str]:
    for pattern in REFERENCE_PATTERNS:
        m = pattern.search(text or '')
        if m:
            return m.group(1)
    return None


def extract_from_text(text: str, default_date: Any = None,
                      keep_full_description: bool = False) -> Optional[RawCandidate]:
    """Extract a candidate from one line or message body.

    Args:
        text: The line or message body.
        default_date: Used when the text carries no date token (for example
            the time a message was received). Without it such text is skipped.
        keep_full_description: Use the whole text as the description instead
            of the text with its date and amount tokens cut out.

    Returns:
        A RawCandidate, or None when no date or no amount could be located.
    """
    line = (text or '').strip()
    if not line:
        return None

    date_match = find_date_token(line)
    if date_match:
        date_token = date_match.group(1)
        scrubbed = line[:date_match.start()] + ' ' + line[date_match.end():]
    elif default_date is not None:
        date_token = default_date
        scrubbed = line
    else:
        return None

    amounts = find_amounts(scrubbed)
    if not amounts:
        return None

    amount = amounts[0][0]
    # Best effort: with no column anchors the last figure is assumed to be the balance
    balance = amounts[-1][0] if len(amounts) > 1 else None

    if keep_full_description:
        description = line
    else:
        pieces = []
        cursor = 0
        for _, (start, end) in amounts:
            pieces.append(scrubbed[cursor:start])
            cursor = end
        pieces.append(scrubbed[cursor:])
        description = _WHITESPACE.sub(' ', ' '.join(pieces)).strip(' -:|')

    return RawCandidate(
        date=date_token,
        description=description,
        amount=abs(amount),
        direction=infer_direction(line),
        balance=balance,
        reference_no=extract_reference(line),
    )
