from typing import Any

from .utils import format_amount


def summarize(candidate: Any, category: str, merchant: str,
              currency: str = "₹", locale: str = "en-IN") -> str:
    """One-line plain-English explanation of a classified transaction.

    ``candidate`` only needs ``amount`` and ``direction`` attributes.
    """
    amount = f"{currency}{format_amount(candidate.amount, locale)}"

    if category == 'Investment':
        return f"You invested {amount} in {merchant}."
    if 'EMI' in category:
        loan = category[len('EMI '):] if category.startswith('EMI ') else category
        return f"Your {loan} EMI of {amount} was debited."

    verb = 'received' if candidate.direction == 'credit' else 'paid'
    return f"You {verb} {amount} to {merchant}."
