"""Data model for extracted candidates and finished transactions."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

CATEGORIES = (
    "Food",
    "Entertainment",
    "EMI Home Loan",
    "EMI Car Loan",
    "Utilities",
    "Shopping",
    "Investment",
    "Other",
)

INVESTMENT_TYPES = ("SIP", "Mutual Fund", "Stocks", "PPF", "NPS", "Bonds", "Other")

TRANSACTION_TYPES = ("debit", "credit", "alert")

DIRECTIONS = ("debit", "credit")

SOURCES = ("SMS", "Email", "Statement")

CENTS = Decimal("0.01")


@dataclass
class RawCandidate:
    """An extracted record that has not been validated or classified yet.

    ``date`` is the raw token as found in the source (a string, or a native
    date/datetime for spreadsheet cells). ``amount`` is never negative; the
    sign lives in ``direction``.
    """
    date: Any
    description: str
    amount: Optional[Decimal]
    direction: str = "debit"
    balance: Optional[Decimal] = None
    reference_no: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """A classified transaction, ready to be handed to the repository."""
    raw_message: str
    source: str
    timestamp: datetime
    category: str
    summary: str
    amount: Decimal
    type: str
    currency: str = "₹"
    investment_type: Optional[str] = None
    merchant: Optional[str] = None
    method: Optional[str] = None
    reference_no: Optional[str] = None
    balance: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        if self.source not in SOURCES:
            raise ValueError(f"Unknown source: {self.source!r}")
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown category: {self.category!r}")
        if self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type: {self.type!r}")
        if self.category == "Investment":
            if self.investment_type not in INVESTMENT_TYPES:
                raise ValueError(f"Investment transactions need a valid investment type, got {self.investment_type!r}")
        elif self.investment_type is not None:
            raise ValueError("investment_type is only allowed for the Investment category")
        if not isinstance(self.timestamp, datetime):
            raise ValueError(f"timestamp must be a datetime, got {type(self.timestamp).__name__}")
        if not self.raw_message or not self.summary:
            raise ValueError("raw_message and summary are required")

        try:
            amount = Decimal(str(self.amount)).quantize(CENTS)
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid amount: {self.amount!r}") from e
        if amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")
        if amount >= Decimal("1e10"):
            raise ValueError(f"Amount does not fit decimal(12,2): {amount}")
        # frozen dataclass: normalise the stored amount in place
        object.__setattr__(self, "amount", amount)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the client-facing camelCase field names."""
        return {
            'rawMessage': self.raw_message,
            'source': self.source,
            'timestamp': self.timestamp.isoformat(),
            'category': self.category,
            'investmentType': self.investment_type,
            'summary': self.summary,
            'amount': f"{self.amount:.2f}",
            'currency': self.currency,
            'type': self.type,
            'merchant': self.merchant,
            'method': self.method,
            'referenceNo': self.reference_no,
            'balance': self.balance,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Transaction":
        """Build a Transaction from its camelCase dictionary form.

        Raises ``ValueError`` (or ``KeyError`` for missing required keys) when
        the payload does not describe a valid transaction.
        """
        timestamp = data['timestamp']
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return Transaction(
            raw_message=data['rawMessage'],
            source=data['source'],
            timestamp=timestamp,
            category=data['category'],
            investment_type=data.get('investmentType'),
            summary=data['summary'],
            amount=data['amount'],
            currency=data.get('currency') or "₹",
            type=data['type'],
            merchant=data.get('merchant'),
            method=data.get('method'),
            reference_no=data.get('referenceNo'),
            balance=data.get('balance'),
        )
