"""Transaction repository backed by Flask-SQLAlchemy."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

from .models import Transaction

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TransactionRecord(db.Model):
    __tablename__ = 'transactions'
    id = db.Column(db.Integer, primary_key=True)
    raw_message = db.Column(db.Text, nullable=False)
    source = db.Column(db.String(16), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, index=True)
    category = db.Column(db.String(32), nullable=False, index=True)
    investment_type = db.Column(db.String(32), nullable=True)
    summary = db.Column(db.Text, nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(8), nullable=False, default='₹')
    type = db.Column(db.String(8), nullable=False)
    merchant = db.Column(db.Text, nullable=True)
    method = db.Column(db.Text, nullable=True)
    reference_no = db.Column(db.Text, nullable=True)
    balance = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    @staticmethod
    def from_transaction(transaction: Transaction) -> "TransactionRecord":
        return TransactionRecord(
            raw_message=transaction.raw_message,
            source=transaction.source,
            timestamp=transaction.timestamp,
            category=transaction.category,
            investment_type=transaction.investment_type,
            summary=transaction.summary,
            amount=transaction.amount,
            currency=transaction.currency,
            type=transaction.type,
            merchant=transaction.merchant,
            method=transaction.method,
            reference_no=transaction.reference_no,
            balance=transaction.balance,
        )

    def to_transaction(self) -> Transaction:
        return Transaction(
            raw_message=self.raw_message,
            source=self.source,
            timestamp=self.timestamp,
            category=self.category,
            investment_type=self.investment_type,
            summary=self.summary,
            amount=self.amount,
            currency=self.currency,
            type=self.type,
            merchant=self.merchant,
            method=self.method,
            reference_no=self.reference_no,
            balance=self.balance,
            created_at=self.created_at,
        )

    def to_dict(self):
        data = self.to_transaction().to_dict()
        data['id'] = self.id
        return data


class TransactionRepository:
    """Append/delete store for transactions. Reads are newest first."""

    def __init__(self, session=None):
        self.session = session or db.session

    def create_transaction(self, transaction: Transaction) -> TransactionRecord:
        record = TransactionRecord.from_transaction(transaction)
        self.session.add(record)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to store transaction {transaction.raw_message!r}: {e}")
            raise
        return record

    def get_all_transactions(self) -> List[TransactionRecord]:
        return self.session.query(TransactionRecord).order_by(TransactionRecord.timestamp.desc()).all()

    def get_transaction_by_id(self, transaction_id: int) -> Optional[TransactionRecord]:
        return self.session.get(TransactionRecord, transaction_id)

    def delete_transaction(self, transaction_id: int) -> bool:
        record = self.get_transaction_by_id(transaction_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True

    def get_transactions_by_category(self, category: str) -> List[TransactionRecord]:
        return (self.session.query(TransactionRecord)
                .filter_by(category=category)
                .order_by(TransactionRecord.timestamp.desc())
                .all())

    def get_transactions_by_date_range(self, start: datetime, end: datetime) -> List[TransactionRecord]:
        return (self.session.query(TransactionRecord)
                .filter(TransactionRecord.timestamp >= start, TransactionRecord.timestamp <= end)
                .order_by(TransactionRecord.timestamp.desc())
                .all())

    def get_investment_transactions(self) -> List[TransactionRecord]:
        return self.get_transactions_by_category('Investment')
