"""High-level orchestration: documents and messages in, transactions out.

Every record goes through the same steps: format adapter, validation gate,
classification, method detection and summary. Records are independent of
each other; a bad record is counted and dropped, never fatal.
"""
import logging
import time as _time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from .classify import classify, detect_method
from .models import RawCandidate, Transaction
from .parsers.router import detect_format, parse_document
from .parsers.text import extract_from_text
from .summary import summarize
from .utils import format_amount, normalize_date
from .validation import is_valid

logger = logging.getLogger(__name__)

Persist = Callable[[Transaction], Any]


def statement_reference() -> str:
    return f"STMT-{int(_time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def build_transaction(candidate: RawCandidate,
                      source: str = "SMS",
                      currency: str = "₹",
                      locale: str = "en-IN",
                      reference_no: Optional[str] = None) -> Transaction:
    """Classify a validated candidate and build its Transaction.

    Raises ValueError if the candidate does not yield a well-formed
    transaction (callers run the validation gate first).
    """
    category, investment_type, merchant = classify(candidate.description)
    method = detect_method(candidate.description)
    summary = summarize(candidate, category, merchant, currency=currency, locale=locale)

    if isinstance(candidate.date, datetime):
        timestamp = candidate.date
    else:
        parsed = normalize_date(candidate.date)
        if parsed is None:
            raise ValueError(f"Candidate has no valid date: {candidate.date!r}")
        timestamp = datetime.combine(parsed, time())

    balance = None
    if candidate.balance is not None:
        balance = f"{currency}{format_amount(candidate.balance, locale)}"

    return Transaction(
        raw_message=candidate.description.strip(),
        source=source,
        timestamp=timestamp,
        category=category,
        investment_type=investment_type,
        summary=summary,
        amount=candidate.amount,
        currency=currency,
        type=candidate.direction,
        merchant=merchant or None,
        method=method,
        reference_no=reference_no or candidate.reference_no,
        balance=balance,
    )


@dataclass
class IngestionResult:
    """Outcome of ingesting one document or one batch of messages."""
    transactions: List[Any] = field(default_factory=list)
    skipped: int = 0
    total_parsed: int = 0

    @property
    def count(self) -> int:
        return len(self.transactions)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> Dict[str, Any]:
        if self.is_empty:
            message = "No transactions found. Please check the file format."
        else:
            message = f"Successfully imported {self.count} transactions."
        transactions = [t.to_dict() if hasattr(t, 'to_dict') else t for t in self.transactions]
        return {
            'success': True,
            'message': message,
            'count': self.count,
            'skipped': self.skipped,
            'totalParsed': self.total_parsed,
            'empty': self.is_empty,
            'transactions': transactions,
        }


def _process(candidates: Iterable[RawCandidate], result: IngestionResult,
             persist: Optional[Persist], build: Callable[[RawCandidate], Transaction],
             debug: bool = False) -> IngestionResult:
    for candidate in candidates:
        result.total_parsed += 1
        if not is_valid(candidate):
            result.skipped += 1
            continue
        try:
            transaction = build(candidate)
            saved = persist(transaction) if persist else transaction
        except Exception as e:
            logger.warning(f"Skipping record {candidate.description!r}: {e}", exc_info=debug)
            result.skipped += 1
            continue
        result.transactions.append(saved)
    return result


class StatementExtractor:
    """Ingests one uploaded statement document (PDF, CSV or spreadsheet)."""

    def __init__(self,
                 content: bytes,
                 filename: str = None,
                 mimetype: str = None,
                 password: str = None,
                 currency: str = "₹",
                 locale: str = "en-IN",
                 source: str = "SMS",
                 debug: bool = False):
        # Raises UnsupportedFormatError before any parsing happens
        self.format = detect_format(filename, mimetype)
        self.content = content
        self.filename = filename
        self.password = password
        self.currency = currency
        self.locale = locale
        self.source = source
        self.debug = debug

    def extract_candidates(self) -> List[RawCandidate]:
        """Decode the document. Raises DocumentDecodeError if it is unreadable."""
        logger.info(f"Extracting {self.format} document {self.filename!r} ({len(self.content)} bytes)")
        return parse_document(self.content, self.format, password=self.password, debug=self.debug)

    def build(self, candidate: RawCandidate) -> Transaction:
        return build_transaction(
            candidate,
            source=self.source,
            currency=self.currency,
            locale=self.locale,
            reference_no=candidate.reference_no or statement_reference(),
        )

    def extract_all(self) -> IngestionResult:
        """Extract and classify without persisting anything."""
        return self.ingest(persist=None)

    def ingest(self, persist: Optional[Persist] = None) -> IngestionResult:
        """Run the whole pipeline, handing each transaction to ``persist``.

        Whatever ``persist`` returns is collected in the result. Records that
        fail validation, construction or persistence are counted in
        ``skipped``.
        """
        candidates = self.extract_candidates()
        result = _process(candidates, IngestionResult(), persist, self.build, debug=self.debug)
        logger.info(f"Ingested {self.filename!r}: parsed={result.total_parsed}, "
                    f"imported={result.count}, skipped={result.skipped}")
        return result


def parse_message(body: str,
                  address: str = None,
                  timestamp_millis: Optional[int] = None,
                  source: str = "SMS",
                  currency: str = "₹",
                  locale: str = "en-IN") -> Optional[Transaction]:
    """Parse one bank SMS/email body into a Transaction, or None if it is not one.

    The message's receipt time stands in for the date when the body carries
    no date of its own.
    """
    received_at = None
    if timestamp_millis is not None:
        received_at = datetime.fromtimestamp(int(timestamp_millis) / 1000, tz=timezone.utc).replace(tzinfo=None)

    candidate = extract_from_text(body, default_date=received_at, keep_full_description=True)
    if candidate is None:
        logger.debug(f"No amount/date found in message from {address!r}")
        return None
    if not is_valid(candidate):
        return None
    return build_transaction(candidate, source=source, currency=currency, locale=locale)


def ingest_messages(messages: Iterable[Dict[str, Any]],
                    persist: Optional[Persist] = None,
                    source: str = "SMS",
                    currency: str = "₹",
                    locale: str = "en-IN") -> IngestionResult:
    """Batch form of ``parse_message`` for ``{address, body, timestampMillis}`` dicts.

    Messages that are not transactions (OTPs, promotions) count as skipped.
    """
    result = IngestionResult()
    for message in messages:
        result.total_parsed += 1
        try:
            transaction = parse_message(
                message.get('body') or '',
                address=message.get('address'),
                timestamp_millis=message.get('timestampMillis'),
                source=message.get('source') or source,
                currency=currency,
                locale=locale,
            )
            if transaction is None:
                result.skipped += 1
                continue
            saved = persist(transaction) if persist else transaction
        except Exception as e:
            logger.warning(f"Skipping message from {message.get('address')!r}: {e}")
            result.skipped += 1
            continue
        result.transactions.append(saved)
    return result
