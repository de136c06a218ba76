"""Explain My Money: bank message and statement parsing engine.

This package provides:
- StatementExtractor: ingest one PDF/CSV/spreadsheet statement
- parse_message / ingest_messages: ingest bank SMS or email bodies
- classify, detect_method, summarize: the enrichment steps
- is_valid: the validation gate for extracted candidates
- parsers: format adapters and the format router
"""

__all__ = [
    "StatementExtractor",
    "IngestionResult",
    "build_transaction",
    "parse_message",
    "ingest_messages",
    "classify",
    "detect_method",
    "summarize",
    "is_valid",
    "normalize_date",
    "RawCandidate",
    "Transaction",
]

from .classify import classify, detect_method
from .extractor import IngestionResult, StatementExtractor, build_transaction, ingest_messages, parse_message
from .models import RawCandidate, Transaction
from .summary import summarize
from .utils import normalize_date
from .validation import is_valid
