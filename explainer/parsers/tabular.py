"""Column resolution and row extraction shared by the CSV and spreadsheet adapters."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ..models import RawCandidate
from ..utils import parse_amount_safe

logger = logging.getLogger(__name__)

# Logical field -> header synonyms, in priority order. Resolution order of the
# fields matters too: a header claimed by an earlier field is not reused.
COLUMN_SYNONYMS: Dict[str, List[str]] = {
    'date': ['date', 'txn date', 'transaction date', 'value date'],
    'description': ['description', 'narration', 'particulars', 'remarks', 'details'],
    'debit': ['debit', 'withdrawal', 'dr', 'debit amount'],
    'credit': ['credit', 'deposit', 'cr', 'credit amount'],
    'amount': ['amount', 'transaction amount', 'txn amount'],
    'balance': ['balance', 'closing balance', 'available balance'],
}

HEADER_SCAN_ROWS = 15


@dataclass
class ColumnMap:
    """Actual header names for each logical field (None when absent)."""
    date: Optional[str] = None
    description: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    amount: Optional[str] = None
    balance: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return self.date is not None and self.description is not None


def find_column(headers: Sequence[Any], synonyms: Sequence[str], exclude=()) -> Optional[str]:
    """First header containing a synonym, trying synonyms in order."""
    for name in synonyms:
        for header in headers:
            if header in exclude:
                continue
            if name in str(header).strip().lower():
                return header
    return None


def resolve_columns(headers: Sequence[Any]) -> ColumnMap:
    """Resolve every logical field against one document's header row."""
    resolved = {}
    for field_name, synonyms in COLUMN_SYNONYMS.items():
        resolved[field_name] = find_column(headers, synonyms, exclude=set(resolved.values()))
    return ColumnMap(**resolved)


def promote_header_row(df: pd.DataFrame) -> pd.DataFrame:
    """Use a later row as the header when the real header sits below a preamble."""
    if resolve_columns(list(df.columns)).is_usable:
        return df

    for idx in range(min(HEADER_SCAN_ROWS, len(df))):
        values = [_cell_text(v) for v in df.iloc[idx]]
        if resolve_columns(values).is_usable:
            logger.info(f"Using row {idx + 1} as header")
            promoted = df.iloc[idx + 1:].reset_index(drop=True)
            promoted.columns = values
            return promoted
    return df


def _cell_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return str(value).strip()


def _unique_headers(headers: Sequence[Any]) -> List[str]:
    seen: Dict[str, int] = {}
    unique = []
    for header in headers:
        name = _cell_text(header)
        if name in seen:
            seen[name] += 1
            name = f"{name}.{seen[name]}"
        else:
            seen[name] = 0
        unique.append(name)
    return unique


def _is_blank(value: Any) -> bool:
    return _cell_text(value) == ''


def _nonzero_amount(value: Any):
    if _is_blank(value):
        return None
    amount = parse_amount_safe(value)
    if amount is None or amount == 0:
        return None
    return amount


def extract_from_row(row: Mapping[str, Any], columns: ColumnMap) -> Optional[RawCandidate]:
    """Build a candidate from one tabular row.

    The debit column is checked first, then credit, then a signed generic
    amount column. A debit or credit cell that is blank or reads as zero
    counts as empty, so a "0.00" debit falls through to the credit column.
    Rows whose amount cannot be read still become candidates (with no amount)
    so the validation gate accounts for them.
    """
    if not columns.is_usable:
        return None

    amount = None
    direction = 'debit'

    debit = _nonzero_amount(row.get(columns.debit)) if columns.debit else None
    credit = _nonzero_amount(row.get(columns.credit)) if columns.credit else None
    if debit is not None:
        amount, direction = abs(debit), 'debit'
    elif credit is not None:
        amount, direction = abs(credit), 'credit'
    elif columns.amount and not _is_blank(row.get(columns.amount)):
        signed = parse_amount_safe(row.get(columns.amount))
        if signed is not None:
            direction = 'debit' if signed < 0 else 'credit'
            amount = abs(signed)

    balance = None
    if columns.balance and not _is_blank(row.get(columns.balance)):
        balance = parse_amount_safe(row.get(columns.balance))

    date_value = row.get(columns.date)
    if not isinstance(date_value, str) and pd.isna(date_value):
        date_value = None
    elif isinstance(date_value, pd.Timestamp):
        date_value = date_value.to_pydatetime()

    return RawCandidate(
        date=date_value,
        description=_cell_text(row.get(columns.description)),
        amount=amount,
        direction=direction,
        balance=balance,
    )


def frame_to_candidates(df: pd.DataFrame, debug: bool = False) -> List[RawCandidate]:
    """Turn a parsed sheet into candidates, resolving its columns once.

    A row with values under a column that has no header is misaligned (an
    unquoted separator inside a field shifts every later cell), so its amount
    is discarded and the validation gate drops it.
    """
    if df is None or df.empty:
        logger.info("Sheet has no data rows.")
        return []

    df = promote_header_row(df)
    unnamed = [i for i, header in enumerate(df.columns) if _cell_text(header) == '']
    df.columns = _unique_headers(df.columns)
    columns = resolve_columns(list(df.columns))
    if debug:
        logger.info(f"Resolved columns: {columns}")
    if not columns.is_usable:
        logger.warning(f"No date/description columns among headers {list(df.columns)}; skipping sheet.")
        return []

    candidates = []
    for idx, row in df.iterrows():
        if all(_is_blank(v) for v in row.values):
            continue
        candidate = extract_from_row(row, columns)
        if candidate is None:
            continue
        if any(not _is_blank(row.iloc[i]) for i in unnamed):
            logger.debug(f"Row {idx} has more fields than the header; dropping its amount")
            candidate.amount = None
        candidates.append(candidate)
    return candidates
