import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List, Optional, Tuple

from dateutil import parser as dateparser

# --- Date tokens ---

_MONTH_NAME = r'(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*'

DATE_TOKEN = re.compile(
    r'(?<![\w/-])('
    r'\d{4}[-/]\d{1,2}[-/]\d{1,2}'                        # 2024-12-27
    r'|\d{1,2}[-/]\d{1,2}[-/](?:\d{4}|\d{2})'             # 27/12/2024, 27-12-24
    r'|\d{1,2}[-/ ]' + _MONTH_NAME + r'[-/ ,]+\d{2,4}'    # 27-Dec-24, 27 December 2024
    r')(?![\w/-])',
    re.IGNORECASE,
)

# Tried in order; digit runs are bounded so at most one shape fits a token.
_DMY_LONG = re.compile(r'(?<!\d)(\d{1,2})[-/](\d{1,2})[-/](\d{4})(?!\d)')
_DMY_SHORT = re.compile(r'(?<!\d)(\d{1,2})[-/](\d{1,2})[-/](\d{2})(?!\d)')
_YMD = re.compile(r'(?<!\d)(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?!\d)')

# --- Amount tokens ---

_NUMBER = r'(?:\d{1,3}(?:,\d{2,3})+|\d+)(?:\.\d{1,2})?'

CURRENCY_AMOUNT = re.compile(r'(?:\brs\.?|\binr|₹)\s*(' + _NUMBER + r')(?!\d|,\d)', re.IGNORECASE)
BARE_AMOUNT = re.compile(r'(?<![\w.,/:-])(' + _NUMBER + r')(?![\w/:-]|[.,]\d)')

_NON_NUMERIC = re.compile(r'[^0-9.\-]')
_CURRENCY_PREFIX = re.compile(r'\b(?:rs|inr)\.?', re.IGNORECASE)


def parse_amount_safe(raw_value: Any) -> Optional[Decimal]:
    """Parse a currency-like value to Decimal. Returns None if not parseable.

    A leading "Rs."/"INR" and every other character outside ``[0-9.-]`` is
    dropped before conversion, so "Rs. 1,250.00" and "1250.00 Dr" both read
    as 1250.00.
    """
    if raw_value is None:
        return None
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, (int, float)):
        if isinstance(raw_value, float) and (math.isnan(raw_value) or math.isinf(raw_value)):
            return None
        return Decimal(str(raw_value))
    cleaned = _NON_NUMERIC.sub('', _CURRENCY_PREFIX.sub('', str(raw_value))).rstrip('.')
    if cleaned in {'', '.', '-', '-.'}:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def normalize_date(token: Any) -> Optional[date]:
    """Normalize a date token to a calendar date, or None when it is not one.

    Numeric shapes are read day-first (``DD-MM-YYYY``, ``DD/MM/YY``) unless the
    year leads (``YYYY-MM-DD``). Anything else goes through dateutil.
    """
    if token is None:
        return None
    if isinstance(token, datetime):
        return token.date()
    if isinstance(token, date):
        return token
    if not isinstance(token, str):
        return None
    s = token.strip()
    if not s:
        return None

    m = _DMY_LONG.search(s)
    if m:
        day, month, year = (int(g) for g in m.groups())
        return _safe_date(year, month, day)
    m = _DMY_SHORT.search(s)
    if m:
        day, month, year = (int(g) for g in m.groups())
        return _safe_date(2000 + year, month, day)
    m = _YMD.search(s)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _safe_date(year, month, day)

    try:
        return dateparser.parse(s, dayfirst=True).date()
    except (ValueError, OverflowError, TypeError):
        return None


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def find_date_token(text: str) -> Optional[re.Match]:
    """Return the first date-looking token in a line of text."""
    if not text:
        return None
    return DATE_TOKEN.search(text)


def find_amounts(text: str) -> List[Tuple[Decimal, Tuple[int, int]]]:
    """Find amount tokens in a line, in order of appearance.

    Currency-anchored amounts ("Rs. 450.00", "INR 1,200") win over bare
    numbers; among bare numbers, ones with a decimal fraction win over plain
    integers (which are often reference or account fragments).
    """
    if not text:
        return []
    matches = list(CURRENCY_AMOUNT.finditer(text))
    if not matches:
        bare = list(BARE_AMOUNT.finditer(text))
        matches = [m for m in bare if '.' in m.group(1)] or bare

    amounts = []
    for m in matches:
        value = parse_amount_safe(m.group(1))
        if value is not None:
            amounts.append((value, m.span()))
    return amounts


def format_amount(amount: Any, locale: str = "en-IN") -> str:
    """Format an amount for display, like JavaScript's ``toLocaleString``.

    Up to three fraction digits, trailing zeros dropped. Indian locales group
    as 12,34,567; every other locale groups by thousands.
    """
    value = Decimal(str(amount)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer, _, fraction = f"{abs(value):f}".partition(".")
    fraction = fraction.rstrip("0")

    if locale and locale.upper().endswith("-IN"):
        head, tail = integer[:-3], integer[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integer = ",".join(groups + [tail])
    else:
        integer = f"{int(integer):,}"

    return f"{sign}{integer}.{fraction}" if fraction else f"{sign}{integer}"
