"""Spreadsheet (XLSX/XLS) statement adapter. Only the first sheet is read."""
import io
import logging
import numbers
from datetime import date, datetime, timedelta
from typing import List

import pandas as pd

from ..errors import DocumentDecodeError
from ..models import RawCandidate
from .tabular import frame_to_candidates

logger = logging.getLogger(__name__)

# Excel's day zero (accounts for the 1900 leap-year bug)
EXCEL_EPOCH = datetime(1899, 12, 30)


def excel_serial_to_date(serial) -> date:
    return (EXCEL_EPOCH + timedelta(days=float(serial))).date()


def read_excel_frame(content: bytes) -> pd.DataFrame:
    try:
        return pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object)
    except Exception as e:
        # pandas surfaces corrupt workbooks as zipfile, openpyxl, xlrd or
        # ValueError failures depending on the engine
        logger.error(f"Could not read spreadsheet: {e}")
        raise DocumentDecodeError('spreadsheet', str(e)) from e


def parse_excel(content: bytes, debug: bool = False, **_) -> List[RawCandidate]:
    df = read_excel_frame(content)
    candidates = frame_to_candidates(df, debug=debug)

    for candidate in candidates:
        # Date cells without a date number format arrive as serial numbers
        if isinstance(candidate.date, numbers.Real) and not isinstance(candidate.date, bool):
            try:
                candidate.date = excel_serial_to_date(candidate.date)
            except (OverflowError, ValueError):
                candidate.date = None

    logger.info(f"Spreadsheet adapter produced {len(candidates)} candidates from {len(df)} rows")
    return candidates
