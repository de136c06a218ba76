"""CSV statement adapter."""
import csv
import io
import logging
from typing import List

import pandas as pd

from ..errors import DocumentDecodeError
from ..models import RawCandidate
from .tabular import frame_to_candidates

logger = logging.getLogger(__name__)

ENCODINGS = ('utf-8-sig', 'cp1252', 'latin-1')


def decode_csv(content: bytes) -> str:
    last_error = None
    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError as e:
            last_error = e
    raise DocumentDecodeError('CSV', f"unknown text encoding ({last_error})")


def read_csv_frame(content: bytes) -> pd.DataFrame:
    """Read CSV bytes with every cell kept as text and no header assumed.

    Columns are sized to the widest line, so preamble lines and rows with a
    stray extra field load instead of failing the document. The header row is
    found later by ``promote_header_row``.
    """
    text = decode_csv(content)
    try:
        width = max((len(fields) for fields in csv.reader(io.StringIO(text))), default=0)
    except csv.Error as e:
        raise DocumentDecodeError('CSV', str(e)) from e
    if width == 0:
        logger.info("CSV document is empty.")
        return pd.DataFrame()

    try:
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        logger.info("CSV document is empty.")
        return pd.DataFrame()
    except (pd.errors.ParserError, ValueError) as e:
        raise DocumentDecodeError('CSV', str(e)) from e


def parse_csv(content: bytes, debug: bool = False, **_) -> List[RawCandidate]:
    df = read_csv_frame(content)
    candidates = frame_to_candidates(df, debug=debug)
    logger.info(f"CSV adapter produced {len(candidates)} candidates from {len(df)} rows")
    return candidates
