"""Format router: picks the adapter for an uploaded document.

The file extension decides first; the MIME type is consulted only when the
extension is missing or unknown.
"""
import logging
import os
from typing import Callable, Dict, List, Optional

from ..errors import UnsupportedFormatError
from ..models import RawCandidate
from .csv_parser import parse_csv
from .excel import parse_excel
from .pdf import parse_pdf

logger = logging.getLogger(__name__)

PARSER_REGISTRY: Dict[str, Callable[..., List[RawCandidate]]] = {
    'pdf': parse_pdf,
    'csv': parse_csv,
    'spreadsheet': parse_excel,
}

EXTENSION_FORMATS = {
    'pdf': 'pdf',
    'csv': 'csv',
    'xlsx': 'spreadsheet',
    'xls': 'spreadsheet',
}

MIME_FORMATS = {
    'application/pdf': 'pdf',
    'text/csv': 'csv',
    'application/csv': 'csv',
}

ALLOWED_EXTENSIONS = set(EXTENSION_FORMATS)


def detect_format(filename: Optional[str], mimetype: Optional[str] = None) -> str:
    """Return 'pdf', 'csv' or 'spreadsheet', or raise UnsupportedFormatError."""
    ext = os.path.splitext(filename or '')[1].lstrip('.').lower()
    if ext in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[ext]

    mime = (mimetype or '').split(';')[0].strip().lower()
    if mime in MIME_FORMATS:
        return MIME_FORMATS[mime]
    if 'spreadsheet' in mime or 'excel' in mime:
        return 'spreadsheet'

    raise UnsupportedFormatError(filename, mimetype)


def parse_document(content: bytes, fmt: str, password: Optional[str] = None,
                   debug: bool = False) -> List[RawCandidate]:
    """Run the adapter registered for ``fmt`` over a whole document."""
    parser_func = PARSER_REGISTRY.get(fmt)
    if parser_func is None:
        raise UnsupportedFormatError(mimetype=fmt)
    if debug:
        logger.info(f"Parsing document with {parser_func.__name__} ({len(content)} bytes)")
    return parser_func(content, password=password, debug=debug)
