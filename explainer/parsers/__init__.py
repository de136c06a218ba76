"""Format adapters: each turns a source document into raw candidates."""

from .router import ALLOWED_EXTENSIONS, detect_format, parse_document
from .text import extract_from_text
from .tabular import extract_from_row, resolve_columns

__all__ = [
    "ALLOWED_EXTENSIONS",
    "detect_format",
    "parse_document",
    "extract_from_text",
    "extract_from_row",
    "resolve_columns",
]
