"""Exceptions raised while ingesting a statement document.

Only document-level problems are exceptions. A single bad row or line is
dropped and counted by the pipeline, never raised.
"""


class IngestionError(ValueError):
    """Base class for failures that abort a whole document."""


class UnsupportedFormatError(IngestionError):
    """The file extension and MIME type match none of the format adapters."""

    def __init__(self, filename=None, mimetype=None):
        self.filename = filename
        self.mimetype = mimetype
        super().__init__(
            f"Unsupported file format (filename={filename!r}, mimetype={mimetype!r}). "
            "Please upload PDF, CSV, or Excel files."
        )


class DocumentDecodeError(IngestionError):
    """The document could not be read at all (corrupt PDF, unreadable workbook...)."""

    def __init__(self, fmt: str, reason: str):
        self.fmt = fmt
        self.reason = reason
        super().__init__(f"Could not read {fmt} document: {reason}")
