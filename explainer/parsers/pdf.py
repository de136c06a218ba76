"""PDF statement adapter: line-based extraction over the document's text layer."""
import io
import logging
from typing import List, Optional

import pdfplumber

from ..errors import DocumentDecodeError
from ..models import RawCandidate
from .text import extract_from_text

logger = logging.getLogger(__name__)


def extract_pdf_text(content: bytes, password: Optional[str] = None, debug: bool = False) -> str:
    """Concatenate the text of every page. Image-only pages contribute nothing."""
    pages = []
    try:
        with pdfplumber.open(io.BytesIO(content), password=password or "") as pdf:
            for page_num, page in enumerate(pdf.pages, 1):
                page_text = page.extract_text() or ""
                if debug:
                    logger.info(f"Page {page_num} extracted {len(page_text)} characters")
                pages.append(page_text)
    except Exception as e:
        # pdfminer raises a zoo of exception types for corrupt or locked files
        logger.error(f"Error extracting text from PDF: {e}")
        raise DocumentDecodeError('PDF', str(e) or type(e).__name__) from e

    text = "\n".join(pages)
    if not text.strip():
        logger.warning("No text extracted from the PDF. It might be image-based.")
    return text


def parse_pdf(content: bytes, password: Optional[str] = None, debug: bool = False, **_) -> List[RawCandidate]:
    text = extract_pdf_text(content, password=password, debug=debug)

    candidates = []
    lines = [line for line in text.split("\n") if line.strip()]
    for line in lines:
        candidate = extract_from_text(line)
        if candidate is None:
            continue
        candidates.append(candidate)
        if debug:
            logger.debug(f"PDF line -> {candidate}")

    logger.info(f"PDF adapter produced {len(candidates)} candidates from {len(lines)} lines")
    return candidates
