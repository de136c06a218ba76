"""Shared fixtures: an isolated Flask app and in-memory statement builders.

Every test gets its own app backed by an in-memory SQLite database, so
stored transactions never leak between tests.
"""

import io
from typing import List, Sequence

import pytest
from openpyxl import Workbook

from app import create_app
from explainer import config


@pytest.fixture
def app():
    app = create_app(config.TestingConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def csv_bytes(rows: Sequence[Sequence[str]]) -> bytes:
    """Encode rows (header first) as a UTF-8 CSV document."""
    return ("\n".join(",".join(row) for row in rows) + "\n").encode("utf-8")


def xlsx_bytes(rows: Sequence[Sequence[object]]) -> bytes:
    """Build a single-sheet workbook from rows (header or preamble first)."""
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class FakePDF:
    """Stands in for ``pdfplumber.open(...)``; pages carry canned text."""

    def __init__(self, page_texts: List[str]):
        self.pages = [FakePage(t) for t in page_texts]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pdf(monkeypatch):
    """Patch ``pdfplumber.open`` to serve the given page texts."""
    import pdfplumber

    def install(*page_texts):
        calls = []

        def _open(stream, password=None):
            calls.append({"password": password})
            return FakePDF(list(page_texts))

        monkeypatch.setattr(pdfplumber, "open", _open)
        return calls

    return install
