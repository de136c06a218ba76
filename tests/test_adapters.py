from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import csv_bytes, xlsx_bytes
from explainer.errors import DocumentDecodeError, UnsupportedFormatError
from explainer.parsers.csv_parser import parse_csv
from explainer.parsers.excel import excel_serial_to_date, parse_excel
from explainer.parsers.pdf import parse_pdf
from explainer.parsers.router import detect_format, parse_document
from explainer.utils import normalize_date

# ---- Router ------------------------------------------------------------------


@pytest.mark.parametrize(
    "filename, mimetype, fmt",
    [
        ("statement.pdf", None, "pdf"),
        ("STATEMENT.PDF", None, "pdf"),
        ("export.csv", None, "csv"),
        ("export.xlsx", None, "spreadsheet"),
        ("export.xls", None, "spreadsheet"),
        ("download", "application/pdf", "pdf"),
        ("download", "text/csv; charset=utf-8", "csv"),
        (None, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "spreadsheet"),
        (None, "application/vnd.ms-excel", "spreadsheet"),
    ],
)
def test_detect_format(filename, mimetype, fmt):
    assert detect_format(filename, mimetype) == fmt


def test_extension_wins_over_mimetype():
    assert detect_format("statement.csv", "application/pdf") == "csv"


def test_unsupported_format():
    with pytest.raises(UnsupportedFormatError):
        detect_format("notes.txt", "text/plain")
    with pytest.raises(UnsupportedFormatError):
        detect_format(None, None)


def test_parse_document_rejects_unknown_format():
    with pytest.raises(UnsupportedFormatError):
        parse_document(b"", "docx")


# ---- CSV ---------------------------------------------------------------------


def test_csv_rows_become_candidates():
    content = csv_bytes([
        ["Date", "Narration", "Debit", "Credit", "Balance"],
        ["01/03/2024", "SWIGGY ORDER", "250.00", "", "9750.00"],
        ["05/03/2024", "SALARY ACME", "", "50000.00", "59750.00"],
    ])
    candidates = parse_csv(content)
    assert len(candidates) == 2
    assert (candidates[0].amount, candidates[0].direction) == (Decimal("250.00"), "debit")
    assert (candidates[1].amount, candidates[1].direction) == (Decimal("50000.00"), "credit")
    assert candidates[1].balance == Decimal("59750.00")


def test_csv_quoted_amounts_with_grouping():
    content = b'Date,Narration,Amount\n01/03/2024,HOME LOAN EMI,"-32,500.00"\n'
    candidates = parse_csv(content)
    assert candidates[0].amount == Decimal("32500.00")
    assert candidates[0].direction == "debit"


def test_csv_preamble_rows_are_skipped():
    content = csv_bytes([
        ["HDFC BANK", "", ""],
        ["Account No: XX8901", "", ""],
        ["Date", "Narration", "Debit"],
        ["01/03/2024", "SWIGGY ORDER", "250"],
    ])
    candidates = parse_csv(content)
    assert [c.description for c in candidates] == ["SWIGGY ORDER"]


def test_csv_short_preamble_lines():
    content = (
        b"HDFC BANK STATEMENT\n"
        b"Account No: XX8901\n"
        b"Date,Narration,Debit\n"
        b"01/03/2024,SWIGGY ORDER,250\n"
    )
    candidates = parse_csv(content)
    assert [c.description for c in candidates] == ["SWIGGY ORDER"]
    assert candidates[0].amount == Decimal("250")


def test_csv_row_with_extra_field_loses_only_its_amount():
    content = (
        b"Date,Narration,Debit\n"
        b"01/03/2024,SWIGGY ORDER,250\n"
        b"02/03/2024,NEFT,ACME PAYROLL,500\n"
        b"03/03/2024,NETFLIX,649\n"
    )
    candidates = parse_csv(content)
    assert [c.description for c in candidates] == ["SWIGGY ORDER", "NEFT", "NETFLIX"]
    assert [c.amount for c in candidates] == [Decimal("250"), None, Decimal("649")]


def test_csv_trailing_separator_on_every_line():
    content = b"Date,Narration,Debit,\n01/03/2024,SWIGGY ORDER,250,\n"
    candidates = parse_csv(content)
    assert candidates[0].amount == Decimal("250")


def test_csv_legacy_encoding():
    content = "Date,Narration,Debit\n01/03/2024,Café Coffee Day,120\n".encode("cp1252")
    candidates = parse_csv(content)
    assert candidates[0].description == "Café Coffee Day"


def test_csv_header_only_and_empty():
    assert parse_csv(b"Date,Narration,Debit\n") == []
    assert parse_csv(b"") == []


# ---- Spreadsheet -------------------------------------------------------------


def test_xlsx_rows_become_candidates():
    content = xlsx_bytes([
        ["Date", "Narration", "Debit", "Credit", "Balance"],
        [datetime(2024, 3, 1), "SWIGGY ORDER", 250, None, 9750],
        ["05/03/2024", "SALARY ACME", None, 50000, 59750],
    ])
    candidates = parse_excel(content)
    assert len(candidates) == 2
    assert normalize_date(candidates[0].date) == date(2024, 3, 1)
    assert candidates[0].amount == Decimal("250")
    assert candidates[1].direction == "credit"
    assert normalize_date(candidates[1].date) == date(2024, 3, 5)


def test_xlsx_serial_dates():
    content = xlsx_bytes([
        ["Date", "Narration", "Debit"],
        [45352, "NETFLIX", 649],
    ])
    candidates = parse_excel(content)
    assert candidates[0].date == date(2024, 3, 1)


def test_xlsx_header_below_preamble():
    content = xlsx_bytes([
        ["ICICI BANK STATEMENT"],
        [],
        ["Txn Date", "Particulars", "Withdrawal", "Deposit"],
        ["01/03/2024", "ZOMATO", 420, None],
    ])
    candidates = parse_excel(content)
    assert [c.description for c in candidates] == ["ZOMATO"]
    assert candidates[0].amount == Decimal("420")


def test_excel_serial_to_date():
    assert excel_serial_to_date(45292) == date(2024, 1, 1)


def test_corrupt_workbook_raises_decode_error():
    with pytest.raises(DocumentDecodeError):
        parse_excel(b"this is not a workbook")


# ---- PDF ---------------------------------------------------------------------


def test_pdf_lines_become_candidates(fake_pdf):
    fake_pdf(
        "HDFC BANK\nDate Narration Withdrawal Balance\n"
        "27/12/2024 SWIGGY ORDER 250.00 9,750.00\n",
        "28/12/2024 NETFLIX 649.00 9,101.00",
    )
    candidates = parse_pdf(b"%PDF-fake")
    assert [c.description for c in candidates] == ["SWIGGY ORDER", "NETFLIX"]
    assert candidates[1].balance == Decimal("9101.00")


def test_pdf_password_is_forwarded(fake_pdf):
    calls = fake_pdf("27/12/2024 SWIGGY ORDER 250.00")
    parse_pdf(b"%PDF-fake", password="secret")
    parse_pdf(b"%PDF-fake")
    assert [c["password"] for c in calls] == ["secret", ""]


def test_image_only_pdf_yields_nothing(fake_pdf):
    fake_pdf(None, None)
    assert parse_pdf(b"%PDF-fake") == []


def test_corrupt_pdf_raises_decode_error():
    with pytest.raises(DocumentDecodeError) as exc:
        parse_pdf(b"definitely not a pdf")
    assert exc.value.fmt == "PDF"
