from datetime import date, datetime
from decimal import Decimal

import pytest

from explainer.utils import find_amounts, find_date_token, format_amount, normalize_date, parse_amount_safe


# ---- Dates -------------------------------------------------------------------


@pytest.mark.parametrize(
    "token",
    ["27-12-24", "27/12/2024", "2024-12-27", "27-12-2024", "27/12/24"],
)
def test_numeric_date_shapes_agree(token):
    assert normalize_date(token) == date(2024, 12, 27)


def test_day_first_for_ambiguous_dates():
    assert normalize_date("01/03/2024") == date(2024, 3, 1)


def test_month_name_dates_use_fallback_parser():
    assert normalize_date("27-Dec-24") == date(2024, 12, 27)
    assert normalize_date("27 December 2024") == date(2024, 12, 27)


def test_impossible_calendar_dates_are_rejected():
    assert normalize_date("31/02/2024") is None
    assert normalize_date("2024-13-01") is None


@pytest.mark.parametrize("token", [None, "", "   ", "not a date", 12345, 45000.0])
def test_non_dates_return_none(token):
    assert normalize_date(token) is None


def test_native_dates_pass_through():
    assert normalize_date(datetime(2024, 12, 27, 10, 30)) == date(2024, 12, 27)
    assert normalize_date(date(2024, 12, 27)) == date(2024, 12, 27)


def test_find_date_token_ignores_reference_fragments():
    line = "UPI/3456789012/Starbucks 27/12/2024 450.00"
    m = find_date_token(line)
    assert m is not None
    assert m.group(1) == "27/12/2024"


# ---- Amounts -----------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Rs. 1,250.00", Decimal("1250.00")),
        ("INR 99", Decimal("99")),
        ("1250.00 Dr", Decimal("1250.00")),
        ("1250.00 Dr.", Decimal("1250.00")),
        ("₹12,450.50", Decimal("12450.50")),
        ("-500", Decimal("-500")),
        (5000, Decimal("5000")),
        (5000.5, Decimal("5000.5")),
    ],
)
def test_parse_amount_safe(raw, expected):
    assert parse_amount_safe(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "-", "abc", float("nan"), float("inf"), True])
def test_parse_amount_safe_rejects_garbage(raw):
    assert parse_amount_safe(raw) is None


def test_currency_anchored_amounts_win_over_account_fragments():
    amounts = find_amounts("Acct XX8901 debited by Rs. 450.00. Avl Bal: Rs 12,450.50.")
    assert [a for a, _ in amounts] == [Decimal("450.00"), Decimal("12450.50")]


def test_decimal_amounts_win_over_plain_integers():
    amounts = find_amounts("POS 4521 AMAZON 1,299.00 45,000.00")
    assert [a for a, _ in amounts] == [Decimal("1299.00"), Decimal("45000.00")]


def test_plain_integers_used_when_nothing_better():
    amounts = find_amounts("Paid 500 to grocer")
    assert [a for a, _ in amounts] == [Decimal("500")]


def test_no_amounts():
    assert find_amounts("Your OTP is ready") == []
    assert find_amounts("") == []


# ---- Display formatting ------------------------------------------------------


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("450.00"), "450"),
        (Decimal("12450.50"), "12,450.5"),
        (Decimal("1234567"), "12,34,567"),
        (Decimal("100000"), "1,00,000"),
        (Decimal("999"), "999"),
        (Decimal("5000"), "5,000"),
    ],
)
def test_format_amount_indian_grouping(amount, expected):
    assert format_amount(amount) == expected


def test_format_amount_other_locales_group_by_thousands():
    assert format_amount(Decimal("1234567.5"), locale="en-US") == "1,234,567.5"
    assert format_amount(Decimal("450.00"), locale="en-GB") == "450"
