from decimal import Decimal

import pytest

from explainer.models import RawCandidate
from explainer.summary import summarize
from explainer.validation import is_valid, rejection_reason


def _candidate(description="SWIGGY ORDER", amount=Decimal("250"), date="01/03/2024", direction="debit"):
    return RawCandidate(date=date, description=description, amount=amount, direction=direction)


# ---- Summary templates -------------------------------------------------------


def test_payment_summary():
    assert summarize(_candidate(amount=Decimal("450.00")), "Food", "Starbucks") == "You paid ₹450 to Starbucks."


def test_credit_summary():
    c = _candidate(amount=Decimal("25000"), direction="credit")
    assert summarize(c, "Other", "ACME CORP") == "You received ₹25,000 to ACME CORP."


def test_investment_summary():
    assert summarize(_candidate(amount=Decimal("5000")), "Investment", "ICICI") == "You invested ₹5,000 in ICICI."


@pytest.mark.parametrize(
    "category, expected",
    [
        ("EMI Home Loan", "Your Home Loan EMI of ₹32,500 was debited."),
        ("EMI Car Loan", "Your Car Loan EMI of ₹32,500 was debited."),
    ],
)
def test_emi_summary(category, expected):
    assert summarize(_candidate(amount=Decimal("32500")), category, "HDFC") == expected


def test_currency_and_locale_are_parameters():
    summary = summarize(_candidate(amount=Decimal("1234567")), "Shopping", "Amazon", currency="$", locale="en-US")
    assert summary == "You paid $1,234,567 to Amazon."


# ---- Validation gate ---------------------------------------------------------


def test_valid_candidate_passes():
    assert is_valid(_candidate())
    assert rejection_reason(_candidate()) is None


@pytest.mark.parametrize("date", [None, "", "31/02/2024", "garbage"])
def test_rejects_bad_dates(date):
    assert not is_valid(_candidate(date=date))


@pytest.mark.parametrize("description", ["", "  ", "ab", " x "])
def test_rejects_short_descriptions(description):
    assert not is_valid(_candidate(description=description))


@pytest.mark.parametrize("description", ["Opening Balance", "closing balance", "TOTAL", "Balance B/F"])
def test_rejects_noise_rows(description):
    assert not is_valid(_candidate(description=description, amount=None))
    # An exact match is noise even when the row carries an amount
    assert not is_valid(_candidate(description=description))


def test_noise_substring_only_rejected_without_amount():
    assert not is_valid(_candidate(description="Page 2 of 5", amount=None))
    # "date" is a noise phrase, but "update" with an amount is a real row
    assert is_valid(_candidate(description="Mandate update fee", amount=Decimal("59")))


@pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("-10")])
def test_rejects_missing_or_non_positive_amounts(amount):
    assert not is_valid(_candidate(amount=amount))
