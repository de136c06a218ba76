"""Keyword classification of transaction narrations.

Both the category rules and the payment-method rules are ordered tables:
they are evaluated top to bottom and the first matching rule wins. Keep
new rules in the position where they should take precedence.
"""
import re
from typing import Callable, List, NamedTuple, Optional

Predicate = Callable[[str], bool]


def contains_any(*keywords: str) -> Predicate:
    """Predicate: the lower-cased text contains at least one keyword."""
    return lambda text: any(k in text for k in keywords)


def contains_all(*predicates: Predicate) -> Predicate:
    """Predicate: every sub-predicate holds."""
    return lambda text: all(p(text) for p in predicates)


class CategoryRule(NamedTuple):
    predicate: Predicate
    category: str
    investment_type: Optional[str] = None
    merchant: Optional[str] = None


class MethodRule(NamedTuple):
    predicate: Predicate
    method: str


class Classification(NamedTuple):
    category: str
    investment_type: Optional[str]
    merchant: str


CATEGORY_RULES: List[CategoryRule] = [
    CategoryRule(contains_any('sip', 'systematic investment'), 'Investment', 'SIP'),
    CategoryRule(contains_any('mutual fund', 'mf ', 'axis', 'icici pru', 'hdfc mf'), 'Investment', 'Mutual Fund'),
    CategoryRule(contains_any('zerodha', 'groww', 'stock', 'shares'), 'Investment', 'Stocks'),
    CategoryRule(contains_any('ppf', 'provident fund'), 'Investment', 'PPF', merchant='Public Provident Fund'),
    CategoryRule(contains_any('nps', 'pension'), 'Investment', 'NPS', merchant='NPS Trust'),
    CategoryRule(contains_all(contains_any('emi'), contains_any('home', 'housing', 'hdfc ltd')), 'EMI Home Loan'),
    CategoryRule(contains_all(contains_any('emi'), contains_any('car', 'vehicle', 'auto')), 'EMI Car Loan'),
    CategoryRule(contains_any('swiggy', 'zomato', 'food', 'restaurant', 'cafe', 'starbucks'), 'Food'),
    CategoryRule(contains_any('netflix', 'spotify', 'prime', 'hotstar', 'movie', 'entertainment'), 'Entertainment'),
    CategoryRule(contains_any('electricity', 'water', 'gas', 'utility', 'bill pay'), 'Utilities'),
    CategoryRule(contains_any('amazon', 'flipkart', 'myntra', 'shopping', 'retail'), 'Shopping'),
]

DEFAULT_CATEGORY = 'Other'

KNOWN_MERCHANTS = [
    'Swiggy', 'Zomato', 'Amazon', 'Flipkart', 'Netflix', 'Spotify', 'Starbucks',
    'Zerodha', 'Groww', 'HDFC', 'ICICI', 'Axis', 'SBI', 'Kotak',
]

METHOD_RULES: List[MethodRule] = [
    MethodRule(contains_any('upi', '@'), 'UPI'),
    MethodRule(contains_any('neft'), 'NEFT'),
    MethodRule(contains_any('imps'), 'IMPS'),
    MethodRule(contains_any('rtgs'), 'RTGS'),
    MethodRule(contains_any('atm'), 'ATM'),
    MethodRule(contains_any('pos', 'card'), 'Card'),
    MethodRule(contains_any('auto', 'ecs', 'nach'), 'Auto-Debit'),
]

DEFAULT_METHOD = 'Bank Transfer'

_MERCHANT_SPLIT = re.compile(r'[\s/\-]+')


def classify(description: str) -> Classification:
    """Map a narration to (category, investment type, merchant)."""
    desc = (description or '').lower()
    for rule in CATEGORY_RULES:
        if rule.predicate(desc):
            merchant = rule.merchant or extract_merchant(description)
            return Classification(rule.category, rule.investment_type, merchant)
    return Classification(DEFAULT_CATEGORY, None, extract_merchant(description))


def extract_merchant(description: str) -> str:
    """Best-effort merchant name: a known brand, else the first two real words."""
    desc = (description or '').lower()
    for merchant in KNOWN_MERCHANTS:
        if merchant.lower() in desc:
            return merchant

    words = [w for w in _MERCHANT_SPLIT.split(description or '') if len(w) > 2]
    return ' '.join(words[:2]) or 'Unknown'


def detect_method(description: str) -> str:
    """Payment-method label for a narration. Never empty."""
    desc = (description or '').lower()
    for rule in METHOD_RULES:
        if rule.predicate(desc):
            return rule.method
    return DEFAULT_METHOD
