"""Aggregations over stored transactions for the analytics endpoints.

Works with anything exposing ``type``, ``category``, ``investment_type`` and
``amount`` attributes (Transaction values or stored records).
"""
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


def _percentage(part: Decimal, whole: Decimal) -> float:
    return float(part / whole * 100) if whole > 0 else 0.0


def category_breakdown(transactions: Iterable[Any]) -> Dict[str, Any]:
    """Debit spend per category, largest first."""
    groups = defaultdict(lambda: {'total': Decimal('0'), 'count': 0})
    total_spend = Decimal('0')

    for t in transactions:
        if t.type != 'debit':
            continue
        amount = Decimal(str(t.amount))
        groups[t.category]['total'] += amount
        groups[t.category]['count'] += 1
        total_spend += amount

    categories = [
        {
            'name': name,
            'total': float(data['total']),
            'count': data['count'],
            'percentage': _percentage(data['total'], total_spend),
        }
        for name, data in groups.items()
    ]
    categories.sort(key=lambda c: c['total'], reverse=True)
    logger.debug(f"Category breakdown over {len(categories)} categories, total spend {total_spend}")
    return {'totalSpend': float(total_spend), 'categories': categories}


def investment_breakdown(investments: Iterable[Any]) -> Dict[str, Any]:
    """Invested amount per investment type, largest first."""
    groups = defaultdict(lambda: {'total': Decimal('0'), 'count': 0})
    total_investment = Decimal('0')

    for t in investments:
        kind = t.investment_type or 'Other'
        amount = Decimal(str(t.amount))
        groups[kind]['total'] += amount
        groups[kind]['count'] += 1
        total_investment += amount

    breakdown: List[Dict[str, Any]] = [
        {
            'type': kind,
            'total': float(data['total']),
            'count': data['count'],
            'percentage': _percentage(data['total'], total_investment),
        }
        for kind, data in groups.items()
    ]
    breakdown.sort(key=lambda i: i['total'], reverse=True)
    return {'totalInvestment': float(total_investment), 'investments': breakdown}
