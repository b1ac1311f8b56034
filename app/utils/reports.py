# app/utils/reports.py
"""
Report aggregation over transaction rows already filtered by owner and date range.

All functions are pure: they only read ``transaction_type``, ``amount``,
``transaction_date``, ``category_id`` and ``category`` from each row.
"""
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.core.database import utcnow
from app.models.transaction import TransactionType


def parse_transaction_type(value: Optional[str]) -> Optional[TransactionType]:
    """Map a query value to a TransactionType; anything unrecognised means no filter."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError:
        return None


def date_range_bounds(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Translate inclusive calendar-day bounds into datetimes for querying.

    Returns ``(lower, upper)`` where rows match ``lower <= d < upper``. The upper
    bound is midnight after ``end_date`` so the whole end day is included.
    """
    lower = datetime.combine(start_date, time.min) if start_date else None
    upper = datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
    return lower, upper


def trend_window_start(months: int, today: Optional[date] = None) -> datetime:
    """First day of the month ``months`` months before the current UTC month."""
    today = today or utcnow().date()
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    return datetime(year, month + 1, 1)


def _type_value(transaction_type: Any) -> str:
    return getattr(transaction_type, "value", transaction_type)


def _totals(transactions: Iterable[Any]) -> Tuple[float, float, int]:
    income = 0.0
    expenses = 0.0
    count = 0
    for tx in transactions:
        count += 1
        if _type_value(tx.transaction_type) == TransactionType.INCOME.value:
            income += tx.amount
        else:
            expenses += tx.amount
    return income, expenses, count


def build_summary(transactions: Iterable[Any], active_sources: int) -> Dict[str, Any]:
    income, expenses, count = _totals(transactions)
    return {
        "total_income": income,
        "total_expenses": expenses,
        "net_balance": income - expenses,
        "transaction_count": count,
        "active_sources": active_sources,
    }


def build_category_breakdown(
    transactions: Iterable[Any],
    transaction_type: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Group transactions by category, largest total first.

    ``transaction_type`` values other than INCOME/EXPENSE are ignored. Categories
    with no matching transactions never appear in the result.
    """
    wanted = parse_transaction_type(transaction_type)
    breakdown: Dict[int, Dict[str, Any]] = {}

    for tx in transactions:
        if wanted is not None and _type_value(tx.transaction_type) != wanted.value:
            continue
        entry = breakdown.get(tx.category_id)
        if entry is None:
            entry = breakdown[tx.category_id] = {
                "category_id": tx.category_id,
                "category_name": tx.category.category_name,
                "category_type": tx.category.category_type,
                "total": 0.0,
                "count": 0,
            }
        entry["total"] += tx.amount
        entry["count"] += 1

    return sorted(breakdown.values(), key=lambda item: item["total"], reverse=True)


def build_monthly_trends(transactions: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Bucket transactions by the calendar month of their own date.

    Months without transactions are absent, so callers must handle gaps.
    """
    buckets: Dict[str, Dict[str, float]] = defaultdict(lambda: {"income": 0.0, "expenses": 0.0})

    for tx in transactions:
        key = tx.transaction_date.strftime("%Y-%m")
        if _type_value(tx.transaction_type) == TransactionType.INCOME.value:
            buckets[key]["income"] += tx.amount
        else:
            buckets[key]["expenses"] += tx.amount

    # "YYYY-MM" sorts lexicographically in chronological order
    return [
        {
            "month": month,
            "income": data["income"],
            "expenses": data["expenses"],
            "net": data["income"] - data["expenses"],
        }
        for month, data in sorted(buckets.items())
    ]
