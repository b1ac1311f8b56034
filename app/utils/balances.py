# app/utils/balances.py
from typing import Any, Dict, Iterable

from app.models.transaction import TransactionType


def _type_value(transaction_type: Any) -> str:
    return getattr(transaction_type, "value", transaction_type)


def calculate_source_balance(initial_balance: float, transactions: Iterable[Any]) -> Dict[str, float]:
    """
    Derive the running balance of an income source from its linked transactions.

    Nothing is cached: the figures are recomputed from the ledger on every read,
    so they always reflect the transactions currently stored.
    """
    total_income = 0.0
    total_expenses = 0.0
    for tx in transactions:
        tx_type = _type_value(tx.transaction_type)
        if tx_type == TransactionType.INCOME.value:
            total_income += tx.amount
        elif tx_type == TransactionType.EXPENSE.value:
            total_expenses += tx.amount

    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "current_balance": (initial_balance or 0.0) + total_income - total_expenses,
    }


def source_with_balance(source: Any) -> Dict[str, Any]:
    """Flatten a source row and attach its derived balance fields."""
    data = {
        "id": source.id,
        "user_id": source.user_id,
        "source_name": source.source_name,
        "source_type": source.source_type,
        "initial_balance": source.initial_balance,
        "is_active": source.is_active,
        "created_at": source.created_at,
        "updated_at": source.updated_at,
    }
    data.update(calculate_source_balance(source.initial_balance, source.transactions))
    return data
