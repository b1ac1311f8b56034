"""Tests for the income-source balance calculator."""

from types import SimpleNamespace

import pytest

from app.models.transaction import TransactionType
from app.utils.balances import calculate_source_balance, source_with_balance


def tx(transaction_type, amount):
    return SimpleNamespace(transaction_type=transaction_type, amount=amount)


class TestCalculateSourceBalance:
    """Balance = initial + income - expenses, recomputed from the rows given."""

    def test_income_and_expense(self):
        result = calculate_source_balance(
            100.0,
            [tx(TransactionType.INCOME, 50.0), tx(TransactionType.EXPENSE, 30.0)],
        )
        assert result == {"total_income": 50.0, "total_expenses": 30.0, "current_balance": 120.0}

    def test_empty_transaction_set(self):
        result = calculate_source_balance(250.0, [])
        assert result["total_income"] == 0
        assert result["total_expenses"] == 0
        assert result["current_balance"] == 250.0

    def test_accepts_plain_string_types(self):
        result = calculate_source_balance(0.0, [tx("INCOME", 10.0), tx("EXPENSE", 4.0), tx("EXPENSE", 1.0)])
        assert result["current_balance"] == pytest.approx(5.0)

    def test_balance_can_go_negative(self):
        result = calculate_source_balance(20.0, [tx(TransactionType.EXPENSE, 75.5)])
        assert result["current_balance"] == pytest.approx(-55.5)


def test_source_with_balance_flattens_row():
    source = SimpleNamespace(
        id=7,
        user_id=1,
        source_name="Petty Cash",
        source_type="CASH",
        initial_balance=10.0,
        is_active=True,
        created_at=None,
        updated_at=None,
        transactions=[tx(TransactionType.INCOME, 5.0)],
    )
    data = source_with_balance(source)
    assert data["source_name"] == "Petty Cash"
    assert data["total_income"] == 5.0
    assert data["current_balance"] == 15.0
    assert "transactions" not in data
