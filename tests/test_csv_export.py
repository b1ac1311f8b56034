"""Tests for the CSV formatter."""

from datetime import datetime
from types import SimpleNamespace

from app.models.transaction import TransactionType
from app.utils.csv_export import CSV_HEADER, transactions_to_csv


def tx(when, transaction_type, amount, category, source, description):
    return SimpleNamespace(
        transaction_date=when,
        transaction_type=transaction_type,
        amount=amount,
        category=SimpleNamespace(category_name=category),
        source=SimpleNamespace(source_name=source),
        description=description,
    )


def test_header_only_for_empty_set():
    assert transactions_to_csv([]) == CSV_HEADER + "\n"
    assert CSV_HEADER == "Date,Type,Amount,Category,Source,Description"


def test_rows_are_most_recent_first():
    csv_text = transactions_to_csv([
        tx(datetime(2024, 1, 5), TransactionType.EXPENSE, 40.0, "Rent", "Main Bank", "January rent"),
        tx(datetime(2024, 2, 1, 14, 30), TransactionType.INCOME, 99.5, "Sales Revenue", "Main Bank", "Invoice 12"),
    ])
    lines = csv_text.split("\n")
    assert lines[0] == CSV_HEADER
    assert lines[1] == '2024-02-01,INCOME,99.5,Sales Revenue,Main Bank,"Invoice 12"'
    assert lines[2] == '2024-01-05,EXPENSE,40,Rent,Main Bank,"January rent"'
    assert len(lines) == 3


def test_description_quotes_are_doubled():
    csv_text = transactions_to_csv([
        tx(datetime(2024, 3, 1), TransactionType.EXPENSE, 12.0, "Supplies", "Cash", 'Paper, "A4" pack'),
    ])
    assert csv_text.split("\n")[1] == '2024-03-01,EXPENSE,12,Supplies,Cash,"Paper, ""A4"" pack"'


def test_empty_description_is_still_quoted():
    csv_text = transactions_to_csv([
        tx(datetime(2024, 3, 1), "EXPENSE", 3.25, "Travel", "Cash", ""),
    ])
    assert csv_text.endswith(',Travel,Cash,""')
