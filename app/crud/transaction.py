# app/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, func
from typing import List, Optional, Tuple
from datetime import datetime

from app.models.transaction import Transaction, TransactionType
from app.schemas.transaction import TransactionCreate, TransactionUpdate


def _filtered(
    query,
    user_id: int,
    transaction_type: Optional[TransactionType] = None,
    category_id: Optional[int] = None,
    source_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_until: Optional[datetime] = None,
):
    """Apply the owner filter plus any optional filters; ``date_until`` is exclusive."""
    query = query.where(Transaction.user_id == user_id)
    if transaction_type is not None:
        query = query.where(Transaction.transaction_type == transaction_type)
    if category_id is not None:
        query = query.where(Transaction.category_id == category_id)
    if source_id is not None:
        query = query.where(Transaction.source_id == source_id)
    if date_from is not None:
        query = query.where(Transaction.transaction_date >= date_from)
    if date_until is not None:
        query = query.where(Transaction.transaction_date < date_until)
    return query


async def get_transactions_for_user(
    user_id: int,
    db: AsyncSession,
    transaction_type: Optional[TransactionType] = None,
    date_from: Optional[datetime] = None,
    date_until: Optional[datetime] = None,
) -> List[Transaction]:
    """Every matching transaction, most recent first, with category and source loaded."""
    query = _filtered(
        select(Transaction),
        user_id,
        transaction_type=transaction_type,
        date_from=date_from,
        date_until=date_until,
    ).order_by(desc(Transaction.transaction_date), desc(Transaction.id))
    result = await db.execute(query)
    return list(result.scalars().all())

async def get_transactions_page(
    user_id: int,
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    transaction_type: Optional[TransactionType] = None,
    category_id: Optional[int] = None,
    source_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_until: Optional[datetime] = None,
) -> Tuple[List[Transaction], int]:
    """One page of matching transactions plus the total number of matches."""
    filters = dict(
        transaction_type=transaction_type,
        category_id=category_id,
        source_id=source_id,
        date_from=date_from,
        date_until=date_until,
    )
    rows = await db.execute(
        _filtered(select(Transaction), user_id, **filters)
        .order_by(desc(Transaction.transaction_date), desc(Transaction.id))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total = await db.execute(_filtered(select(func.count(Transaction.id)), user_id, **filters))
    return list(rows.scalars().all()), total.scalar_one()

async def get_transaction_by_id(transaction_id: int, user_id: int, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def create_transaction_for_user(user_id: int, tx_in: TransactionCreate, db: AsyncSession) -> Transaction:
    new_tx = Transaction(**tx_in.model_dump(), user_id=user_id)
    db.add(new_tx)
    await db.commit()
    await db.refresh(new_tx)
    return new_tx

async def update_transaction(tx: Transaction, tx_in: TransactionUpdate, db: AsyncSession) -> Transaction:
    for field, value in tx_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(tx, field, value)
    db.add(tx)
    await db.commit()
    await db.refresh(tx)
    return tx

async def delete_transaction(tx: Transaction, db: AsyncSession) -> None:
    await db.delete(tx)
    await db.commit()
