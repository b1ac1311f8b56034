# app/crud/income_source.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from sqlalchemy import desc, func
from typing import List, Optional

from app.models.income_source import IncomeSource
from app.models.transaction import Transaction
from app.schemas.income_source import IncomeSourceCreate, IncomeSourceUpdate

async def get_sources_with_transactions(user_id: int, db: AsyncSession) -> List[IncomeSource]:
    """All of the user's sources, newest first, with linked transactions loaded."""
    result = await db.execute(
        select(IncomeSource)
        .where(IncomeSource.user_id == user_id)
        .options(selectinload(IncomeSource.transactions))
        .order_by(desc(IncomeSource.created_at), desc(IncomeSource.id))
    )
    return list(result.scalars().all())

async def get_source_by_id(
    source_id: int,
    user_id: int,
    db: AsyncSession,
    with_transactions: bool = False,
) -> Optional[IncomeSource]:
    query = select(IncomeSource).where(IncomeSource.id == source_id, IncomeSource.user_id == user_id)
    if with_transactions:
        # populate_existing so a source already in the session picks up new transactions
        query = query.options(selectinload(IncomeSource.transactions)).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def count_active_sources(user_id: int, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(IncomeSource.id)).where(
            IncomeSource.user_id == user_id,
            IncomeSource.is_active.is_(True),
        )
    )
    return result.scalar_one()

async def count_source_transactions(source_id: int, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Transaction.id)).where(Transaction.source_id == source_id)
    )
    return result.scalar_one()

async def create_source_for_user(user_id: int, src_in: IncomeSourceCreate, db: AsyncSession) -> IncomeSource:
    new_src = IncomeSource(**src_in.model_dump(), user_id=user_id)
    db.add(new_src)
    await db.commit()
    await db.refresh(new_src)
    return new_src

async def update_source(source: IncomeSource, src_in: IncomeSourceUpdate, db: AsyncSession) -> IncomeSource:
    for field, value in src_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(source, field, value)
    db.add(source)
    await db.commit()
    await db.refresh(source)
    return source

async def delete_source(source: IncomeSource, db: AsyncSession) -> None:
    await db.delete(source)
    await db.commit()
