# app/api/v1/routes/transactions.py
import logging
import math
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional

from app.schemas.transaction import (
    TransactionCreate,
    TransactionPage,
    TransactionRead,
    TransactionUpdate,
)
from app.crud.transaction import (
    create_transaction_for_user,
    get_transactions_page,
    get_transaction_by_id,
    update_transaction,
    delete_transaction,
)
from app.crud.category import get_category_by_id
from app.crud.income_source import get_source_by_id
from app.core.database import get_async_session
from app.models.transaction import TransactionType
from app.models.user import User
from app.api.deps import get_current_user
from app.utils.reports import date_range_bounds, parse_transaction_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

MAX_PAGE_SIZE = 100


async def _check_references(
    user_id: int,
    transaction_type: TransactionType,
    category_id: int,
    source_id: int,
    db: AsyncSession,
) -> None:
    """The category must be visible to the user, the source owned, and the types must agree."""
    category = await get_category_by_id(category_id, user_id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    source = await get_source_by_id(source_id, user_id, db)
    if not source:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Income source not found")
    if category.category_type.value != transaction_type.value:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"Transaction type {transaction_type.value} does not match category type {category.category_type.value}",
        )


@router.get("", response_model=TransactionPage)
async def read_transactions(
    type: Optional[str] = Query(None, description="INCOME or EXPENSE; other values are ignored"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    source_id: Optional[int] = Query(None, alias="sourceId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, description="Page size; values above 100 are clamped to 100"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    limit = min(limit, MAX_PAGE_SIZE)
    date_from, date_until = date_range_bounds(start_date, end_date)
    transactions, total = await get_transactions_page(
        user.id,
        db,
        page=page,
        limit=limit,
        transaction_type=parse_transaction_type(type),
        category_id=category_id,
        source_id=source_id,
        date_from=date_from,
        date_until=date_until,
    )
    return {
        "transactions": transactions,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
        },
    }


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await _check_references(user.id, tx_in.transaction_type, tx_in.category_id, tx_in.source_id, db)
    try:
        tx = await create_transaction_for_user(user.id, tx_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create transaction error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create transaction")
    return await get_transaction_by_id(tx.id, user.id, db)


@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx


@router.put("/{transaction_id}", response_model=TransactionRead)
async def update_transaction_endpoint(
    transaction_id: int,
    tx_in: TransactionUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    # Validate the merged result, not just the submitted fields
    await _check_references(
        user.id,
        tx_in.transaction_type or tx.transaction_type,
        tx_in.category_id or tx.category_id,
        tx_in.source_id or tx.source_id,
        db,
    )
    try:
        await update_transaction(tx, tx_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update transaction error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update transaction")
    return await get_transaction_by_id(transaction_id, user.id, db)


@router.delete("/{transaction_id}", status_code=status.HTTP_200_OK)
async def delete_transaction_endpoint(
    transaction_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    try:
        await delete_transaction(tx, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete transaction error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete transaction")
    return {"message": "Transaction deleted"}
