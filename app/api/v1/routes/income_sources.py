# app/api/v1/routes/income_sources.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List

from app.schemas.income_source import IncomeSourceCreate, IncomeSourceUpdate, IncomeSourceWithBalance
from app.crud.income_source import (
    count_source_transactions,
    create_source_for_user,
    delete_source,
    get_source_by_id,
    get_sources_with_transactions,
    update_source,
)
from app.core.database import get_async_session
from app.models.user import User
from app.api.deps import get_current_user
from app.utils.balances import source_with_balance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/income-sources", tags=["income sources"])


@router.get("", response_model=List[IncomeSourceWithBalance])
async def read_income_sources(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    sources = await get_sources_with_transactions(user.id, db)
    return [source_with_balance(source) for source in sources]


@router.get("/{source_id}", response_model=IncomeSourceWithBalance)
async def read_income_source(
    source_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    source = await get_source_by_id(source_id, user.id, db, with_transactions=True)
    if not source:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Income source not found")
    return source_with_balance(source)


@router.post("", response_model=IncomeSourceWithBalance, status_code=status.HTTP_201_CREATED)
async def create_income_source(
    src_in: IncomeSourceCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    try:
        source = await create_source_for_user(user.id, src_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create source error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create income source")
    source = await get_source_by_id(source.id, user.id, db, with_transactions=True)
    return source_with_balance(source)


@router.put("/{source_id}", response_model=IncomeSourceWithBalance)
async def update_income_source(
    source_id: int,
    src_in: IncomeSourceUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    source = await get_source_by_id(source_id, user.id, db)
    if not source:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Income source not found")
    try:
        await update_source(source, src_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update source error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update income source")
    source = await get_source_by_id(source_id, user.id, db, with_transactions=True)
    return source_with_balance(source)


@router.delete("/{source_id}", status_code=status.HTTP_200_OK)
async def delete_income_source(
    source_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    source = await get_source_by_id(source_id, user.id, db)
    if not source:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Income source not found")

    transaction_count = await count_source_transactions(source.id, db)
    if transaction_count > 0:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete: {transaction_count} transaction(s) are linked to this source",
        )

    try:
        await delete_source(source, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete source error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete income source")
    return {"message": "Income source deleted"}
