# app/api/v1/routes/reports.py
import logging
from datetime import date
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_session
from app.crud.income_source import count_active_sources
from app.crud.transaction import get_transactions_for_user
from app.models.user import User
from app.api.deps import get_current_user
from app.schemas.report import CategoryBreakdownItem, MonthlyTrend, ReportSummary
from app.utils.csv_export import transactions_to_csv
from app.utils.reports import (
    build_category_breakdown,
    build_monthly_trends,
    build_summary,
    date_range_bounds,
    parse_transaction_type,
    trend_window_start,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def get_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Income, expense and net totals for the period, plus the number of active sources."""
    date_from, date_until = date_range_bounds(start_date, end_date)
    transactions = await get_transactions_for_user(user.id, db, date_from=date_from, date_until=date_until)
    active_sources = await count_active_sources(user.id, db)
    return build_summary(transactions, active_sources)


@router.get("/category-breakdown", response_model=List[CategoryBreakdownItem])
async def get_category_breakdown(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    type: Optional[str] = Query(None, description="INCOME or EXPENSE; other values are ignored"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    date_from, date_until = date_range_bounds(start_date, end_date)
    transactions = await get_transactions_for_user(
        user.id,
        db,
        transaction_type=parse_transaction_type(type),
        date_from=date_from,
        date_until=date_until,
    )
    return build_category_breakdown(transactions, type)


@router.get("/trends", response_model=List[MonthlyTrend])
async def get_trends(
    months: int = Query(6, ge=1, le=120),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Month-by-month income, expenses and net; months without activity are omitted."""
    transactions = await get_transactions_for_user(user.id, db, date_from=trend_window_start(months))
    return build_monthly_trends(transactions)


@router.get("/export-csv")
async def export_csv(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    type: Optional[str] = Query(None, description="INCOME or EXPENSE; other values are ignored"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    date_from, date_until = date_range_bounds(start_date, end_date)
    transactions = await get_transactions_for_user(
        user.id,
        db,
        transaction_type=parse_transaction_type(type),
        date_from=date_from,
        date_until=date_until,
    )
    logger.info(f"User {user.id} exported {len(transactions)} transactions")
    return Response(
        content=transactions_to_csv(transactions),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=transactions.csv"},
    )
