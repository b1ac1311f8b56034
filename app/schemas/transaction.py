# app/schemas/transaction.py
from typing import List, Optional
from pydantic import Field, field_validator
from datetime import date, datetime, timezone

from app.models.transaction import TransactionType
from app.schemas.base import CamelModel
from app.schemas.category import CategorySummary
from app.schemas.income_source import SourceSummary


def _normalize_transaction_date(value):
    """Accept YYYY-MM-DD as midnight and store aware datetimes as naive UTC."""
    if isinstance(value, str) and len(value) == 10:
        parsed = date.fromisoformat(value)
        return datetime(parsed.year, parsed.month, parsed.day)
    return value


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TransactionBase(CamelModel):
    transaction_date: datetime = Field(..., description="Date or ISO 8601 date/time of the transaction")
    transaction_type: TransactionType
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    description: str = Field("", max_length=255)
    category_id: int
    source_id: int

    @field_validator("transaction_date", mode="before")
    @classmethod
    def parse_date_only(cls, value):
        return _normalize_transaction_date(value)

    @field_validator("transaction_date")
    @classmethod
    def strip_timezone(cls, value: datetime) -> datetime:
        return _to_naive_utc(value)

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(CamelModel):
    transaction_date: Optional[datetime] = None
    transaction_type: Optional[TransactionType] = None
    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=255)
    category_id: Optional[int] = None
    source_id: Optional[int] = None

    @field_validator("transaction_date", mode="before")
    @classmethod
    def parse_date_only(cls, value):
        return _normalize_transaction_date(value)

    @field_validator("transaction_date")
    @classmethod
    def strip_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(value)

class TransactionRead(CamelModel):
    id: int
    user_id: int
    transaction_date: datetime
    transaction_type: TransactionType
    amount: float
    description: str
    category_id: int
    source_id: int
    category: Optional[CategorySummary] = None
    source: Optional[SourceSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

class TransactionPage(CamelModel):
    transactions: List[TransactionRead]
    pagination: Pagination
