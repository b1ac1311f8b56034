# app/schemas/income_source.py
from typing import Optional
from datetime import datetime
from pydantic import Field

from app.models.income_source import SourceType
from app.schemas.base import CamelModel

class IncomeSourceCreate(CamelModel):
    source_name: str = Field(..., min_length=1, max_length=100)
    source_type: SourceType = SourceType.BANK
    initial_balance: float = Field(0.0, allow_inf_nan=False)

class IncomeSourceUpdate(CamelModel):
    source_name: Optional[str] = Field(None, min_length=1, max_length=100)
    source_type: Optional[SourceType] = None
    initial_balance: Optional[float] = Field(None, allow_inf_nan=False)
    is_active: Optional[bool] = None

class IncomeSourceRead(CamelModel):
    id: int
    user_id: int
    source_name: str
    source_type: SourceType
    initial_balance: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class IncomeSourceWithBalance(IncomeSourceRead):
    total_income: float = 0.0
    total_expenses: float = 0.0
    current_balance: float = 0.0

class SourceSummary(CamelModel):
    id: int
    source_name: str
    source_type: SourceType
