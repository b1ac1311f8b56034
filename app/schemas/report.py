# app/schemas/report.py
from app.models.category import CategoryType
from app.schemas.base import CamelModel

class ReportSummary(CamelModel):
    total_income: float
    total_expenses: float
    net_balance: float
    transaction_count: int
    active_sources: int

class CategoryBreakdownItem(CamelModel):
    category_id: int
    category_name: str
    category_type: CategoryType
    total: float
    count: int

class MonthlyTrend(CamelModel):
    month: str
    income: float
    expenses: float
    net: float
