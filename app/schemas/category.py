# app/schemas/category.py
from typing import List, Optional
from datetime import datetime
from pydantic import Field

from app.models.category import CategoryType
from app.schemas.base import CamelModel

class CategoryCreate(CamelModel):
    category_name: str = Field(..., min_length=1, max_length=100)
    category_type: CategoryType
    parent_category_id: Optional[int] = None

class CategoryUpdate(CamelModel):
    category_name: Optional[str] = Field(None, min_length=1, max_length=100)
    category_type: Optional[CategoryType] = None
    parent_category_id: Optional[int] = None

class CategoryRead(CamelModel):
    id: int
    category_name: str
    category_type: CategoryType
    is_custom: bool
    parent_category_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CategoryWithChildren(CategoryRead):
    sub_categories: List[CategoryRead] = []
    transaction_count: int = 0

class CategorySummary(CamelModel):
    id: int
    category_name: str
    category_type: CategoryType
