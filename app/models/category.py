# app/models/category.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

class CategoryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # NULL for the shared system defaults
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    category_name = Column(String(length=100), nullable=False)
    category_type = Column(Enum(CategoryType), nullable=False)
    is_custom = Column(Boolean(), default=True, nullable=False)
    # Non-owning lookup; the nested view is built by grouping on this column
    parent_category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category")

    @property
    def is_system_default(self) -> bool:
        return not self.is_custom

    def __repr__(self):
        return f"<Category name={self.category_name} type={self.category_type} user_id={self.user_id}>"
