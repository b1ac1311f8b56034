# app/models/transaction.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Float, DateTime, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    transaction_date = Column(DateTime, nullable=False, index=True)
    transaction_type = Column(Enum(TransactionType), nullable=False)
    # Always positive; the sign is implied by transaction_type
    amount = Column(Float, nullable=False)
    description = Column(String(length=255), nullable=False, default="")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    source_id = Column(Integer, ForeignKey("income_sources.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions", lazy="joined")
    source = relationship("IncomeSource", back_populates="transactions", lazy="joined")

    def __repr__(self):
        return f"<Transaction type={self.transaction_type} amount={self.amount} date={self.transaction_date} user_id={self.user_id}>"
