# app/models/income_source.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Float, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

class SourceType(str, enum.Enum):
    BANK = "BANK"
    CASH = "CASH"
    OTHER = "OTHER"

class IncomeSource(Base):
    __tablename__ = "income_sources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    source_name = Column(String(length=100), nullable=False)
    source_type = Column(Enum(SourceType), default=SourceType.BANK, nullable=False)
    initial_balance = Column(Float, default=0.0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="income_sources")
    transactions = relationship("Transaction", back_populates="source")

    def __repr__(self):
        return f"<IncomeSource name={self.source_name} type={self.source_type} user_id={self.user_id}>"
