from enum import Enum

from sqlalchemy import Column, String, ForeignKey, Date, Numeric, Boolean, CheckConstraint, true
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base


class BudgetPeriod(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Budget(BaseModel, Base):
    __tablename__ = "budgets"

    amount = Column(Numeric(12, 2), nullable=False)
    period_type = Column(SAEnum(BudgetPeriod, name="budget_period", native_enum=False), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="budgets")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_budgets_amount_positive"),
        CheckConstraint("end_date >= start_date", name="ck_budgets_date_range"),
    )
