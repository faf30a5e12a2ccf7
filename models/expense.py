from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    Date,
    Numeric,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Expense(BaseModel, Base):
    __tablename__ = "expenses"

    name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # validated > 0 (in schema)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    # Category: RESTRICT deletion while expenses reference it
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    category = relationship("Category", back_populates="expenses")
    user = relationship("User", back_populates="expenses")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("ix_expenses_user_date", "user_id", "date"),
    )
