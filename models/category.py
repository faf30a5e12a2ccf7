from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Boolean, ForeignKey, Index, false

from models.base_model import BaseModel, Base


class Category(BaseModel, Base):
    __tablename__ = "categories"

    name = Column(String(64), nullable=False)
    icon = Column(String(16), nullable=True)
    color = Column(String(7), nullable=True)  # "#RRGGBB"
    # Default categories are shared by every user and have no owner
    is_default = Column(Boolean, nullable=False, default=False, server_default=false())
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    user = relationship("User", back_populates="categories")
    expenses = relationship("Expense", back_populates="category", passive_deletes=True)

    __table_args__ = (
        Index("ix_categories_name", "name"),
    )
