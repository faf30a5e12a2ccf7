from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Boolean, true
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    budgets = relationship("Budget", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
