from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy import func

from models.budget import Budget
from models.expense import Expense
from models.schemas.budget import BudgetOutSchema, BudgetStatusSchema
from services.errors import NotFoundError, ValidationError
from utils.clock import utcnow

out_schema = BudgetOutSchema()
out_list_schema = BudgetOutSchema(many=True)
status_schema = BudgetStatusSchema()


def _today() -> date:
    return utcnow().date()


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


class BudgetService:
    def __init__(self, storage, today: Callable[[], date] = _today):
        self.storage = storage
        self.today = today

    def _get_owned(self, budget_id: str, user_id: str) -> Budget:
        session = self.storage.get_session()
        b = session.query(Budget).filter(Budget.id == budget_id, Budget.user_id == user_id).first()
        if b is None:
            raise NotFoundError("Budget not found")
        return b

    def create(self, user_id: str, data: dict) -> dict:
        b = Budget(
            amount=data["amount"],
            period_type=data["period_type"],
            start_date=data["start_date"],
            end_date=data["end_date"],
            is_active=data.get("is_active", True),
            user_id=user_id,
        )
        self.storage.new(b)
        self.storage.save()
        return out_schema.dump(b)

    def find_all(self, user_id: str, is_active: Optional[bool] = None) -> list:
        session = self.storage.get_session()
        q = session.query(Budget).filter(Budget.user_id == user_id)
        if is_active is not None:
            q = q.filter(Budget.is_active.is_(is_active))
        return out_list_schema.dump(q.order_by(Budget.start_date.desc()).all())

    def current_budget(self, user_id: str) -> Optional[Budget]:
        """The active budget whose period covers today; the latest one if several do."""
        today = self.today()
        session = self.storage.get_session()
        return (
            session.query(Budget)
            .filter(
                Budget.user_id == user_id,
                Budget.is_active.is_(True),
                Budget.start_date <= today,
                Budget.end_date >= today,
            )
            .order_by(Budget.start_date.desc())
            .first()
        )

    def find_current(self, user_id: str) -> Optional[dict]:
        b = self.current_budget(user_id)
        return self.status_of(b) if b is not None else None

    def find_one(self, budget_id: str, user_id: str) -> dict:
        return out_schema.dump(self._get_owned(budget_id, user_id))

    def get_status(self, budget_id: str, user_id: str) -> dict:
        return self.status_of(self._get_owned(budget_id, user_id))

    def status_of(self, b: Budget) -> dict:
        session = self.storage.get_session()
        spent = session.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
            Expense.user_id == b.user_id,
            Expense.date >= b.start_date,
            Expense.date <= b.end_date,
        ).scalar()
        spent = _to_decimal(spent)
        amount = _to_decimal(b.amount)
        percentage = round(float(spent / amount * 100), 2) if amount else 0.0

        status = out_schema.dump(b)
        status.update(
            status_schema.dump(
                {
                    "spent_amount": spent,
                    "remaining_amount": amount - spent,
                    "percentage": percentage,
                    "days_remaining": max((b.end_date - self.today()).days, 0),
                    "is_over_budget": spent > amount,
                }
            )
        )
        return status

    def update(self, budget_id: str, user_id: str, data: dict) -> dict:
        b = self._get_owned(budget_id, user_id)
        start = data.get("start_date", b.start_date)
        end = data.get("end_date", b.end_date)
        if end < start:
            raise ValidationError("endDate must not be before startDate.", details={"endDate": [str(end)]})
        for key in ("amount", "period_type", "start_date", "end_date", "is_active"):
            if key in data:
                setattr(b, key, data[key])
        self.storage.save()
        return out_schema.dump(b)

    def remove(self, budget_id: str, user_id: str) -> dict:
        b = self._get_owned(budget_id, user_id)
        self.storage.delete(b)
        self.storage.save()
        return {"message": "Budget deleted successfully"}
