from __future__ import annotations

import math

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from models.expense import Expense
from models.schemas.expense import ExpenseOutSchema
from services.category_service import CategoryService
from services.errors import NotFoundError

out_schema = ExpenseOutSchema()
out_list_schema = ExpenseOutSchema(many=True)


class ExpenseService:
    def __init__(self, storage, categories: CategoryService):
        self.storage = storage
        self.categories = categories

    def _query(self, user_id: str, eager: bool = True):
        session = self.storage.get_session()
        q = session.query(Expense).filter(Expense.user_id == user_id)
        return q.options(joinedload(Expense.category)) if eager else q

    def _get_owned(self, expense_id: str, user_id: str) -> Expense:
        e = self._query(user_id).filter(Expense.id == expense_id).first()
        if e is None:
            raise NotFoundError("Expense not found")
        return e

    def create(self, user_id: str, data: dict) -> dict:
        category = self.categories.get_visible(data["category_id"], user_id)
        e = Expense(
            name=data["name"].strip(),
            amount=data["amount"],
            date=data["date"],
            notes=data.get("notes"),
            category_id=category.id,
            user_id=user_id,
        )
        e.category = category
        self.storage.new(e)
        self.storage.save()
        return out_schema.dump(e)

    def find_all(self, user_id: str, query: dict) -> dict:
        """
        Filtered, paginated listing, newest first.
        `query` is the output of ExpenseQuerySchema.
        """
        q = self._query(user_id, eager=False)
        if query.get("start_date"):
            q = q.filter(Expense.date >= query["start_date"])
        if query.get("end_date"):
            q = q.filter(Expense.date <= query["end_date"])
        if query.get("category_id"):
            q = q.filter(Expense.category_id == query["category_id"])
        if query.get("search"):
            pattern = f"%{query['search'].strip().lower()}%"
            q = q.filter(func.lower(Expense.name).like(pattern))

        page, limit = query.get("page", 1), query.get("limit", 10)
        total = q.count()
        rows = (
            q.options(joinedload(Expense.category))
            .order_by(Expense.date.desc(), Expense.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "expenses": out_list_schema.dump(rows),
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
        }

    def find_recent(self, user_id: str, limit: int = 5) -> list:
        rows = self._query(user_id).order_by(Expense.date.desc(), Expense.created_at.desc()).limit(limit).all()
        return out_list_schema.dump(rows)

    def find_one(self, expense_id: str, user_id: str) -> dict:
        return out_schema.dump(self._get_owned(expense_id, user_id))

    def update(self, expense_id: str, user_id: str, data: dict) -> dict:
        e = self._get_owned(expense_id, user_id)
        if "category_id" in data:
            e.category = self.categories.get_visible(data["category_id"], user_id)
        if "name" in data:
            e.name = data["name"].strip()
        for key in ("amount", "date", "notes"):
            if key in data:
                setattr(e, key, data[key])
        self.storage.save()
        return out_schema.dump(e)

    def remove(self, expense_id: str, user_id: str) -> dict:
        e = self._get_owned(expense_id, user_id)
        self.storage.delete(e)
        self.storage.save()
        return {"message": "Expense deleted successfully"}
