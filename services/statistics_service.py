"""
Aggregate statistics over a user's expenses.

Aggregation is done with plain SUM/COUNT queries grouped by category, and in
Python for per-day and per-month buckets so the same code runs on SQLite and
PostgreSQL (their date-truncation functions differ).
"""
from __future__ import annotations

from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func

from models.category import Category
from models.expense import Expense
from models.schemas.category import CategorySummarySchema
from services.budget_service import BudgetService
from services.expense_service import ExpenseService

category_schema = CategorySummarySchema()

DEFAULT_DAILY_WINDOW = 30
TOP_CATEGORIES = 5
RECENT_EXPENSES = 5


def money(value) -> float:
    return round(float(value or 0), 2)


def _percentage(part, whole) -> float:
    if not whole:
        return 0.0
    return round(float(Decimal(str(part)) / Decimal(str(whole)) * 100), 2)


def _month_start(d: date, months_back: int = 0) -> date:
    month_index = d.year * 12 + (d.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


class StatisticsService:
    def __init__(self, storage, expenses: ExpenseService, budgets: BudgetService):
        self.storage = storage
        self.expenses = expenses
        self.budgets = budgets
        self.today = budgets.today

    def _total(self, user_id: str, start: date, end: date) -> Decimal:
        session = self.storage.get_session()
        total = session.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
            Expense.user_id == user_id, Expense.date >= start, Expense.date <= end
        ).scalar()
        return Decimal(str(total or 0))

    def _rows(self, user_id: str, start: date, end: date):
        session = self.storage.get_session()
        return (
            session.query(Expense.date, Expense.amount)
            .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
            .order_by(Expense.date.asc())
            .all()
        )

    def get_dashboard(self, user_id: str) -> dict:
        today = self.today()
        week_start = today - timedelta(days=today.weekday())
        month_start = _month_start(today)

        month_total = self._total(user_id, month_start, today)
        budget = self.budgets.current_budget(user_id)
        return {
            "todayTotal": money(self._total(user_id, today, today)),
            "weekTotal": money(self._total(user_id, week_start, today)),
            "monthTotal": money(month_total),
            "topCategories": self.get_category_statistics(user_id, month_start, today)[:TOP_CATEGORIES],
            "recentExpenses": self.expenses.find_recent(user_id, RECENT_EXPENSES),
            "budgetStatus": self.budgets.status_of(budget) if budget is not None else None,
            "averageDailySpending": money(month_total / today.day),
        }

    def get_daily_statistics(self, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> list:
        """One entry per day that has expenses, oldest first."""
        end = end or self.today()
        start = start or end - timedelta(days=DEFAULT_DAILY_WINDOW - 1)
        buckets: "OrderedDict[str, dict]" = OrderedDict()
        for day, amount in self._rows(user_id, start, end):
            bucket = buckets.setdefault(day.isoformat(), {"date": day.isoformat(), "total": Decimal(0), "count": 0})
            bucket["total"] += Decimal(str(amount))
            bucket["count"] += 1
        return [dict(b, total=money(b["total"])) for b in buckets.values()]

    def get_monthly_statistics(self, user_id: str, months: int = 6) -> list:
        """The last `months` calendar months including the current one, newest first; empty months included."""
        today = self.today()
        start = _month_start(today, months - 1)
        buckets = OrderedDict(
            (m.strftime("%Y-%m"), {"date": m.strftime("%Y-%m"), "total": Decimal(0), "count": 0})
            for m in (_month_start(today, i) for i in range(months))
        )
        for day, amount in self._rows(user_id, start, today):
            bucket = buckets[day.strftime("%Y-%m")]
            bucket["total"] += Decimal(str(amount))
            bucket["count"] += 1
        return [dict(b, total=money(b["total"])) for b in buckets.values()]

    def get_category_statistics(self, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> list:
        """Totals per category, largest first, with each category's share of the grand total."""
        session = self.storage.get_session()
        total_col = func.sum(Expense.amount).label("total")
        q = (
            session.query(Category, total_col, func.count(Expense.id).label("count"))
            .join(Expense, Expense.category_id == Category.id)
            .filter(Expense.user_id == user_id)
        )
        if start:
            q = q.filter(Expense.date >= start)
        if end:
            q = q.filter(Expense.date <= end)
        rows = q.group_by(Category.id).order_by(total_col.desc()).all()

        grand_total = sum((Decimal(str(total)) for _, total, _ in rows), Decimal(0))
        return [
            {
                "category": category_schema.dump(category),
                "total": money(total),
                "count": count,
                "percentage": _percentage(total, grand_total),
            }
            for category, total, count in rows
        ]
