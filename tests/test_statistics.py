from datetime import date
from decimal import Decimal

import pytest

from models.budget import BudgetPeriod
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.expense_service import ExpenseService
from services.statistics_service import StatisticsService, _month_start

# a Wednesday; the week started on Monday the 15th
TODAY = date(2024, 1, 17)


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def services(storage):
    categories = CategoryService(storage)
    expenses = ExpenseService(storage, categories)
    budgets = BudgetService(storage, today=lambda: TODAY)
    return categories, expenses, budgets, StatisticsService(storage, expenses, budgets)


@pytest.fixture()
def stats(services):
    return services[3]


@pytest.fixture()
def seeded(services, user, make_user):
    categories, expenses, budgets, _ = services
    food = categories.create(user.id, {"name": "Food"})
    transport = categories.create(user.id, {"name": "Transport"})

    for amount, on, category in [
        ("10.00", date(2024, 1, 17), food),
        ("5.50", date(2024, 1, 17), transport),
        ("20.00", date(2024, 1, 15), food),
        ("30.00", date(2024, 1, 10), transport),
        ("40.00", date(2023, 12, 20), food),
        ("7.25", date(2023, 11, 5), food),
    ]:
        expenses.create(
            user.id, {"name": "x", "amount": Decimal(amount), "date": on, "category_id": category["id"]}
        )

    # someone else's spending never leaks in
    other = make_user(username="carol", email="carol@x.com")
    theirs = categories.create(other.id, {"name": "Food"})
    expenses.create(
        other.id, {"name": "y", "amount": Decimal("999.00"), "date": TODAY, "category_id": theirs["id"]}
    )
    return {"food": food, "transport": transport}


@pytest.mark.parametrize(
    "today,back,expected",
    [
        (date(2024, 1, 17), 0, date(2024, 1, 1)),
        (date(2024, 1, 17), 1, date(2023, 12, 1)),
        (date(2024, 3, 31), 14, date(2023, 1, 1)),
    ],
)
def test_month_start(today, back, expected):
    assert _month_start(today, back) == expected


def test_dashboard(stats, services, user, seeded):
    _, _, budgets, _ = services
    budgets.create(
        user.id,
        {
            "amount": Decimal("100.00"),
            "period_type": BudgetPeriod.MONTHLY,
            "start_date": date(2024, 1, 1),
            "end_date": date(2024, 1, 31),
        },
    )

    dashboard = stats.get_dashboard(user.id)

    assert dashboard["todayTotal"] == 15.5
    assert dashboard["weekTotal"] == 35.5
    assert dashboard["monthTotal"] == 65.5
    assert dashboard["averageDailySpending"] == 3.85
    assert [c["category"]["name"] for c in dashboard["topCategories"]] == ["Transport", "Food"]
    assert [c["percentage"] for c in dashboard["topCategories"]] == [54.2, 45.8]
    assert len(dashboard["recentExpenses"]) == 5
    assert dashboard["recentExpenses"][0]["date"] == "2024-01-17"
    assert dashboard["budgetStatus"]["spentAmount"] == 65.5
    assert dashboard["budgetStatus"]["daysRemaining"] == 14


def test_dashboard_without_data(stats, user):
    dashboard = stats.get_dashboard(user.id)
    assert dashboard == {
        "todayTotal": 0.0,
        "weekTotal": 0.0,
        "monthTotal": 0.0,
        "topCategories": [],
        "recentExpenses": [],
        "budgetStatus": None,
        "averageDailySpending": 0.0,
    }


def test_daily_defaults_to_last_30_days(stats, user, seeded):
    assert stats.get_daily_statistics(user.id) == [
        {"date": "2023-12-20", "total": 40.0, "count": 1},
        {"date": "2024-01-10", "total": 30.0, "count": 1},
        {"date": "2024-01-15", "total": 20.0, "count": 1},
        {"date": "2024-01-17", "total": 15.5, "count": 2},
    ]


def test_daily_with_range(stats, user, seeded):
    rows = stats.get_daily_statistics(user.id, date(2023, 11, 1), date(2023, 12, 31))
    assert [r["date"] for r in rows] == ["2023-11-05", "2023-12-20"]


def test_monthly(stats, user, seeded):
    assert stats.get_monthly_statistics(user.id, 3) == [
        {"date": "2024-01", "total": 65.5, "count": 4},
        {"date": "2023-12", "total": 40.0, "count": 1},
        {"date": "2023-11", "total": 7.25, "count": 1},
    ]


def test_monthly_includes_empty_months(stats, user, seeded):
    rows = stats.get_monthly_statistics(user.id)
    assert [r["date"] for r in rows] == ["2024-01", "2023-12", "2023-11", "2023-10", "2023-09", "2023-08"]
    assert rows[-1] == {"date": "2023-08", "total": 0.0, "count": 0}


def test_categories(stats, user, seeded):
    rows = stats.get_category_statistics(user.id)

    assert [(r["category"]["id"], r["total"], r["count"]) for r in rows] == [
        (seeded["food"]["id"], 77.25, 4),
        (seeded["transport"]["id"], 35.5, 2),
    ]
    assert [r["percentage"] for r in rows] == [68.51, 31.49]


def test_categories_with_range(stats, user, seeded):
    rows = stats.get_category_statistics(user.id, date(2024, 1, 1), date(2024, 1, 12))
    assert [(r["category"]["name"], r["total"], r["percentage"]) for r in rows] == [("Transport", 30.0, 100.0)]


# HTTP surface

@pytest.mark.parametrize("path", ["dashboard", "daily", "monthly", "categories"])
def test_api_requires_auth(client, path):
    assert client.get(f"/api/v1/statistics/{path}").status_code == 401


@pytest.mark.parametrize("path", ["dashboard", "daily", "monthly?months=12", "categories?startDate=2024-01-01"])
def test_api_endpoints(client, alice_headers, path):
    assert client.get(f"/api/v1/statistics/{path}", headers=alice_headers).status_code == 200


@pytest.mark.parametrize("qs", ["monthly?months=0", "monthly?months=25", "daily?startDate=2024-02-01&endDate=2024-01-01"])
def test_api_rejects_bad_query(client, alice_headers, qs):
    assert client.get(f"/api/v1/statistics/{qs}", headers=alice_headers).status_code == 422
