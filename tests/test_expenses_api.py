import pytest

EXPENSES = "/api/v1/expenses"


@pytest.fixture()
def food(client, alice_headers):
    rows = client.get("/api/v1/categories", headers=alice_headers).get_json()
    return next(r for r in rows if r["name"] == "Food")


@pytest.fixture()
def add_expense(client, alice_headers, food):
    def _add(name="Lunch", amount=12.5, date="2024-01-15", category_id=None, headers=None, **extra):
        resp = client.post(
            EXPENSES,
            json={"name": name, "amount": amount, "date": date, "categoryId": category_id or food["id"], **extra},
            headers=headers or alice_headers,
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _add


def test_create_expense(add_expense, food, alice):
    expense = add_expense(name="Sushi", amount=23.456, notes="with Bob")
    assert expense["amount"] == 23.46
    assert expense["date"] == "2024-01-15"
    assert expense["notes"] == "with Bob"
    assert expense["userId"] == alice["user"]["id"]
    assert expense["category"] == {"id": food["id"], "name": "Food", "icon": food["icon"], "color": food["color"]}


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_create_rejects_bad_amount(client, alice_headers, food, amount):
    resp = client.post(
        EXPENSES,
        json={"name": "Lunch", "amount": amount, "date": "2024-01-15", "categoryId": food["id"]},
        headers=alice_headers,
    )
    assert resp.status_code == 422
    assert "amount" in resp.get_json()["details"]


def test_create_rejects_blank_name(client, alice_headers, food):
    resp = client.post(
        EXPENSES,
        json={"name": "   ", "amount": 5, "date": "2024-01-15", "categoryId": food["id"]},
        headers=alice_headers,
    )
    assert resp.status_code == 422
    assert "name" in resp.get_json()["details"]


def test_update_rejects_blank_name(client, alice_headers, add_expense):
    expense = add_expense()
    resp = client.patch(f"{EXPENSES}/{expense['id']}", json={"name": "\t "}, headers=alice_headers)
    assert resp.status_code == 422
    assert client.get(f"{EXPENSES}/{expense['id']}", headers=alice_headers).get_json()["name"] == "Lunch"


def test_create_requires_fields(client, alice_headers):
    resp = client.post(EXPENSES, json={}, headers=alice_headers)
    assert resp.status_code == 422
    assert {"name", "amount", "date", "categoryId"} <= set(resp.get_json()["details"])


def test_create_with_unknown_category(client, alice_headers):
    resp = client.post(
        EXPENSES,
        json={"name": "Lunch", "amount": 5, "date": "2024-01-15", "categoryId": "does-not-exist"},
        headers=alice_headers,
    )
    assert resp.status_code == 404


def test_create_with_other_users_category(client, register, auth_headers, alice_headers):
    bob = register("bob", "bob@x.com")
    bobs = client.post("/api/v1/categories", json={"name": "Golf"}, headers=auth_headers(bob["accessToken"]))
    resp = client.post(
        EXPENSES,
        json={"name": "Lunch", "amount": 5, "date": "2024-01-15", "categoryId": bobs.get_json()["id"]},
        headers=alice_headers,
    )
    assert resp.status_code == 404


def test_list_is_paginated_newest_first(client, alice_headers, add_expense):
    for day in range(1, 13):
        add_expense(name=f"Item {day}", date=f"2024-01-{day:02d}")

    resp = client.get(f"{EXPENSES}?page=2&limit=5", headers=alice_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["pagination"] == {"total": 12, "page": 2, "limit": 5, "totalPages": 3}
    assert [e["date"] for e in body["expenses"]] == [f"2024-01-{d:02d}" for d in (7, 6, 5, 4, 3)]

    last = client.get(f"{EXPENSES}?page=3&limit=5", headers=alice_headers).get_json()
    assert len(last["expenses"]) == 2


def test_list_defaults(client, alice_headers):
    body = client.get(EXPENSES, headers=alice_headers).get_json()
    assert body == {"expenses": [], "pagination": {"total": 0, "page": 1, "limit": 10, "totalPages": 0}}


def test_list_filters(client, alice_headers, add_expense):
    transport = next(
        r for r in client.get("/api/v1/categories", headers=alice_headers).get_json() if r["name"] == "Transport"
    )
    add_expense(name="Morning coffee", date="2024-01-02")
    add_expense(name="Train ticket", date="2024-01-05", category_id=transport["id"])
    add_expense(name="Coffee beans", date="2024-01-20")

    def names(qs):
        resp = client.get(f"{EXPENSES}?{qs}", headers=alice_headers)
        assert resp.status_code == 200
        return [e["name"] for e in resp.get_json()["expenses"]]

    assert names("search=COFFEE") == ["Coffee beans", "Morning coffee"]
    assert names(f"categoryId={transport['id']}") == ["Train ticket"]
    assert names("startDate=2024-01-03&endDate=2024-01-19") == ["Train ticket"]
    assert names("startDate=2024-01-05") == ["Coffee beans", "Train ticket"]


@pytest.mark.parametrize("qs", ["limit=0", "limit=101", "page=0", "startDate=2024-02-01&endDate=2024-01-01"])
def test_list_rejects_bad_query(client, alice_headers, qs):
    assert client.get(f"{EXPENSES}?{qs}", headers=alice_headers).status_code == 422


def test_recent(client, alice_headers, add_expense):
    for day in range(1, 8):
        add_expense(name=f"Item {day}", date=f"2024-01-{day:02d}")

    default = client.get(f"{EXPENSES}/recent", headers=alice_headers).get_json()
    assert [e["name"] for e in default] == ["Item 7", "Item 6", "Item 5", "Item 4", "Item 3"]

    two = client.get(f"{EXPENSES}/recent?limit=2", headers=alice_headers).get_json()
    assert len(two) == 2


def test_get_update_delete(client, alice_headers, add_expense):
    expense = add_expense()
    url = f"{EXPENSES}/{expense['id']}"

    assert client.get(url, headers=alice_headers).get_json()["name"] == "Lunch"

    updated = client.patch(url, json={"amount": 99.9, "notes": None}, headers=alice_headers)
    assert updated.status_code == 200
    assert updated.get_json()["amount"] == 99.9
    assert updated.get_json()["name"] == "Lunch"
    assert updated.get_json()["notes"] is None

    deleted = client.delete(url, headers=alice_headers)
    assert deleted.status_code == 200
    assert deleted.get_json() == {"message": "Expense deleted successfully"}
    assert client.get(url, headers=alice_headers).status_code == 404


def test_update_moves_category(client, alice_headers, add_expense):
    expense = add_expense()
    mine = client.post("/api/v1/categories", json={"name": "Treats"}, headers=alice_headers).get_json()

    resp = client.patch(f"{EXPENSES}/{expense['id']}", json={"categoryId": mine["id"]}, headers=alice_headers)
    assert resp.status_code == 200
    assert resp.get_json()["categoryId"] == mine["id"]
    assert resp.get_json()["category"]["name"] == "Treats"


def test_update_rejects_bad_amount(client, alice_headers, add_expense):
    expense = add_expense()
    resp = client.patch(f"{EXPENSES}/{expense['id']}", json={"amount": -1}, headers=alice_headers)
    assert resp.status_code == 422


def test_expenses_are_private(client, register, auth_headers, add_expense):
    expense = add_expense()
    bob_headers = auth_headers(register("bob", "bob@x.com")["accessToken"])
    url = f"{EXPENSES}/{expense['id']}"

    assert client.get(url, headers=bob_headers).status_code == 404
    assert client.patch(url, json={"name": "Mine now"}, headers=bob_headers).status_code == 404
    assert client.delete(url, headers=bob_headers).status_code == 404
    assert client.get(EXPENSES, headers=bob_headers).get_json()["pagination"]["total"] == 0
