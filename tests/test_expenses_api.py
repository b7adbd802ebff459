import pytest


@pytest.fixture
def alice(register, make_category):
    headers, user = register(email="alice@example.com")
    food = make_category(headers, "Food")
    transport = make_category(headers, "Transport")
    return headers, user, food, transport


def _list(client, headers, **params):
    resp = client.get("/api/v1/expenses", params=params, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_expense_rounds_amount_and_joins_category(client, alice) -> None:
    headers, user, food, _ = alice

    resp = client.post(
        "/api/v1/expenses",
        json={
            "amount": 20.005,
            "description": "  Groceries ",
            "category": food["id"],
            "date": "2024-01-15T12:30:00Z",
            "tags": ["weekly", " market "],
            "notes": "Bought extra fruit",
            "location": "Farmers market",
        },
        headers=headers,
    )

    assert resp.status_code == 201
    expense = resp.json()["expense"]
    assert expense["amount"] == 20.01
    assert expense["description"] == "Groceries"
    assert expense["userId"] == user["id"]
    assert expense["category"] == {
        "id": food["id"],
        "name": "Food",
        "color": food["color"],
        "icon": food["icon"],
    }
    assert expense["date"].startswith("2024-01-15T12:30:00")
    assert expense["tags"] == ["weekly", "market"]
    assert expense["paymentMethod"] == "cash"
    assert expense["receipt"] == {"url": None, "filename": None}


def _is_utc(value):
    return value.endswith(("Z", "+00:00"))


def test_datetimes_are_returned_as_utc(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    expense = make_expense(headers, food["id"], date="2024-01-15T14:30:00+02:00")

    assert expense["date"].startswith("2024-01-15T12:30:00")
    for key in ("date", "createdAt", "updatedAt"):
        assert _is_utc(expense[key]), key

    period = client.get(
        "/api/v1/expenses/stats", params={"startDate": "2024-01-01"}, headers=headers
    ).json()["stats"]["period"]
    assert _is_utc(period["startDate"])
    assert _is_utc(period["endDate"])

    category = client.get("/api/v1/categories", headers=headers).json()["categories"][0]
    assert _is_utc(category["createdAt"])


def test_create_expense_validation(client, alice) -> None:
    headers, _, food, _ = alice

    resp = client.post(
        "/api/v1/expenses",
        json={
            "amount": 0,
            "description": "",
            "category": food["id"],
            "tags": ["x" * 31],
            "paymentMethod": "cheque",
        },
        headers=headers,
    )

    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["errors"]}
    assert {"amount", "description", "tags.0", "paymentMethod"} <= fields


def test_expense_with_another_users_category_is_rejected(client, alice, register, make_category) -> None:
    headers, _, _, _ = alice
    bob, _ = register(email="bob@example.com")
    bobs_category = make_category(bob, "Bob stuff")

    resp = client.post(
        "/api/v1/expenses",
        json={"amount": 10, "description": "Sneaky", "category": bobs_category["id"]},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid category"}


def test_other_users_expenses_are_not_found(client, alice, register, make_expense) -> None:
    headers, _, food, _ = alice
    bob, _ = register(email="bob@example.com")
    expense = make_expense(headers, food["id"], amount=12, description="Lunch")
    url = f"/api/v1/expenses/{expense['id']}"

    assert client.get(url, headers=bob).status_code == 404
    assert client.put(url, json={"amount": 1}, headers=bob).status_code == 404
    assert client.delete(url, headers=bob).status_code == 404
    assert _list(client, bob)["pagination"]["totalExpenses"] == 0

    # Untouched for its owner
    assert client.get(url, headers=headers).json()["expense"]["amount"] == 12.0


def test_update_applies_only_sent_fields(client, alice, make_expense) -> None:
    headers, _, food, transport = alice
    expense = make_expense(
        headers,
        food["id"],
        amount=10,
        description="Taxi",
        notes="Late night",
        location="Downtown",
        tags=["work"],
    )
    url = f"/api/v1/expenses/{expense['id']}"

    resp = client.put(url, json={"amount": 11.5, "category": transport["id"]}, headers=headers)

    assert resp.status_code == 200
    updated = resp.json()["expense"]
    assert updated["amount"] == 11.5
    assert updated["category"]["name"] == "Transport"
    assert updated["description"] == "Taxi"
    assert updated["notes"] == "Late night"
    assert updated["location"] == "Downtown"
    assert updated["tags"] == ["work"]
    assert updated["date"] == expense["date"]

    # Explicit null clears optional fields, omission keeps them
    cleared = client.put(url, json={"notes": None}, headers=headers).json()["expense"]
    assert cleared["notes"] is None
    assert cleared["location"] == "Downtown"

    retagged = client.put(url, json={"tags": []}, headers=headers).json()["expense"]
    assert retagged["tags"] == []


def test_update_rejects_null_for_required_fields(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    expense = make_expense(headers, food["id"])

    resp = client.put(f"/api/v1/expenses/{expense['id']}", json={"amount": None}, headers=headers)

    assert resp.status_code == 400
    assert client.get(f"/api/v1/expenses/{expense['id']}", headers=headers).json()["expense"]["amount"] == 10.0


def test_update_to_deleted_category_is_rejected(client, alice, make_category, make_expense) -> None:
    headers, _, food, _ = alice
    old = make_category(headers, "Old")
    expense = make_expense(headers, food["id"])
    client.delete(f"/api/v1/categories/{old['id']}", headers=headers)

    resp = client.put(
        f"/api/v1/expenses/{expense['id']}", json={"category": old["id"]}, headers=headers
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid category"


def test_delete_expense(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    expense = make_expense(headers, food["id"], tags=["a", "b"])
    url = f"/api/v1/expenses/{expense['id']}"

    resp = client.delete(url, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Expense deleted successfully"
    assert client.get(url, headers=headers).status_code == 404


def test_second_page_of_twenty_five(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    for day in range(1, 26):
        make_expense(
            headers,
            food["id"],
            amount=day,
            description=f"Expense {day:02d}",
            date=f"2024-01-{day:02d}T09:00:00Z",
        )

    body = _list(client, headers, page=2, limit=10)

    # Newest first: page 1 is days 25..16, page 2 is days 15..6
    assert [e["description"] for e in body["expenses"]] == [
        f"Expense {day:02d}" for day in range(15, 5, -1)
    ]
    assert body["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalExpenses": 25,
        "limit": 10,
        "hasNext": True,
        "hasPrev": True,
    }

    last = _list(client, headers, page=3, limit=10)
    assert len(last["expenses"]) == 5
    assert last["pagination"]["hasNext"] is False


def test_pages_never_repeat_or_skip_on_equal_sort_keys(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    created = {
        make_expense(headers, food["id"], description=f"Same day {i}", date="2024-02-01T10:00:00Z")["id"]
        for i in range(12)
    }

    seen = []
    for page in (1, 2, 3):
        seen += [e["id"] for e in _list(client, headers, page=page, limit=5)["expenses"]]

    assert len(seen) == 12
    assert set(seen) == created
    again = [e["id"] for e in _list(client, headers, page=2, limit=5)["expenses"]]
    assert again == seen[5:10]


def test_filters(client, alice, make_expense) -> None:
    headers, _, food, transport = alice
    make_expense(headers, food["id"], description="Pizza", date="2024-01-01T00:00:00Z", tags=["dinner"])
    make_expense(
        headers,
        food["id"],
        description="Bagel",
        date="2024-01-31T23:00:00Z",
        notes="with CREAM cheese",
        tags=["breakfast"],
    )
    make_expense(
        headers,
        transport["id"],
        description="Bus",
        date="2024-02-01T08:00:00Z",
        location="Cream Street",
        tags=["commute"],
    )
    make_expense(headers, transport["id"], description="Train", date="2024-02-10T08:00:00Z", tags=["Creamery trip"])

    def descriptions(**params):
        return sorted(e["description"] for e in _list(client, headers, **params)["expenses"])

    assert descriptions(category=transport["id"]) == ["Bus", "Train"]
    # Inclusive on both ends; a bare end date covers that whole day
    assert descriptions(startDate="2024-01-01", endDate="2024-01-31") == ["Bagel", "Pizza"]
    assert descriptions(tags="dinner,commute") == ["Bus", "Pizza"]
    assert descriptions(tags=["dinner", "breakfast"]) == ["Bagel", "Pizza"]
    # Case-insensitive over notes, location and tags
    assert descriptions(search="cream") == ["Bagel", "Bus", "Train"]
    assert descriptions(search="PIZ") == ["Pizza"]
    assert descriptions(search="100%") == []


def test_sort_by_amount_ascending(client, alice, make_expense) -> None:
    headers, _, food, _ = alice
    for amount in (30, 10, 20):
        make_expense(headers, food["id"], amount=amount, description=f"Spent {amount}")

    body = _list(client, headers, sortBy="amount", sortOrder="asc")

    assert [e["amount"] for e in body["expenses"]] == [10.0, 20.0, 30.0]


def test_invalid_list_parameters(client, alice) -> None:
    headers, _, _, _ = alice

    for params in ({"sortBy": "userId"}, {"sortOrder": "sideways"}, {"page": 0}, {"startDate": "soon"}):
        resp = client.get("/api/v1/expenses", params=params, headers=headers)
        assert resp.status_code == 400, params
        assert resp.json()["success"] is False


def test_stats_per_category(client, alice, make_expense) -> None:
    headers, _, food, transport = alice
    make_expense(headers, food["id"], amount=10.00, date="2024-01-05T12:00:00Z")
    make_expense(headers, food["id"], amount=20.005, date="2024-01-10T12:00:00Z")
    make_expense(headers, food["id"], amount=5.00, date="2024-01-31T18:00:00Z")
    make_expense(headers, transport["id"], amount=15.00, date="2024-01-20T12:00:00Z")
    # Outside the period
    make_expense(headers, transport["id"], amount=99.00, date="2024-02-01T00:00:00Z")

    resp = client.get(
        "/api/v1/expenses/stats",
        params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        headers=headers,
    )

    assert resp.status_code == 200
    stats = resp.json()["stats"]
    breakdown = stats["categoryBreakdown"]
    assert [b["categoryName"] for b in breakdown] == ["Food", "Transport"]
    food_stats, transport_stats = breakdown
    assert food_stats["count"] == 3
    assert food_stats["totalAmount"] == 35.01
    assert food_stats["avgAmount"] == 11.67
    assert food_stats["categoryId"] == food["id"]
    assert food_stats["categoryColor"] == food["color"]
    assert transport_stats["count"] == 1
    assert transport_stats["totalAmount"] == 15.0
    assert stats["totalSpent"] == 50.01
    assert stats["period"]["startDate"].startswith("2024-01-01T00:00:00")
    assert stats["period"]["endDate"].startswith("2024-01-31T23:59:59")


def test_stats_default_to_current_month_and_owner(client, alice, register, make_expense) -> None:
    headers, _, food, _ = alice
    bob, _ = register(email="bob@example.com")
    make_expense(headers, food["id"], amount=7.25)

    mine = client.get("/api/v1/expenses/stats", headers=headers).json()["stats"]
    theirs = client.get("/api/v1/expenses/stats", headers=bob).json()["stats"]

    assert mine["totalSpent"] == 7.25
    assert mine["categoryBreakdown"][0]["count"] == 1
    assert theirs == {
        "totalSpent": 0.0,
        "categoryBreakdown": [],
        "period": theirs["period"],
    }
