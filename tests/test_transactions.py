import pytest


def tx_payload(category_id, **overrides):
    payload = {
        "description": "Salary March",
        "amount": 3200,
        "date": "2024-03-05T09:00:00",
        "type": "INCOME",
        "categoryId": category_id,
    }
    payload.update(overrides)
    return payload


def create_tx(client, headers, category_id, **overrides):
    res = client.post("/api/transactions", json=tx_payload(category_id, **overrides), headers=headers)
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture()
def seeded(client, auth_headers, category):
    rent = client.post("/api/categories", json={"name": "Rent"}, headers=auth_headers).json()
    txs = [
        create_tx(client, auth_headers, category["id"], description="Groceries", amount=80,
                  date="2024-01-10T10:00:00", type="EXPENSE"),
        create_tx(client, auth_headers, rent["id"], description="January rent", amount=900,
                  date="2024-01-01T08:00:00", type="EXPENSE"),
        create_tx(client, auth_headers, category["id"], description="Salary", amount=3000,
                  date="2024-01-31T18:00:00", type="INCOME"),
        create_tx(client, auth_headers, category["id"], description="Dinner", amount=45.25,
                  date="2024-02-14T20:00:00", type="EXPENSE"),
    ]
    return {"food": category, "rent": rent, "txs": txs}


def test_create_and_get_round_trip(client, auth_headers, category, login):
    payload = tx_payload(category["id"])
    tx = create_tx(client, auth_headers, category["id"])

    assert tx["userId"] == login()["id"]
    assert tx["amount"] == 3200
    assert tx["type"] == "INCOME"
    assert tx["categoryId"] == category["id"]
    assert tx["description"] == payload["description"]
    assert tx["date"].startswith("2024-03-05T09:00:00")

    res = client.get(f"/api/transactions/{tx['id']}", headers=auth_headers)
    assert res.json() == tx


def test_invalid_payloads(client, auth_headers, category):
    cid = category["id"]
    assert client.post("/api/transactions", json=tx_payload(cid, amount=0), headers=auth_headers).status_code == 400
    assert client.post("/api/transactions", json=tx_payload(cid, amount=-1), headers=auth_headers).status_code == 400
    assert client.post("/api/transactions", json=tx_payload(cid, type="GIFT"), headers=auth_headers).status_code == 400
    assert client.post("/api/transactions", json=tx_payload(cid, description=""), headers=auth_headers).status_code == 400


def test_unknown_category(client, auth_headers):
    res = client.post("/api/transactions", json=tx_payload(999), headers=auth_headers)
    assert res.status_code == 404
    assert "Category not found" in res.json()["message"]


def test_other_user_is_forbidden(client, auth_headers, other_headers, category):
    tx = create_tx(client, auth_headers, category["id"])
    assert client.get(f"/api/transactions/{tx['id']}", headers=other_headers).status_code == 403
    assert client.put(
        f"/api/transactions/{tx['id']}", json=tx_payload(category["id"]), headers=other_headers
    ).status_code == 403
    assert client.delete(f"/api/transactions/{tx['id']}", headers=other_headers).status_code == 403

    res = client.get("/api/transactions", params={"pageSize": 0}, headers=other_headers)
    assert res.json() == []


def test_update_and_delete(client, auth_headers, category):
    tx = create_tx(client, auth_headers, category["id"])
    res = client.put(
        f"/api/transactions/{tx['id']}",
        json=tx_payload(category["id"], description="Bonus", amount=150.75),
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["description"] == "Bonus"
    assert res.json()["amount"] == 150.75
    assert res.json()["userId"] == tx["userId"]

    res = client.put(f"/api/transactions/{tx['id']}", json=tx_payload(12345), headers=auth_headers)
    assert res.status_code == 404

    res = client.delete(f"/api/transactions/{tx['id']}", headers=auth_headers)
    assert res.json() == {"message": "Transaction deleted successfully"}
    assert client.delete(f"/api/transactions/{tx['id']}", headers=auth_headers).status_code == 404


def test_default_order_is_newest_first(client, auth_headers, seeded):
    page = client.get("/api/transactions", headers=auth_headers).json()
    assert page["totalElements"] == 4
    assert [t["description"] for t in page["content"]] == ["Dinner", "Salary", "Groceries", "January rent"]


def test_sort_by_amount_ascending(client, auth_headers, seeded):
    res = client.get(
        "/api/transactions",
        params={"sortBy": "amount", "sortDir": "ASC", "pageSize": 0},
        headers=auth_headers,
    )
    assert [t["amount"] for t in res.json()] == [45.25, 80, 900, 3000]


def test_filter_by_date_range(client, auth_headers, seeded):
    params = {"start": "2024-01-01T08:00:00", "end": "2024-01-31T18:00:00", "pageSize": 0}
    res = client.get("/api/transactions/date-range", params=params, headers=auth_headers)
    assert res.status_code == 200
    assert {t["description"] for t in res.json()} == {"Groceries", "January rent", "Salary"}

    page = client.get(
        "/api/transactions/date-range",
        params={"start": "2024-01-01T00:00:00", "end": "2024-12-31T23:59:59", "pageSize": 3},
        headers=auth_headers,
    ).json()
    assert page["totalElements"] == 4
    assert page["totalPages"] == 2
    assert len(page["content"]) == 3


def test_date_range_start_after_end(client, auth_headers):
    res = client.get(
        "/api/transactions/date-range",
        params={"start": "2024-02-01T00:00:00", "end": "2024-01-01T00:00:00"},
        headers=auth_headers,
    )
    assert res.status_code == 400


def test_filter_by_type(client, auth_headers, seeded):
    res = client.get("/api/transactions/type/EXPENSE", params={"pageSize": 0}, headers=auth_headers)
    assert len(res.json()) == 3
    assert all(t["type"] == "EXPENSE" for t in res.json())

    page = client.get("/api/transactions/type/INCOME", headers=auth_headers).json()
    assert page["totalElements"] == 1

    assert client.get("/api/transactions/type/OTHER", headers=auth_headers).status_code == 400


def test_filter_by_category(client, auth_headers, seeded):
    rent_id = seeded["rent"]["id"]
    res = client.get(f"/api/transactions/category/{rent_id}", params={"pageSize": 0}, headers=auth_headers)
    assert [t["description"] for t in res.json()] == ["January rent"]


def test_filter_is_scoped_to_caller(client, other_headers, seeded):
    food_id = seeded["food"]["id"]
    res = client.get(f"/api/transactions/category/{food_id}", params={"pageSize": 0}, headers=other_headers)
    assert res.json() == []


def test_offset_dates_rejected_in_body(client, auth_headers, category):
    for stamp in ("2024-01-01T23:30:00-05:00", "2024-01-01T23:30:00Z"):
        res = client.post("/api/transactions", json=tx_payload(category["id"], date=stamp), headers=auth_headers)
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "date"

    tx = create_tx(client, auth_headers, category["id"])
    res = client.put(
        f"/api/transactions/{tx['id']}",
        json=tx_payload(category["id"], date="2024-03-05T09:00:00+02:00"),
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert client.get(f"/api/transactions/{tx['id']}", headers=auth_headers).json() == tx


def test_offset_dates_rejected_in_range(client, auth_headers):
    res = client.get(
        "/api/transactions/date-range",
        params={"start": "2024-01-01T00:00:00Z", "end": "2024-02-01T00:00:00"},
        headers=auth_headers,
    )
    assert res.status_code == 400

    res = client.get(
        "/api/transactions/export/excel",
        params={"end": "2024-02-01T00:00:00+01:00"},
        headers=auth_headers,
    )
    assert res.status_code == 400
