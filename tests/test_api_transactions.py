"""Tests for transaction CRUD, filtering and pagination."""

import math

import pytest


@pytest.fixture
async def books(api, alice):
    """A source plus the two categories most tests need."""
    return {
        "source": (await api.create_source(alice, initial_balance=0))["id"],
        "rent": await api.category_id(alice, "Rent"),
        "sales": await api.category_id(alice, "Sales Revenue"),
    }


async def test_create_embeds_category_and_source(api, alice, books):
    tx = await api.create_transaction(
        alice, books["rent"], books["source"], 1200, transaction_date="2024-05-01", description="May rent"
    )
    assert tx["amount"] == 1200
    assert tx["transactionType"] == "EXPENSE"
    assert tx["transactionDate"].startswith("2024-05-01")
    assert tx["category"] == {"id": books["rent"], "categoryName": "Rent", "categoryType": "EXPENSE"}
    assert tx["source"]["id"] == books["source"]
    assert tx["source"]["sourceName"] == "Main Bank"


async def test_timezone_aware_dates_are_stored_as_utc(api, alice, books):
    tx = await api.create_transaction(
        alice, books["sales"], books["source"], 10, transaction_type="INCOME",
        transaction_date="2024-05-01T23:30:00-02:00",
    )
    assert tx["transactionDate"].startswith("2024-05-02T01:30:00")


@pytest.mark.parametrize("amount", [0, -5])
async def test_amount_must_be_positive(alice, books, client, amount):
    response = await client.post(
        "/api/transactions",
        json={
            "transactionDate": "2024-05-01",
            "transactionType": "EXPENSE",
            "amount": amount,
            "categoryId": books["rent"],
            "sourceId": books["source"],
        },
        headers=alice,
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "amount"


@pytest.mark.parametrize("amount", ["Infinity", "NaN"])
async def test_amount_must_be_finite(alice, books, client, amount):
    # Python's json parser accepts these non-standard tokens
    body = (
        '{"transactionDate": "2024-05-01", "transactionType": "EXPENSE", '
        f'"amount": {amount}, "categoryId": {books["rent"]}, "sourceId": {books["source"]}}}'
    )
    response = await client.post(
        "/api/transactions",
        content=body,
        headers={**alice, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "amount"

    summary = (await client.get("/api/reports/summary", headers=alice)).json()
    assert summary["transactionCount"] == 0
    assert summary["totalExpenses"] == 0


async def test_update_rejects_non_finite_amount(api, alice, books, client):
    tx = await api.create_transaction(alice, books["rent"], books["source"], 100)
    response = await client.put(
        f"/api/transactions/{tx['id']}",
        content='{"amount": Infinity}',
        headers={**alice, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert (await client.get(f"/api/transactions/{tx['id']}", headers=alice)).json()["amount"] == 100


async def test_missing_fields_are_rejected(alice, client):
    response = await client.post("/api/transactions", json={"amount": 5}, headers=alice)
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"transactionDate", "transactionType", "categoryId", "sourceId"} <= fields


async def test_type_must_match_category(alice, books, client):
    response = await client.post(
        "/api/transactions",
        json={
            "transactionDate": "2024-05-01",
            "transactionType": "INCOME",
            "amount": 5,
            "categoryId": books["rent"],
            "sourceId": books["source"],
        },
        headers=alice,
    )
    assert response.status_code == 400


async def test_references_must_belong_to_caller(api, alice, bob, books, client):
    bob_source = await api.create_source(bob, name="Bob Bank")
    bob_category = await api.create_category(bob, "Bob Stuff")

    foreign_source = await client.post(
        "/api/transactions",
        json={
            "transactionDate": "2024-05-01", "transactionType": "EXPENSE", "amount": 5,
            "categoryId": books["rent"], "sourceId": bob_source["id"],
        },
        headers=alice,
    )
    foreign_category = await client.post(
        "/api/transactions",
        json={
            "transactionDate": "2024-05-01", "transactionType": "EXPENSE", "amount": 5,
            "categoryId": bob_category["id"], "sourceId": books["source"],
        },
        headers=alice,
    )
    assert foreign_source.status_code == 404
    assert foreign_category.status_code == 404


async def test_get_update_delete(api, alice, books, client):
    tx = await api.create_transaction(alice, books["rent"], books["source"], 100)

    fetched = await client.get(f"/api/transactions/{tx['id']}", headers=alice)
    assert fetched.status_code == 200

    office = await api.category_id(alice, "Office Equipment")
    updated = await client.put(
        f"/api/transactions/{tx['id']}",
        json={"amount": 250.5, "description": "Desk", "categoryId": office},
        headers=alice,
    )
    assert updated.status_code == 200
    assert updated.json()["amount"] == 250.5
    assert updated.json()["category"]["categoryName"] == "Office Equipment"

    deleted = await client.delete(f"/api/transactions/{tx['id']}", headers=alice)
    assert deleted.status_code == 200
    assert (await client.get(f"/api/transactions/{tx['id']}", headers=alice)).status_code == 404


async def test_update_rejects_non_positive_amount(api, alice, books, client):
    tx = await api.create_transaction(alice, books["rent"], books["source"], 100)
    response = await client.put(f"/api/transactions/{tx['id']}", json={"amount": -1}, headers=alice)
    assert response.status_code == 400


async def test_other_users_cannot_touch_transactions(api, alice, bob, books, client):
    tx = await api.create_transaction(alice, books["rent"], books["source"], 100)
    assert (await client.get(f"/api/transactions/{tx['id']}", headers=bob)).status_code == 404
    assert (await client.put(f"/api/transactions/{tx['id']}", json={"amount": 1}, headers=bob)).status_code == 404
    assert (await client.delete(f"/api/transactions/{tx['id']}", headers=bob)).status_code == 404

    listing = (await client.get("/api/transactions", headers=bob)).json()
    assert listing["transactions"] == []
    assert listing["pagination"]["total"] == 0


async def test_pagination(api, alice, books, client):
    for day in range(1, 8):
        await api.create_transaction(alice, books["rent"], books["source"], day, transaction_date=f"2024-06-0{day}")

    first = (await client.get("/api/transactions", params={"page": 1, "limit": 3}, headers=alice)).json()
    assert first["pagination"] == {"page": 1, "limit": 3, "total": 7, "totalPages": math.ceil(7 / 3)}
    # most recent first
    assert [tx["amount"] for tx in first["transactions"]] == [7, 6, 5]

    last = (await client.get("/api/transactions", params={"page": 3, "limit": 3}, headers=alice)).json()
    assert [tx["amount"] for tx in last["transactions"]] == [1]

    beyond = await client.get("/api/transactions", params={"page": 9, "limit": 3}, headers=alice)
    assert beyond.status_code == 200
    assert beyond.json()["transactions"] == []
    assert beyond.json()["pagination"]["totalPages"] == 3


async def test_default_page_size(alice, client):
    body = (await client.get("/api/transactions", headers=alice)).json()
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 0, "totalPages": 0}


async def test_invalid_paging_parameters(alice, client):
    assert (await client.get("/api/transactions", params={"page": 0}, headers=alice)).status_code == 400
    assert (await client.get("/api/transactions", params={"limit": 0}, headers=alice)).status_code == 400


async def test_oversized_page_is_clamped(api, alice, books, client):
    for day in range(1, 4):
        await api.create_transaction(alice, books["rent"], books["source"], day, transaction_date=f"2024-06-0{day}")

    response = await client.get("/api/transactions", params={"limit": 500}, headers=alice)
    assert response.status_code == 200
    body = response.json()
    assert len(body["transactions"]) == 3
    assert body["pagination"] == {"page": 1, "limit": 100, "total": 3, "totalPages": 1}


async def test_filters(api, alice, books, client):
    second_source = (await api.create_source(alice, name="Cash Box", source_type="CASH"))["id"]
    await api.create_transaction(alice, books["rent"], books["source"], 10, transaction_date="2024-01-31T18:00:00")
    await api.create_transaction(alice, books["rent"], second_source, 20, transaction_date="2024-02-01")
    await api.create_transaction(
        alice, books["sales"], books["source"], 30, transaction_type="INCOME", transaction_date="2024-01-15"
    )

    async def amounts(**params):
        body = (await client.get("/api/transactions", params=params, headers=alice)).json()
        return sorted(tx["amount"] for tx in body["transactions"])

    assert await amounts(type="INCOME") == [30]
    assert await amounts(type="bogus") == [10, 20, 30]
    assert await amounts(categoryId=books["rent"]) == [10, 20]
    assert await amounts(sourceId=second_source) == [20]
    # both bounds inclusive, the end day included in full
    assert await amounts(startDate="2024-01-15", endDate="2024-01-31") == [10, 30]
    assert await amounts(startDate="2024-02-01") == [20]
    assert await amounts(endDate="2024-01-14") == []
