import uuid

import pytest
from fastapi.testclient import TestClient

from sweetshop.database import get_session
from sweetshop.main import app
from sweetshop.models.sweet import MAX_QUANTITY


# -------- Access gate --------


def test_sweets_require_token(client):
    assert client.get("/api/sweets").status_code == 401
    assert client.get("/api/sweets/search").status_code == 401
    assert client.post(f"/api/sweets/{uuid.uuid4()}/purchase").status_code == 401


def test_invalid_token_is_401(client):
    res = client.get("/api/sweets", headers={"Authorization": "Bearer garbage"})

    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


def test_customer_cannot_manage_inventory(client, customer_headers, make_sweet):
    sweet = make_sweet()

    create = client.post(
        "/api/sweets",
        json={"name": "Fudge", "price": 2.0},
        headers=customer_headers,
    )
    update = client.put(
        f"/api/sweets/{sweet['id']}", json={"price": 1.0}, headers=customer_headers
    )
    delete = client.delete(f"/api/sweets/{sweet['id']}", headers=customer_headers)
    restock = client.post(f"/api/sweets/{sweet['id']}/restock", headers=customer_headers)

    assert [r.status_code for r in (create, update, delete, restock)] == [403] * 4


def test_customer_can_browse_and_purchase(client, customer_headers, make_sweet):
    sweet = make_sweet(quantity=2)

    assert client.get("/api/sweets", headers=customer_headers).status_code == 200
    res = client.post(f"/api/sweets/{sweet['id']}/purchase", headers=customer_headers)

    assert res.status_code == 200
    assert res.json()["quantity"] == 1


def test_open_policy_lets_any_user_manage(client, customer_headers, open_policy):
    res = client.post(
        "/api/sweets",
        json={"name": "Fudge", "category": "Fudge", "price": 2.0, "quantity": 1},
        headers=customer_headers,
    )

    assert res.status_code == 201


# -------- CRUD --------


def test_create_and_list(client, admin_headers, make_sweet):
    first = make_sweet(name="Gummy Bears", category="Gummies", price=1.5, quantity=3)
    second = make_sweet(name="Dark Chocolate", category="Chocolate", price=7.0)

    res = client.get("/api/sweets", headers=admin_headers)

    assert res.status_code == 200
    assert [s["id"] for s in res.json()] == [first["id"], second["id"]]
    assert first["quantity"] == 3
    assert first["price"] == 1.5


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "price": 1.0},
        {"name": "Toffee", "price": -1.0},
        {"name": "Toffee", "price": 1.0, "quantity": -5},
        {"category": "Toffee", "price": 1.0},
    ],
)
def test_create_rejects_invalid_sweet(client, admin_headers, payload):
    res = client.post("/api/sweets", json=payload, headers=admin_headers)

    assert res.status_code == 400


def test_get_sweet(client, admin_headers, make_sweet):
    sweet = make_sweet()

    assert client.get(f"/api/sweets/{sweet['id']}", headers=admin_headers).json() == sweet
    missing = client.get(f"/api/sweets/{uuid.uuid4()}", headers=admin_headers)
    assert missing.status_code == 404


def test_update_is_partial(client, admin_headers, make_sweet):
    sweet = make_sweet(price=4.0, quantity=5)

    res = client.put(
        f"/api/sweets/{sweet['id']}", json={"price": 9.99}, headers=admin_headers
    )

    assert res.status_code == 200
    assert res.json()["price"] == 9.99
    assert res.json()["quantity"] == 5
    assert res.json()["name"] == sweet["name"]


def test_update_rejects_null_and_negative(client, admin_headers, make_sweet):
    sweet = make_sweet()

    null_name = client.put(
        f"/api/sweets/{sweet['id']}", json={"name": None}, headers=admin_headers
    )
    negative = client.put(
        f"/api/sweets/{sweet['id']}", json={"quantity": -1}, headers=admin_headers
    )

    assert null_name.status_code == 400
    assert negative.status_code == 400


def test_update_unknown_id_is_404(client, admin_headers):
    res = client.put(
        f"/api/sweets/{uuid.uuid4()}", json={"price": 1.0}, headers=admin_headers
    )

    assert res.status_code == 404


def test_delete_then_operations_are_404(client, admin_headers, make_sweet):
    sweet = make_sweet()
    url = f"/api/sweets/{sweet['id']}"

    assert client.delete(url, headers=admin_headers).status_code == 204

    assert client.delete(url, headers=admin_headers).status_code == 404
    assert client.post(f"{url}/purchase", headers=admin_headers).status_code == 404
    assert client.post(f"{url}/restock", headers=admin_headers).status_code == 404
    assert client.put(url, json={"price": 1.0}, headers=admin_headers).status_code == 404


# -------- Search / categories --------


@pytest.fixture
def catalog(make_sweet):
    return {
        "milk": make_sweet(name="Milk Chocolate", category="Chocolate", price=4.0),
        "dark": make_sweet(name="Dark CHOCO Truffle", category="Chocolate", price=8.5),
        "lux": make_sweet(name="Choco Deluxe Box", category="Gifts", price=25.0),
        "gummy": make_sweet(name="Gummy Worms", category="Gummies", price=6.0),
    }


def _ids(res):
    return {s["id"] for s in res.json()}


def test_search_is_conjunctive(client, admin_headers, catalog):
    res = client.get(
        "/api/sweets/search",
        params={"name": "choco", "minPrice": 5, "maxPrice": 10},
        headers=admin_headers,
    )

    assert res.status_code == 200
    assert _ids(res) == {catalog["dark"]["id"]}


def test_search_by_category_is_exact(client, admin_headers, catalog):
    res = client.get(
        "/api/sweets/search", params={"category": "Chocolate"}, headers=admin_headers
    )
    partial = client.get(
        "/api/sweets/search", params={"category": "Choc"}, headers=admin_headers
    )

    assert _ids(res) == {catalog["milk"]["id"], catalog["dark"]["id"]}
    assert partial.json() == []


def test_search_price_bounds_are_inclusive(client, admin_headers, catalog):
    res = client.get(
        "/api/sweets/search",
        params={"minPrice": 4.0, "maxPrice": 6.0},
        headers=admin_headers,
    )

    assert _ids(res) == {catalog["milk"]["id"], catalog["gummy"]["id"]}


def test_empty_search_equals_list(client, admin_headers, catalog):
    searched = client.get("/api/sweets/search", headers=admin_headers)
    listed = client.get("/api/sweets", headers=admin_headers)

    assert searched.json() == listed.json()
    assert len(listed.json()) == 4


def test_search_rejects_inverted_price_range(client, admin_headers):
    res = client.get(
        "/api/sweets/search",
        params={"minPrice": 10, "maxPrice": 5},
        headers=admin_headers,
    )

    assert res.status_code == 400


def test_search_name_wildcards_are_literal(client, admin_headers, make_sweet):
    make_sweet(name="Lemon Drops")

    res = client.get("/api/sweets/search", params={"name": "%"}, headers=admin_headers)

    assert res.json() == []


def test_categories_are_derived(client, admin_headers, make_sweet):
    make_sweet(name="A", category="Toffee")
    make_sweet(name="B", category="Chocolate")
    make_sweet(name="C", category="Toffee")
    make_sweet(name="D", category="")

    res = client.get("/api/sweets/categories", headers=admin_headers)

    assert res.json() == ["Chocolate", "Toffee"]


# -------- Purchase / restock --------


def test_purchase_decrements_by_one(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=3)

    res = client.post(f"/api/sweets/{sweet['id']}/purchase", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["quantity"] == 2


def test_purchase_out_of_stock_changes_nothing(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=0)

    res = client.post(f"/api/sweets/{sweet['id']}/purchase", headers=admin_headers)

    assert res.status_code == 400
    assert res.json()["detail"] == "Out of stock"
    after = client.get(f"/api/sweets/{sweet['id']}", headers=admin_headers)
    assert after.json()["quantity"] == 0


def test_restock_defaults_to_one(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=4)

    res = client.post(f"/api/sweets/{sweet['id']}/restock", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["quantity"] == 5


def test_restock_by_amount(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=4)

    res = client.post(
        f"/api/sweets/{sweet['id']}/restock", json={"amount": 6}, headers=admin_headers
    )

    assert res.json()["quantity"] == 10


@pytest.mark.parametrize("amount", [0, -3, 1.5, "many"])
def test_restock_rejects_non_positive_amount(client, admin_headers, make_sweet, amount):
    sweet = make_sweet(quantity=4)

    res = client.post(
        f"/api/sweets/{sweet['id']}/restock",
        json={"amount": amount},
        headers=admin_headers,
    )

    assert res.status_code == 400
    after = client.get(f"/api/sweets/{sweet['id']}", headers=admin_headers)
    assert after.json()["quantity"] == 4


def test_quantity_never_negative_over_a_sequence(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=1)
    url = f"/api/sweets/{sweet['id']}"
    seen = []

    for step in ["purchase", "purchase", "restock", "purchase", "purchase", "purchase"]:
        client.post(f"{url}/{step}", headers=admin_headers)
        seen.append(client.get(url, headers=admin_headers).json()["quantity"])
    client.put(url, json={"quantity": 2}, headers=admin_headers)
    client.post(f"{url}/purchase", headers=admin_headers)
    seen.append(client.get(url, headers=admin_headers).json()["quantity"])

    assert seen == [0, 0, 1, 0, 0, 0, 1]


# -------- Quantity ceiling --------


def test_restock_past_the_ceiling_is_rejected(client, admin_headers, make_sweet):
    sweet = make_sweet(quantity=MAX_QUANTITY)
    url = f"/api/sweets/{sweet['id']}"

    over = client.post(f"{url}/restock", json={"amount": 1}, headers=admin_headers)
    huge = client.post(f"{url}/restock", json={"amount": 2**63}, headers=admin_headers)

    assert over.status_code == huge.status_code == 400
    assert client.get(url, headers=admin_headers).json()["quantity"] == MAX_QUANTITY


def test_create_and_update_reject_quantity_over_the_ceiling(client, admin_headers, make_sweet):
    created = client.post(
        "/api/sweets",
        json={"name": "Toffee", "price": 1.0, "quantity": MAX_QUANTITY + 1},
        headers=admin_headers,
    )
    sweet = make_sweet(quantity=3)
    updated = client.put(
        f"/api/sweets/{sweet['id']}", json={"quantity": 2**63}, headers=admin_headers
    )

    assert created.status_code == updated.status_code == 400


# -------- Error envelope --------


def test_unhandled_error_is_opaque_500(client, admin_headers, caplog):
    def _broken_session():
        raise RuntimeError("db password=hunter2")
        yield

    app.dependency_overrides[get_session] = _broken_session
    raw = TestClient(app, raise_server_exceptions=False)

    res = raw.get("/api/sweets", headers=admin_headers)

    assert res.status_code == 500
    assert res.json() == {"detail": "Internal server error"}
    assert "hunter2" not in res.text
    assert "Unhandled error on GET /api/sweets" in caplog.text
