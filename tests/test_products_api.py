# tests/test_products_api.py
import pytest
from fastapi.testclient import TestClient

from app.main import WELCOME_TEXT, create_app
from conftest import AUTH, make_settings

NEW_PRODUCT = {
    "name": "Blender",
    "description": "500W countertop blender",
    "price": 80,
    "category": "kitchen",
    "inStock": True,
}


def test_welcome_needs_no_key(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == WELCOME_TEXT


@pytest.mark.parametrize("method,path", [
    ("get", "/api/products"),
    ("get", "/api/products/search?q=phone"),
    ("get", "/api/products/stats"),
    ("get", "/api/products/1"),
    ("post", "/api/products"),
    ("put", "/api/products/1"),
    ("delete", "/api/products/1"),
])
@pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}])
def test_collection_endpoints_reject_bad_credentials(client, store, method, path, headers):
    kwargs = {"headers": headers}
    if method in ("post", "put"):
        kwargs["json"] = {"price": 1} if method == "put" else NEW_PRODUCT
    r = getattr(client, method)(path, **kwargs)
    assert r.status_code == 401
    assert r.json()["message"] == "Unauthorized"
    assert len(store) == 3
    assert store.get("1").value.price == 1200


def test_unconfigured_key_rejects_everything(store):
    client = TestClient(create_app(make_settings(api_key=None), store))
    r = client.get("/api/products", headers={"x-api-key": ""})
    assert r.status_code == 401


def test_list_defaults(client):
    r = client.get("/api/products", headers=AUTH)
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 1
    assert body["limit"] == 10
    assert body["total"] == 3
    assert [p["id"] for p in body["products"]] == ["1", "2", "3"]


def test_list_filter_and_page(client):
    r = client.get("/api/products?category=kitchen&page=1&limit=1", headers=AUTH)
    body = r.json()
    assert body["total"] == 1
    assert len(body["products"]) == 1
    assert body["products"][0]["category"] == "kitchen"


def test_list_second_page_and_out_of_range(client):
    body = client.get("/api/products?page=2&limit=2", headers=AUTH).json()
    assert body["total"] == 3
    assert [p["id"] for p in body["products"]] == ["3"]

    body = client.get("/api/products?page=5&limit=2", headers=AUTH).json()
    assert body["products"] == []
    assert body["total"] == 3


def test_list_bad_paging_falls_back_to_defaults(client):
    body = client.get("/api/products?page=abc&limit=-4", headers=AUTH).json()
    assert body["page"] == 1
    assert body["limit"] == 10


def test_list_limit_cap(store):
    client = TestClient(create_app(make_settings(max_page_limit=2), store))
    body = client.get("/api/products?limit=50", headers=AUTH).json()
    assert body["limit"] == 2
    assert len(body["products"]) == 2


def test_search_is_case_insensitive(client):
    r = client.get("/api/products/search?q=PHONE", headers=AUTH)
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Smartphone"]


def test_search_without_term_returns_everything(client):
    r = client.get("/api/products/search", headers=AUTH)
    assert len(r.json()) == 3


def test_stats(client):
    r = client.get("/api/products/stats", headers=AUTH)
    assert r.json() == {"electronics": 2, "kitchen": 1}


def test_get_product(client):
    r = client.get("/api/products/2", headers=AUTH)
    assert r.status_code == 200
    assert r.json() == {
        "id": "2",
        "name": "Smartphone",
        "description": "Latest model with 128GB storage",
        "price": 800,
        "category": "electronics",
        "inStock": True,
    }


def test_get_unknown_product(client):
    r = client.get("/api/products/nope", headers=AUTH)
    assert r.status_code == 404
    assert r.json()["message"] == "Product not found"


def test_create_product(client, store):
    r = client.post("/api/products", json=NEW_PRODUCT, headers=AUTH)
    assert r.status_code == 201
    body = r.json()
    assert body["id"] not in ("1", "2", "3")
    assert {k: v for k, v in body.items() if k != "id"} == NEW_PRODUCT
    assert len(store) == 4
    assert client.get(f"/api/products/{body['id']}", headers=AUTH).json() == body


def test_create_ignores_client_supplied_id(client):
    body = client.post("/api/products", json={**NEW_PRODUCT, "id": "1"}, headers=AUTH).json()
    assert body["id"] != "1"


def test_create_accepts_zero_price_and_out_of_stock(client):
    r = client.post("/api/products", json={**NEW_PRODUCT, "price": 0, "inStock": False}, headers=AUTH)
    assert r.status_code == 201
    assert r.json()["price"] == 0
    assert r.json()["inStock"] is False


@pytest.mark.parametrize("field", ["name", "description", "price", "category", "inStock"])
def test_create_missing_field(client, store, field):
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != field}
    r = client.post("/api/products", json=payload, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["message"] == "All fields are required"
    assert len(store) == 3


@pytest.mark.parametrize("field,value", [
    ("name", 42),
    ("description", ["x"]),
    ("price", "80"),
    ("price", True),
    ("category", {"a": 1}),
    ("inStock", "yes"),
])
def test_create_wrong_type(client, store, field, value):
    r = client.post("/api/products", json={**NEW_PRODUCT, field: value}, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid data types"
    assert len(store) == 3


def test_create_malformed_body(client, store):
    r = client.post("/api/products", content=b"{not json", headers={**AUTH, "content-type": "application/json"})
    assert r.status_code == 400
    assert len(store) == 3


def test_update_changes_only_given_field(client):
    before = client.get("/api/products/1", headers=AUTH).json()
    r = client.put("/api/products/1", json={"price": 999}, headers=AUTH)
    assert r.status_code == 200
    assert r.json() == {**before, "price": 999}
    assert client.get("/api/products/1", headers=AUTH).json() == {**before, "price": 999}


def test_update_is_idempotent(client):
    first = client.put("/api/products/3", json={"name": "Espresso Maker", "inStock": True}, headers=AUTH).json()
    second = client.put("/api/products/3", json={"name": "Espresso Maker", "inStock": True}, headers=AUTH).json()
    assert first == second
    assert second["inStock"] is True


def test_update_accepts_falsy_values(client):
    body = client.put("/api/products/1", json={"price": 0, "inStock": False}, headers=AUTH).json()
    assert body["price"] == 0
    assert body["inStock"] is False


def test_empty_update_is_noop(client):
    before = client.get("/api/products/2", headers=AUTH).json()
    r = client.put("/api/products/2", json={}, headers=AUTH)
    assert r.status_code == 200
    assert r.json() == before


@pytest.mark.parametrize("payload,message", [
    ({"name": 5}, "Name must be a non-empty string"),
    ({"description": ""}, "Description must be a non-empty string"),
    ({"price": "cheap"}, "Price must be a number"),
    ({"category": None}, "Category must be a non-empty string"),
    ({"inStock": "no"}, "inStock must be a boolean"),
])
def test_update_validation(client, payload, message):
    before = client.get("/api/products/1", headers=AUTH).json()
    r = client.put("/api/products/1", json=payload, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["message"] == message
    assert client.get("/api/products/1", headers=AUTH).json() == before


def test_update_unknown_product(client):
    r = client.put("/api/products/missing", json={"price": 1}, headers=AUTH)
    assert r.status_code == 404


def test_delete_then_get(client, store):
    r = client.delete("/api/products/1", headers=AUTH)
    assert r.status_code == 204
    assert r.content == b""
    assert client.get("/api/products/1", headers=AUTH).status_code == 404
    assert len(store) == 2


def test_repeated_delete_keeps_returning_404(client, store):
    client.delete("/api/products/3", headers=AUTH)
    for _ in range(2):
        assert client.delete("/api/products/3", headers=AUTH).status_code == 404
    assert len(store) == 2


def test_error_details_in_development(client):
    body = client.post("/api/products", json={}, headers=AUTH).json()
    assert body["error"]["kind"] == "ValidationError"
    assert body["error"]["status"] == 400
    assert body["error"]["fields"]


def test_error_details_hidden_in_production(store):
    client = TestClient(create_app(make_settings(environment="production"), store))
    body = client.get("/api/products/missing", headers=AUTH).json()
    assert body == {"message": "Product not found", "error": {}}


def test_unexpected_failure_is_a_500(store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("store exploded")

    monkeypatch.setattr(store, "stats", boom)
    client = TestClient(create_app(make_settings(environment="production"), store), raise_server_exceptions=False)
    r = client.get("/api/products/stats", headers=AUTH)
    assert r.status_code == 500
    assert r.json() == {"message": "Internal Server Error", "error": {}}


def test_unexpected_failure_detail_outside_production(store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("store exploded")

    monkeypatch.setattr(store, "search", boom)
    client = TestClient(create_app(make_settings(), store), raise_server_exceptions=False)
    body = client.get("/api/products/search", headers=AUTH).json()
    assert body["message"] == "Internal Server Error"
    assert body["error"]["exception"] == "RuntimeError"


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_create_rejects_non_finite_price(client, store, token):
    raw = '{"name": "x", "description": "y", "price": %s, "category": "z", "inStock": true}' % token
    r = client.post("/api/products", content=raw.encode(), headers={**AUTH, "content-type": "application/json"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid data types"
    assert len(store) == 3
    assert client.get("/api/products", headers=AUTH).status_code == 200


@pytest.mark.parametrize("token", ["NaN", "Infinity"])
def test_update_rejects_non_finite_price(client, token):
    r = client.put("/api/products/1", content=('{"price": %s}' % token).encode(),
                   headers={**AUTH, "content-type": "application/json"})
    assert r.status_code == 400
    assert r.json()["message"] == "Price must be a number"
    assert client.get("/api/products/1", headers=AUTH).json()["price"] == 1200


def test_unknown_method_without_key_is_unauthorized(client):
    r = client.patch("/api/products/1", json={"price": 1})
    assert r.status_code == 401
    assert r.json()["message"] == "Unauthorized"


def test_unknown_method_with_key(client):
    r = client.patch("/api/products/1", json={"price": 1}, headers=AUTH)
    assert r.status_code == 405
    body = r.json()
    assert body["message"] == "Method Not Allowed"
    assert body["error"]["status"] == 405
    assert "allow" in r.headers


def test_unknown_api_path(client):
    r = client.get("/api/nothing", headers=AUTH)
    assert r.status_code == 404
    assert set(r.json()) == {"message", "error"}
    assert client.get("/api/nothing").status_code == 401


def test_unknown_path_outside_api_in_production(store):
    client = TestClient(create_app(make_settings(environment="production"), store))
    r = client.get("/nowhere")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found", "error": {}}
