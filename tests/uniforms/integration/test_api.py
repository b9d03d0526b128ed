"""Integration tests for the Uniforms API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from uniforms.api import (
    item_router,
    maintenance_router,
    order_router,
    register_exception_handlers,
    student_router,
)
from uniforms.item.item import Item
from uniforms.order.order import Order


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(item_router)
    app.include_router(student_router)
    app.include_router(order_router)
    app.include_router(maintenance_router)
    register_exception_handlers(app)
    return TestClient(app)


def _catalogue(client, name="Jersey", variants=None):
    response = client.post(
        "/items",
        json={
            "name": name,
            "education_level": "Elementary",
            "price": 350.0,
            "reorder_point": 5,
            "variants": variants or [{"size": "Small (S)", "stock": 10}, {"size": "Medium (M)", "stock": 3}],
        },
    )
    assert response.status_code == 201
    return response.json()["item_id"]


def _register(client, student_id="stu-001", **overrides):
    body = {
        "student_id": student_id,
        "email": f"{student_id}@school.example",
        "name": "Ana Santos",
        "education_level": "Elementary",
        "gender": "Female",
        "student_type": "new",
    }
    body.update(overrides)
    response = client.post("/students", json=body)
    assert response.status_code == 201
    return student_id


def _order(client, student_id="stu-001", items=None, order_type="regular"):
    return client.post(
        "/orders",
        json={
            "student_id": student_id,
            "student_email": f"{student_id}@school.example",
            "student_name": "Ana Santos",
            "education_level": "Elementary",
            "items": items or [{"name": "Jersey", "size": "M", "quantity": 1, "unit_price": 350.0}],
            "order_type": order_type,
        },
    )


class TestItemEndpoints:
    def test_catalogue_and_read_item(self, client):
        item_id = _catalogue(client)

        body = client.get(f"/items/{item_id}").json()

        assert body["stock"] == 13
        assert {v["size"] for v in body["variants"]} == {"Small (S)", "Medium (M)"}

    def test_add_purchase(self, client):
        item_id = _catalogue(client)

        response = client.post(f"/items/{item_id}/purchases", json={"quantity": 2, "size": "S"})

        assert response.status_code == 200
        assert response.json()["new_stock"] == 12

    def test_purchase_without_size_is_bad_request(self, client):
        item_id = _catalogue(client)

        response = client.post(f"/items/{item_id}/purchases", json={"quantity": 2})

        assert response.status_code == 400

    def test_unknown_item_is_not_found(self, client):
        assert client.get("/items/does-not-exist").status_code == 404

    def test_pre_order_count(self, client):
        item_id = _catalogue(client)
        _order(client, order_type="pre-order", items=[{"name": "Jersey", "size": "Large", "quantity": 2}])

        body = client.get(f"/items/{item_id}/pre-orders").json()

        assert body["pre_order_quantity"] == 2


class TestOrderEndpoints:
    def test_place_order(self, client):
        item_id = _catalogue(client)
        _register(client)

        response = _order(client)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["inventory_updates"][0]["size"] == "Medium (M)"
        assert current_domain.repository_for(Item).get(item_id).stock == 12

    def test_admission_rejection_is_conflict(self, client):
        _catalogue(client)
        _register(client)
        client.put("/students/stu-001/item-limit", json={"total_item_limit": 1})
        _order(client)

        response = _order(client, items=[{"name": "ID Lace", "quantity": 1}])

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "slot_limit_exceeded"
        assert body["details"]["slots_left"] == 0

    def test_unregistered_student_is_conflict(self, client):
        _catalogue(client)

        response = _order(client, student_id="stu-404")

        assert response.status_code == 409
        assert response.json()["error"] == "not_eligible"

    def test_order_receipt(self, client):
        _catalogue(client)
        _register(client)
        order_id = _order(client).json()["order_id"]

        body = client.get(f"/orders/{order_id}").json()

        assert body["receipt"]["studentId"] == "stu-001"
        assert body["receipt"]["items"] == [{"name": "Jersey", "quantity": 1, "size": "M"}]

    def test_status_update_and_cancel(self, client):
        item_id = _catalogue(client)
        _register(client)
        order_id = _order(client).json()["order_id"]

        assert client.put(f"/orders/{order_id}/status", json={"status": "paid"}).status_code == 200
        response = client.put(f"/orders/{order_id}/status", json={"status": "cancelled", "note": "Refunded"})

        assert response.json()["status"] == "cancelled"
        assert current_domain.repository_for(Item).get(item_id).stock == 13

    def test_invalid_transition_is_bad_request(self, client):
        _catalogue(client)
        _register(client)
        order_id = _order(client).json()["order_id"]

        response = client.put(f"/orders/{order_id}/status", json={"status": "completed"})

        assert response.status_code == 400

    def test_student_confirmation(self, client):
        _catalogue(client)
        _register(client)
        order_id = _order(client).json()["order_id"]

        response = client.put(f"/orders/{order_id}/student-confirmation", json={"student_id": "stu-001"})

        assert response.status_code == 200
        assert current_domain.repository_for(Order).get(order_id).student_confirmed_at is not None

    def test_delete_order(self, client):
        _catalogue(client)
        _register(client)
        order_id = _order(client).json()["order_id"]

        assert client.delete(f"/orders/{order_id}").status_code == 200
        assert current_domain.repository_for(Order).get(order_id).is_active is False


class TestStudentEndpoints:
    def test_limits_summary(self, client):
        _catalogue(client)
        _register(client)
        client.put("/students/stu-001/item-limit", json={"total_item_limit": 3})
        _order(client)

        body = client.get("/students/stu-001/limits").json()

        assert body["item_limit"] == 3
        assert body["slots_used"] == 1
        assert body["slots_left"] == 2
        assert body["unclaimed_void_count"] == 0

    def test_duplicate_registration_is_bad_request(self, client):
        _register(client)

        response = client.post("/students", json={"student_id": "stu-001", "email": "other@school.example"})

        assert response.status_code == 400


class TestMaintenanceEndpoints:
    def test_restock_converts_pre_orders(self, client):
        _catalogue(client, variants=[{"size": "Large (L)", "stock": 4}])
        order_id = _order(
            client,
            order_type="pre-order",
            items=[{"name": "Jersey", "size": "Large", "quantity": 1}],
        ).json()["order_id"]

        response = client.post(
            "/maintenance/restock",
            json={"item_name": "Jersey", "education_level": "Elementary", "size": "L"},
        )

        assert response.json()["converted"] == [order_id]

    def test_void_sweep_with_nothing_due(self, client):
        _catalogue(client)
        _register(client)
        _order(client)

        response = client.post("/maintenance/void-unclaimed", json={"window": 7, "window_unit": "days"})

        assert response.json() == {"voided_count": 0, "order_ids": []}

    def test_beginning_inventory_sweep(self, client):
        _catalogue(client)

        assert client.post("/maintenance/beginning-inventory").json() == {"reset_count": 0, "item_ids": []}
