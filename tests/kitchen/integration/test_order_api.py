"""Integration tests for order placement, payment and admin order endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kitchen.api import register_error_handlers, routers

ADMIN = {"X-Admin-Id": "admin-1"}


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


def _place_and_pay(client, make_item, make_address, items=None, user_id="user-api"):
    response = client.post(
        "/orders",
        json={
            "user_id": user_id,
            "items": items or [make_item("line-1", plan="weekly", start_date="2026-10-19")],
            "delivery_address": make_address(),
        },
    )
    assert response.status_code == 201
    order_id = response.json()["order_id"]
    response = client.post(f"/orders/{order_id}/payment", json={"payment_id": "pay-api"})
    assert response.status_code == 200
    return order_id


def _confirmed(client, make_item, make_address, **kwargs):
    order_id = _place_and_pay(client, make_item, make_address, **kwargs)
    client.put(f"/admin/orders/{order_id}/acceptance", json={"acceptance_status": "confirmed"}, headers=ADMIN)
    return order_id


class TestPlacementAndPayment:
    def test_payment_is_idempotent(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.post(f"/orders/{order_id}/payment", json={"payment_id": "pay-other"})
        assert response.status_code == 200
        assert response.json() == {"recorded": False}

    def test_invalid_plan_is_400(self, client, make_item):
        response = client.post("/orders", json={"user_id": "u", "items": [make_item(plan="yearly")]})
        assert response.status_code == 400

    def test_empty_cart_is_422(self, client):
        response = client.post("/orders", json={"user_id": "u", "items": []})
        assert response.status_code == 422


class TestAdminOrders:
    def test_list_paid_orders_newest_first(self, client, make_item, make_address):
        first = _place_and_pay(client, make_item, make_address)
        second = _place_and_pay(client, make_item, make_address)
        client.post("/orders", json={"user_id": "u", "items": [make_item()]})  # unpaid

        response = client.get("/admin/orders")
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [o["order_id"] for o in body["orders"]] == [second, first]

    def test_list_filters_and_clamps(self, client, make_item, make_address):
        order_id = _confirmed(client, make_item, make_address)
        client.put(f"/admin/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=ADMIN)
        _place_and_pay(client, make_item, make_address)

        body = client.get("/admin/orders", params={"status": "PAID", "limit": 500}).json()
        assert body["limit"] == 100
        assert body["total"] == 1

        body = client.get("/admin/orders", params={"status": "CONFIRMED", "limit": 0}).json()
        assert body["limit"] == 1
        assert body["orders"][0]["order_id"] == order_id

    def test_read_marks_seen(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        first = client.get(f"/admin/orders/{order_id}", headers=ADMIN).json()
        second = client.get(f"/admin/orders/{order_id}", headers=ADMIN).json()
        assert first["admin_seen_at"] is not None
        assert second["admin_seen_at"] == first["admin_seen_at"]
        assert first["status_history"][0]["status"] == "PAID"

    def test_unknown_order_is_404(self, client):
        response = client.get("/admin/orders/does-not-exist", headers=ADMIN)
        assert response.status_code == 404

    def test_notes(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.put(f"/admin/orders/{order_id}/notes", json={"notes": "Gate code 4411"}, headers=ADMIN)
        assert response.status_code == 200
        assert client.get(f"/admin/orders/{order_id}", headers=ADMIN).json()["admin_notes"] == "Gate code 4411"


class TestLifecycleAPI:
    def test_advance_and_noop(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "confirmed"}, headers=ADMIN)
        assert response.json() == {"changed": True, "current_status": "CONFIRMED"}

        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=ADMIN)
        assert response.json() == {"changed": False, "current_status": "CONFIRMED"}

    def test_invalid_transition_is_400(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "DELIVERED"}, headers=ADMIN)
        assert response.status_code == 400

    def test_stale_expected_status_is_409(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        client.put(f"/admin/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=ADMIN)
        response = client.put(
            f"/admin/orders/{order_id}/status",
            json={"status": "PREPARING", "expected_status": "PAID"},
            headers=ADMIN,
        )
        assert response.status_code == 409
        assert response.json()["current_status"] == "CONFIRMED"

    def test_acceptance_after_kitchen_is_400(self, client, make_item, make_address):
        order_id = _confirmed(client, make_item, make_address)
        client.post(f"/admin/orders/{order_id}/kitchen", headers=ADMIN)
        response = client.put(
            f"/admin/orders/{order_id}/acceptance",
            json={"acceptance_status": "DECLINED"},
            headers=ADMIN,
        )
        assert response.status_code == 400

    def test_missing_admin_header_is_422(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.put(f"/admin/orders/{order_id}/acceptance", json={"acceptance_status": "CONFIRMED"})
        assert response.status_code == 422


class TestKitchenMoveAPI:
    def test_move_then_repeat(self, client, make_item, make_address):
        order_id = _confirmed(client, make_item, make_address)

        first = client.post(f"/admin/orders/{order_id}/kitchen", headers=ADMIN)
        assert first.status_code == 200
        assert first.json()["deliveries_created"] == 10
        assert first.json()["already_processed"] is False

        second = client.post(f"/admin/orders/{order_id}/kitchen", headers=ADMIN)
        assert second.status_code == 200
        assert second.json()["already_processed"] is True
        assert second.json()["deliveries_created"] == 0

        deliveries = client.get(f"/admin/orders/{order_id}/deliveries").json()["deliveries"]
        assert len(deliveries) == 10

    def test_unconfirmed_is_400(self, client, make_item, make_address):
        order_id = _place_and_pay(client, make_item, make_address)
        response = client.post(f"/admin/orders/{order_id}/kitchen", headers=ADMIN)
        assert response.status_code == 400
