"""Application tests for MoveOrderToKitchen — generation, idempotency and gating."""

from unittest.mock import patch

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from kitchen.delivery.delivery import Delivery
from kitchen.delivery.planning import DeliveryPlanner
from kitchen.errors import InvalidTransitionError
from kitchen.order.kitchen_move import MoveOrderToKitchen
from kitchen.order.order import Order
from kitchen.settings import get_settings


def _move(order_id, admin_id="admin-1"):
    return current_domain.process(MoveOrderToKitchen(order_id=order_id, admin_id=admin_id), asynchronous=False)


def _deliveries(order_id):
    return current_domain.repository_for(Delivery).for_order(order_id)


class TestGeneration:
    def test_weekly_monday_start_creates_ten(self, paid_order, make_item):
        order = paid_order(items=[make_item(plan="weekly", start_date="2026-10-19", delivery_time="12:30")])
        result = _move(order.id)

        assert result["already_processed"] is False
        assert result["deliveries_created"] == 10
        assert result["duplicates_ignored"] == 0

        deliveries = _deliveries(order.id)
        assert len(deliveries) == 10
        assert deliveries[0].date == "2026-10-19"
        assert all(d.status == "PENDING" for d in deliveries)
        assert all(d.address.city == "Bengaluru" for d in deliveries)

    def test_order_is_flagged(self, paid_order):
        order = paid_order()
        result = _move(order.id)
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.moved_to_kitchen_at is not None
        assert result["moved_to_kitchen_at"] == stored.moved_to_kitchen_at

    def test_single_order_creates_one(self, paid_order, make_item):
        order = paid_order(items=[make_item("a", plan="single"), make_item("b", plan="trial")])
        assert _move(order.id)["deliveries_created"] == 1
        assert len(_deliveries(order.id)[0].items) == 2


class TestIdempotency:
    def test_second_move_is_already_processed(self, paid_order):
        order = paid_order()
        _move(order.id)
        result = _move(order.id)

        assert result["already_processed"] is True
        assert result["deliveries_created"] == 0
        assert len(_deliveries(order.id)) == 10

    def test_leftovers_from_a_failed_attempt_are_ignored(self, paid_order, clock):
        order = paid_order()
        # A previous attempt inserted the deliveries but never flagged the order
        leftovers = DeliveryPlanner(get_settings(), clock).plan(order)
        current_domain.repository_for(Delivery).insert_ignoring_duplicates(leftovers[:4])

        result = _move(order.id)
        assert result["deliveries_created"] == 6
        assert result["duplicates_ignored"] == 4
        assert len(_deliveries(order.id)) == 10

    def test_failure_leaves_order_retryable(self, paid_order):
        order = paid_order()
        with patch.object(DeliveryPlanner, "plan", side_effect=RuntimeError("planner down")):
            with pytest.raises(RuntimeError):
                _move(order.id)

        assert current_domain.repository_for(Order).get(order.id).moved_to_kitchen_at is None
        assert _move(order.id)["deliveries_created"] == 10


class TestGate:
    def test_unconfirmed_order_is_rejected(self, paid_order):
        order = paid_order(acceptance=None)
        with pytest.raises(InvalidTransitionError):
            _move(order.id)
        assert _deliveries(order.id) == []

    def test_declined_order_is_rejected(self, paid_order):
        order = paid_order(acceptance="DECLINED")
        with pytest.raises(InvalidTransitionError):
            _move(order.id)

    def test_unpaid_order_is_rejected(self, make_item):
        order = Order.place(user_id="user-1", items_data=[make_item()])
        current_domain.repository_for(Order).add(order)
        with pytest.raises(ValidationError):
            _move(order.id)
