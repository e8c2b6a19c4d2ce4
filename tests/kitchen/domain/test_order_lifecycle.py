"""Tests for the Order fulfillment lifecycle and the kitchen-move gate."""

import pytest
from protean.exceptions import ValidationError

from kitchen.errors import AlreadyProcessedError, InvalidTransitionError
from kitchen.order.events import OrderMovedToKitchen, OrderStatusChanged
from kitchen.order.order import Order, OrderStatus

_FORWARD = ["CONFIRMED", "PREPARING", "OUT_FOR_DELIVERY", "DELIVERED"]


def _paid_order(make_item):
    order = Order.place(user_id="user-1", items_data=[make_item()])
    order.mark_paid(payment_id="pay-1")
    order._events.clear()
    return order


def _order_at(make_item, status):
    order = _paid_order(make_item)
    for step in _FORWARD[: _FORWARD.index(status) + 1] if status != "PAID" else []:
        order.advance_status(step)
    order._events.clear()
    return order


class TestValidTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("PAID", "CONFIRMED"),
            ("CONFIRMED", "PREPARING"),
            ("PREPARING", "OUT_FOR_DELIVERY"),
            ("OUT_FOR_DELIVERY", "DELIVERED"),
        ],
    )
    def test_one_step_forward(self, make_item, current, target):
        order = _order_at(make_item, current)
        assert order.advance_status(target) is True
        assert order.current_status == target
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.from_status == current
        assert event.to_status == target

    def test_same_status_is_a_noop(self, make_item):
        order = _order_at(make_item, "PREPARING")
        entries = len(order.status_history)
        assert order.advance_status("PREPARING") is False
        assert len(order.status_history) == entries
        assert order._events == []

    def test_history_follows_lifecycle_order(self, make_item):
        order = _order_at(make_item, "DELIVERED")
        statuses = [h.status for h in order.history]
        assert statuses == ["PAID", *_FORWARD]
        positions = [list(OrderStatus).index(OrderStatus(s)) for s in statuses]
        assert positions == sorted(positions)
        times = [h.changed_at for h in order.history]
        assert times == sorted(times)

    def test_history_records_actor(self, make_item):
        order = _paid_order(make_item)
        order.advance_status("CONFIRMED", changed_by="ADMIN")
        assert order.history[-1].changed_by == "ADMIN"


class TestInvalidTransitions:
    def test_skipping_a_step(self, make_item):
        order = _order_at(make_item, "PAID")
        with pytest.raises(InvalidTransitionError) as exc:
            order.advance_status("PREPARING")
        assert "PAID -> PREPARING" in str(exc.value)

    def test_moving_backwards(self, make_item):
        order = _order_at(make_item, "OUT_FOR_DELIVERY")
        with pytest.raises(InvalidTransitionError):
            order.advance_status("PREPARING")

    def test_delivered_is_final(self, make_item):
        order = _order_at(make_item, "DELIVERED")
        with pytest.raises(InvalidTransitionError) as exc:
            order.advance_status("OUT_FOR_DELIVERY")
        assert "already delivered" in str(exc.value)

    def test_paid_cannot_be_set_manually(self, make_item):
        order = _order_at(make_item, "CONFIRMED")
        with pytest.raises(InvalidTransitionError):
            order.advance_status("PAID")

    def test_unknown_status(self, make_item):
        order = _paid_order(make_item)
        with pytest.raises(ValidationError) as exc:
            order.advance_status("SHIPPED")
        assert "Invalid status" in str(exc.value)

    def test_unpaid_order(self, make_item):
        order = Order.place(user_id="user-1", items_data=[make_item()])
        with pytest.raises(ValidationError):
            order.advance_status("CONFIRMED")


class TestLazyInitialization:
    def test_legacy_paid_order_starts_at_paid(self, make_item):
        order = Order.place(user_id="user-1", items_data=[make_item()])
        # Paid before lifecycle tracking existed
        order.payment_status = "PAID"
        order.paid_at = order.created_at

        assert order.ensure_lifecycle_initialized() is True
        assert order.current_status == "PAID"
        assert order.history[0].changed_at == order.paid_at
        assert order.history[0].changed_by == "SYSTEM"

    def test_initialization_happens_once(self, make_item):
        order = _paid_order(make_item)
        assert order.ensure_lifecycle_initialized() is False
        assert len(order.status_history) == 1


class TestKitchenGate:
    def test_requires_confirmation(self, make_item):
        order = _paid_order(make_item)
        with pytest.raises(InvalidTransitionError) as exc:
            order.assert_ready_for_kitchen()
        assert "CONFIRMED" in str(exc.value)

    def test_requires_payment(self, make_item):
        order = Order.place(user_id="user-1", items_data=[make_item()])
        with pytest.raises(ValidationError):
            order.assert_ready_for_kitchen()

    def test_mark_moved(self, make_item):
        order = _paid_order(make_item)
        order.set_acceptance("CONFIRMED", admin_id="admin-1")
        order._events.clear()

        order.mark_moved_to_kitchen(deliveries_created=3, moved_by="admin-1")
        assert order.moved_to_kitchen_at is not None
        event = order._events[-1]
        assert isinstance(event, OrderMovedToKitchen)
        assert event.deliveries_created == 3

    def test_second_move_is_already_processed(self, make_item):
        order = _paid_order(make_item)
        order.set_acceptance("CONFIRMED", admin_id="admin-1")
        order.mark_moved_to_kitchen(deliveries_created=3, moved_by="admin-1")
        with pytest.raises(AlreadyProcessedError):
            order.assert_ready_for_kitchen()
