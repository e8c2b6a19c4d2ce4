"""Shared BDD fixtures and step definitions for the Kitchen domain."""

from datetime import date

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from kitchen.delivery.delivery import Delivery
from kitchen.delivery.events import DeliveryScheduled, DeliveryStatusChanged
from kitchen.order.order import Order

_EVENT_CLASSES = {
    "DeliveryScheduled": DeliveryScheduled,
    "DeliveryStatusChanged": DeliveryStatusChanged,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending delivery for today", target_fixture="delivery")
def pending_delivery():
    delivery = Delivery.schedule(
        day=date(2026, 10, 19),
        time="12:30",
        user_id="user-bdd",
        order_id="order-bdd",
        items_data=[
            {
                "order_id": "order-bdd",
                "cart_item_id": "line-1",
                "item_type": "meal",
                "plan": "weekly",
                "title": "Paneer Bowl",
                "quantity": 1,
            }
        ],
        source_cart_item_id="line-1",
    )
    delivery._events.clear()
    return delivery


@given(
    parsers.cfparse('a confirmed paid order with a "{plan}" line'),
    target_fixture="order",
)
def confirmed_order_with_line(paid_order, make_item, plan):
    return paid_order(items=[make_item("line-1", plan=plan)], user_id="user-bdd")


@given(
    parsers.cfparse('a paid order awaiting review with a "{plan}" line'),
    target_fixture="order",
)
def order_awaiting_review(paid_order, make_item, plan):
    return paid_order(items=[make_item("line-1", plan=plan)], user_id="user-bdd", acceptance=None)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the delivery status is "{status}"'))
def delivery_status_is(delivery, status):
    assert delivery.status == status


@then(parsers.cfparse("a {event_type} event is raised"))
def event_raised(delivery, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in delivery._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in delivery._events]}"


@then(parsers.cfparse("the order has {count:d} deliveries"))
def order_has_deliveries(order, count):
    assert len(current_domain.repository_for(Delivery).for_order(order.id)) == count


@then("the order is not moved to kitchen")
def order_not_moved(order):
    assert current_domain.repository_for(Order).get(order.id).moved_to_kitchen_at is None
