from datetime import UTC, datetime

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from kitchen.clock import set_clock
from kitchen.clock.fixed_clock import FixedClock
from kitchen.order.order import Order
from kitchen.settings import KitchenSettings, configure_settings

# Monday, before the 06:00 skip cutoff
MONDAY_MORNING = datetime(2026, 10, 19, 5, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def kitchen_bed():
    from kitchen.domain import kitchen

    bed = DomainFixture(kitchen)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(kitchen_bed):
    with kitchen_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def settings():
    settings = KitchenSettings(timezone="UTC")
    configure_settings(settings)
    return settings


@pytest.fixture(autouse=True)
def clock():
    fixed = FixedClock(MONDAY_MORNING)
    set_clock(fixed)
    return fixed


def _make_item(cart_item_id="line-1", plan="weekly", **overrides):
    item = {
        "cart_item_id": cart_item_id,
        "item_type": "meal",
        "plan": plan,
        "quantity": 1,
        "title": f"Meal {cart_item_id}",
        "unit_price": 250.0,
    }
    item.update(overrides)
    return item


def _make_address():
    return {
        "label": "Home",
        "address_line1": "12 Residency Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560025",
    }


def _store_paid_order(items=None, user_id="user-1", acceptance="CONFIRMED", with_address=True) -> Order:
    """Persist a paid order, confirmed by default, and return it freshly loaded."""
    order = Order.place(
        user_id=user_id,
        items_data=items or [_make_item()],
        delivery_address=_make_address() if with_address else None,
    )
    order.mark_paid(payment_id="pay-001")
    if acceptance:
        order.set_acceptance(acceptance, admin_id="admin-1")
    repo = current_domain.repository_for(Order)
    repo.add(order)
    return repo.get(order.id)


@pytest.fixture()
def make_item():
    """Factory for priced cart lines."""
    return _make_item


@pytest.fixture()
def make_address():
    return _make_address


@pytest.fixture()
def paid_order():
    """Factory persisting a paid (and by default confirmed) order."""
    return _store_paid_order
