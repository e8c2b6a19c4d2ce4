"""Delivery domain events."""

from protean.fields import DateTime, Identifier, Integer, String

from kitchen.domain import kitchen


@kitchen.event(part_of="Delivery")
class DeliveryScheduled:
    """A delivery record was generated from a confirmed order."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    subscription_id = String()
    date = String(required=True)
    time = String(required=True)
    item_count = Integer(required=True)
    scheduled_at = DateTime(required=True)


@kitchen.event(part_of="Delivery")
class DeliveryStatusChanged:
    """A delivery moved one step through the kitchen workflow (or was skipped)."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    changed_by = String(required=True)
    changed_at = DateTime(required=True)
