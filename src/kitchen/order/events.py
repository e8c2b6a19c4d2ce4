"""Order domain events — facts about payment, acceptance and lifecycle changes."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from kitchen.domain import kitchen


@kitchen.event(part_of="Order")
class OrderPlaced:
    """A priced cart was turned into an order awaiting payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of line snapshots
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@kitchen.event(part_of="Order")
class OrderPaid:
    """The payment collaborator confirmed capture for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_id = String(required=True)
    paid_at = DateTime(required=True)


@kitchen.event(part_of="Order")
class OrderAcceptanceChanged:
    """An admin confirmed or declined a paid order."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String()
    acceptance_status = String(required=True)
    changed_by = String(required=True)
    changed_at = DateTime(required=True)


@kitchen.event(part_of="Order")
class OrderStatusChanged:
    """The order advanced one step along its fulfillment lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String()
    to_status = String(required=True)
    changed_by = String(required=True)
    changed_at = DateTime(required=True)


@kitchen.event(part_of="Order")
class OrderMovedToKitchen:
    """Deliveries were generated for the order and it was handed to the kitchen."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    deliveries_created = Integer(required=True)
    moved_by = String(required=True)
    moved_at = DateTime(required=True)
