"""Delivery aggregate (CQRS) — one scheduled drop-off for one user on one day.

Deliveries are created once by the kitchen move and never deleted. Their
items are a snapshot of the order lines taken at generation time.

State Machine:
    PENDING → COOKING → PACKED → OUT_FOR_DELIVERY → DELIVERED
    PENDING → SKIPPED
    DELIVERED, SKIPPED are terminal
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean.fields import (
    Date,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from kitchen.domain import kitchen
from kitchen.delivery.events import DeliveryScheduled, DeliveryStatusChanged
from kitchen.errors import InvalidTransitionError
from kitchen.order.order import Actor, parse_enum
from kitchen.shared.address import Address
from kitchen.shared.dates import group_key, normalize_hhmm

COMBINED_SOURCE = "__ORDER__"


class DeliveryStatus(Enum):
    PENDING = "PENDING"
    COOKING = "COOKING"
    PACKED = "PACKED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    SKIPPED = "SKIPPED"


_FORWARD = [
    DeliveryStatus.PENDING,
    DeliveryStatus.COOKING,
    DeliveryStatus.PACKED,
    DeliveryStatus.OUT_FOR_DELIVERY,
    DeliveryStatus.DELIVERED,
]

_NEXT_STATUS = {current: following for current, following in zip(_FORWARD, _FORWARD[1:])}

TERMINAL_STATUSES = {DeliveryStatus.DELIVERED, DeliveryStatus.SKIPPED}


def next_status(current: DeliveryStatus) -> DeliveryStatus | None:
    return _NEXT_STATUS.get(current)


def source_key(order_id, day: date, cart_item_id: str) -> str:
    """Natural key of a generated delivery: one per order line per day."""
    return f"{order_id}|{day.isoformat()}|{cart_item_id}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@kitchen.entity(part_of="Delivery")
class DeliveryItem:
    order_id = Identifier(required=True)
    cart_item_id = String(required=True, max_length=100)
    item_type = String(required=True, max_length=20)
    plan = String(required=True, max_length=20)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)


@kitchen.entity(part_of="Delivery")
class DeliveryStatusChange:
    sequence = Integer(required=True)
    status = String(required=True, choices=DeliveryStatus)
    changed_at = DateTime(required=True)
    changed_by = String(required=True, choices=Actor)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@kitchen.aggregate
class Delivery:
    # Display values as requested at checkout, e.g. "2026-10-19" / "12:30 PM"
    date = String(required=True, max_length=10)
    time = String(required=True, max_length=20)
    # Machine-comparable values
    delivery_date = Date()
    delivery_time = String(max_length=5)

    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    subscription_id = String(max_length=100)
    group_key = String(max_length=255)
    source_key = String(required=True, max_length=255, unique=True)
    source_cart_item_id = String(required=True, max_length=100)
    address = ValueObject(Address)

    items = HasMany(DeliveryItem)
    status = String(choices=DeliveryStatus, default=DeliveryStatus.PENDING.value)
    status_history = HasMany(DeliveryStatusChange)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def schedule(
        cls,
        day: date,
        time: str,
        user_id: str,
        order_id: str,
        items_data: list[dict],
        source_cart_item_id: str,
        subscription_id: str | None = None,
        address: Address | None = None,
    ):
        """Build a PENDING delivery with its initial SYSTEM history entry."""
        now = datetime.now(UTC)
        delivery = cls(
            date=day.isoformat(),
            time=time,
            delivery_date=day,
            delivery_time=normalize_hhmm(time),
            user_id=user_id,
            order_id=order_id,
            subscription_id=subscription_id,
            group_key=group_key(user_id, day, time),
            source_key=source_key(order_id, day, source_cart_item_id),
            source_cart_item_id=source_cart_item_id,
            address=address,
            status=DeliveryStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            delivery.add_items(DeliveryItem(**item_data))
        delivery._append_history(DeliveryStatus.PENDING, Actor.SYSTEM.value, now)

        delivery.raise_(
            DeliveryScheduled(
                delivery_id=str(delivery.id),
                order_id=str(order_id),
                user_id=str(user_id),
                subscription_id=subscription_id,
                date=day.isoformat(),
                time=time,
                item_count=len(items_data),
                scheduled_at=now,
            )
        )
        return delivery

    @property
    def history(self) -> list:
        return sorted(self.status_history or [], key=lambda entry: entry.sequence)

    def _append_history(self, status: DeliveryStatus, changed_by: str, changed_at: datetime) -> None:
        self.add_status_history(
            DeliveryStatusChange(
                sequence=len(self.status_history or []) + 1,
                status=status.value,
                changed_at=changed_at,
                changed_by=changed_by,
            )
        )

    # -------------------------------------------------------------------
    # Kitchen workflow
    # -------------------------------------------------------------------
    def transition_to(self, target_status: str, changed_by: str) -> bool:
        """Advance one step, or skip from PENDING. Returns False for a same-status no-op."""
        target = parse_enum(DeliveryStatus, target_status, "status")
        current = DeliveryStatus(self.status)

        if current in TERMINAL_STATUSES and target != current:
            raise InvalidTransitionError({"status": [f"Delivery is {current.value} and cannot be changed"]})
        if target == current:
            return False

        can_skip = current == DeliveryStatus.PENDING and target == DeliveryStatus.SKIPPED
        if not can_skip and target != next_status(current):
            raise InvalidTransitionError({"status": [f"Invalid transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self._append_history(target, changed_by, now)
        self.updated_at = now
        self.raise_(
            DeliveryStatusChanged(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                from_status=current.value,
                to_status=target.value,
                changed_by=changed_by,
                changed_at=now,
            )
        )
        return True
