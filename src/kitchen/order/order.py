"""Order aggregate (CQRS) — payment, admin acceptance and fulfillment lifecycle.

Payment is owned by an external collaborator; this aggregate only records
the fact that an order became PAID. Two independent state machines follow:

Acceptance:
    PENDING_REVIEW → CONFIRMED | DECLINED  (only before the kitchen move)

Fulfillment lifecycle (forward only, one step at a time):
    PAID → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED

Repeating the current status is a no-op so client retries stay safe.
Every lifecycle change appends to ``status_history`` in the same write.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    Date,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from kitchen.domain import kitchen
from kitchen.errors import AlreadyProcessedError, InvalidTransitionError
from kitchen.order.events import (
    OrderAcceptanceChanged,
    OrderMovedToKitchen,
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
)
from kitchen.shared.address import Address


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ItemType(Enum):
    MEAL = "meal"
    ADDON = "addon"
    BUILD_YOUR_OWN = "byo"


class Plan(Enum):
    SINGLE = "single"
    TRIAL = "trial"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


RECURRING_PLANS = {Plan.WEEKLY.value, Plan.MONTHLY.value}


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class AcceptanceStatus(Enum):
    PENDING_REVIEW = "PENDING_REVIEW"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"


class OrderStatus(Enum):
    PAID = "PAID"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"


class Actor(Enum):
    SYSTEM = "SYSTEM"
    ADMIN = "ADMIN"
    KITCHEN = "KITCHEN"


_LIFECYCLE = [
    OrderStatus.PAID,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

_NEXT_STATUS = {current: following for current, following in zip(_LIFECYCLE, _LIFECYCLE[1:])}


def parse_enum(enum_cls, value, field_name):
    """Coerce a raw string into ``enum_cls`` or raise a ValidationError naming the field."""
    raw = str(value or "").strip()
    if not raw:
        raise ValidationError({field_name: [f"{field_name} is required"]})
    try:
        return enum_cls(raw)
    except ValueError as exc:
        raise ValidationError({field_name: [f"Invalid {field_name}: {raw}"]}) from exc


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@kitchen.entity(part_of="Order")
class OrderItem:
    """A priced cart line. Price and title are a snapshot owned by the pricing collaborator."""

    cart_item_id = String(required=True, max_length=100)
    item_type = String(required=True, choices=ItemType)
    plan = String(required=True, choices=Plan)
    quantity = Integer(required=True, min_value=1)
    title = String(max_length=255)
    unit_price = Float(min_value=0.0)
    start_date = Date()
    delivery_time = String(max_length=20)
    immediate_delivery = Boolean(default=False)

    @property
    def is_recurring(self) -> bool:
        return self.plan in RECURRING_PLANS


@kitchen.entity(part_of="Order")
class OrderStatusChange:
    sequence = Integer(required=True)
    status = String(required=True, choices=OrderStatus)
    changed_at = DateTime(required=True)
    changed_by = String(required=True, choices=Actor)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@kitchen.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    delivery_address = ValueObject(Address)

    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_id = String(max_length=255)
    paid_at = DateTime()

    acceptance_status = String(choices=AcceptanceStatus)
    current_status = String(choices=OrderStatus)
    status_history = HasMany(OrderStatusChange)
    moved_to_kitchen_at = DateTime()

    admin_notes = Text()
    admin_seen_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id: str, items_data: list[dict], delivery_address: dict | None = None):
        """Create an order from a priced cart snapshot. Payment comes later."""
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            delivery_address=Address(**delivery_address) if delivery_address else None,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**item_data))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(items_data, default=str),
                item_count=len(items_data),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    @property
    def history(self) -> list:
        return sorted(self.status_history or [], key=lambda entry: entry.sequence)

    def _assert_paid(self, message: str) -> None:
        if not self.is_paid:
            raise ValidationError({"payment_status": [message]})

    def _append_history(self, status: OrderStatus, changed_by: str, changed_at: datetime) -> None:
        self.add_status_history(
            OrderStatusChange(
                sequence=len(self.status_history or []) + 1,
                status=status.value,
                changed_at=changed_at,
                changed_by=changed_by,
            )
        )

    # -------------------------------------------------------------------
    # Payment (external collaborator)
    # -------------------------------------------------------------------
    def mark_paid(self, payment_id: str, paid_at: datetime | None = None) -> bool:
        """Record payment capture. Returns False when the order was already paid."""
        if self.is_paid:
            return False

        now = datetime.now(UTC)
        paid_at = paid_at or now
        self.payment_status = PaymentStatus.PAID.value
        self.payment_id = payment_id
        self.paid_at = paid_at
        self.acceptance_status = AcceptanceStatus.PENDING_REVIEW.value
        self.current_status = OrderStatus.PAID.value
        self._append_history(OrderStatus.PAID, Actor.SYSTEM.value, paid_at)
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                user_id=str(self.user_id),
                payment_id=payment_id,
                paid_at=paid_at,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Acceptance
    # -------------------------------------------------------------------
    def set_acceptance(self, acceptance_status: str, admin_id: str) -> bool:
        """Confirm or decline a paid order. Returns False when nothing changed."""
        target = parse_enum(AcceptanceStatus, acceptance_status, "acceptance_status")
        if target == AcceptanceStatus.PENDING_REVIEW:
            raise InvalidTransitionError({"acceptance_status": ["Cannot set PENDING_REVIEW manually"]})
        self._assert_paid("Acceptance updates are only allowed for paid orders")
        if self.moved_to_kitchen_at:
            raise InvalidTransitionError({"acceptance_status": ["Order has already been moved to kitchen"]})

        previous = self.acceptance_status or AcceptanceStatus.PENDING_REVIEW.value
        if previous == target.value:
            return False

        now = datetime.now(UTC)
        self.acceptance_status = target.value
        self.updated_at = now
        self.raise_(
            OrderAcceptanceChanged(
                order_id=str(self.id),
                previous_status=previous,
                acceptance_status=target.value,
                changed_by=str(admin_id),
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Fulfillment lifecycle
    # -------------------------------------------------------------------
    def ensure_lifecycle_initialized(self) -> bool:
        """Give older paid orders a PAID starting point. Returns True when initialized now."""
        self._assert_paid("Lifecycle updates are only allowed for paid orders")
        if self.current_status:
            return False

        changed_at = self.paid_at or self.updated_at or self.created_at or datetime.now(UTC)
        self.current_status = OrderStatus.PAID.value
        self._append_history(OrderStatus.PAID, Actor.SYSTEM.value, changed_at)
        return True

    def advance_status(self, target_status: str, changed_by: str = Actor.ADMIN.value) -> bool:
        """Move to the next lifecycle status. Returns False for a same-status no-op."""
        target = parse_enum(OrderStatus, target_status, "status")
        if target == OrderStatus.PAID:
            raise InvalidTransitionError({"status": ["Admins cannot set PAID manually"]})

        self.ensure_lifecycle_initialized()
        current = OrderStatus(self.current_status)
        if current == target:
            return False
        if current == OrderStatus.DELIVERED:
            raise InvalidTransitionError({"status": ["Order is already delivered and cannot be changed"]})
        if _NEXT_STATUS.get(current) != target:
            raise InvalidTransitionError({"status": [f"Invalid transition: {current.value} -> {target.value}"]})

        now = datetime.now(UTC)
        self.current_status = target.value
        self._append_history(target, changed_by, now)
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=current.value,
                to_status=target.value,
                changed_by=changed_by,
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Kitchen move
    # -------------------------------------------------------------------
    def assert_ready_for_kitchen(self) -> None:
        self._assert_paid("Kitchen move is only allowed for paid orders")
        if self.moved_to_kitchen_at:
            raise AlreadyProcessedError(f"Order {self.id} was already moved to kitchen")
        if (self.acceptance_status or AcceptanceStatus.PENDING_REVIEW.value) != AcceptanceStatus.CONFIRMED.value:
            raise InvalidTransitionError({"acceptance_status": ["Order must be CONFIRMED before moving to kitchen"]})

    def mark_moved_to_kitchen(self, deliveries_created: int, moved_by: str) -> None:
        """Flag the order once its deliveries exist. Must run after generation."""
        self.assert_ready_for_kitchen()

        now = datetime.now(UTC)
        self.moved_to_kitchen_at = now
        self.updated_at = now
        self.raise_(
            OrderMovedToKitchen(
                order_id=str(self.id),
                user_id=str(self.user_id),
                deliveries_created=deliveries_created,
                moved_by=str(moved_by),
                moved_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Admin side channel
    # -------------------------------------------------------------------
    def record_admin_notes(self, notes: str | None) -> None:
        self._assert_paid("Lifecycle updates are only allowed for paid orders")
        self.admin_notes = notes or ""
        self.updated_at = datetime.now(UTC)

    def mark_seen_by_admin(self) -> bool:
        """Stamp the first admin view. Later views leave the stamp untouched."""
        if self.admin_seen_at:
            return False
        self.admin_seen_at = datetime.now(UTC)
        return True
