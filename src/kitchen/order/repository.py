"""Repository for the Order aggregate."""

from protean.exceptions import ExpectedVersionError
from protean.utils.query import Q

from kitchen.domain import kitchen
from kitchen.errors import ConflictError
from kitchen.order.order import Order, OrderStatus, PaymentStatus
from kitchen.shared.versioning import is_stale


@kitchen.repository(part_of=Order)
class OrderRepository:
    def save_guarded(self, order: Order) -> Order:
        """Persist only if nobody else wrote the order since it was read."""
        conflict = ConflictError("Order status changed concurrently. Please retry.", current_status=order.current_status)
        if is_stale(self._dao, order):
            raise conflict
        try:
            return self.add(order)
        except ExpectedVersionError as exc:
            raise conflict from exc

    def find_paid(self, current_status: str | None = None, page: int = 1, limit: int = 20) -> tuple[list[Order], int]:
        """One page of paid orders, newest first, with the unpaged total.

        PAID also matches orders that never got a lifecycle.
        """
        query = self._dao.query.filter(payment_status=PaymentStatus.PAID.value)
        if current_status == OrderStatus.PAID.value:
            query = query.filter(Q(current_status=current_status) | Q(current_status__isnull=True))
        elif current_status:
            query = query.filter(current_status=current_status)

        results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return results.items, results.total

    def find_recurring_line(self, user_id: str, cart_item_id: str) -> Order | None:
        """The user's order carrying the given weekly/monthly line, if any."""
        for order in self._dao.query.filter(user_id=str(user_id)).limit(None).all().items:
            for item in order.items or []:
                if item.cart_item_id == cart_item_id and item.is_recurring:
                    return order
        return None
