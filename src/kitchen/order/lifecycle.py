"""Fulfillment lifecycle — command and handler.

The handler compares the caller's observed status (``expected_status``)
with the stored one before moving, and the save itself is conditioned on
the aggregate version that was read. Either mismatch is a ConflictError.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.errors import ConflictError
from kitchen.order.order import Actor, Order, OrderStatus

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class AdvanceOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)
    expected_status = String(max_length=30)
    changed_by = String(choices=Actor, default=Actor.ADMIN.value)


@kitchen.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(AdvanceOrderStatus)
    def advance_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        initialized = order.ensure_lifecycle_initialized()

        # PAID is never a valid manual target, even when it is the current status
        if command.status != OrderStatus.PAID.value and order.current_status == command.status:
            if initialized:
                repo.save_guarded(order)
            return {"changed": False, "current_status": order.current_status}

        if command.expected_status and command.expected_status != order.current_status:
            raise ConflictError(
                f"Order status is {order.current_status}, expected {command.expected_status}",
                current_status=order.current_status,
            )

        previous = order.current_status
        order.advance_status(command.status, command.changed_by or Actor.ADMIN.value)
        repo.save_guarded(order)
        logger.info(
            "Order status advanced",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.current_status,
            changed_by=command.changed_by,
        )
        return {"changed": True, "current_status": order.current_status}
