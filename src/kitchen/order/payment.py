"""Payment recording — the payments collaborator tells the kitchen an order is paid.

Recording is idempotent: once an order is PAID, repeats (with any payment
id) change nothing.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.order.order import Order

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class RecordOrderPayment:
    order_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    paid_at = DateTime()


def record_payment(order_id, payment_id, paid_at=None) -> bool:
    """Mark the order paid. Returns False when it already was."""
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)
    if not order.mark_paid(payment_id=payment_id, paid_at=paid_at):
        logger.info("Payment already recorded", order_id=str(order_id), payment_id=payment_id)
        return False

    repo.save_guarded(order)
    logger.info("Order marked paid", order_id=str(order_id), payment_id=payment_id)
    return True


@kitchen.command_handler(part_of=Order)
class RecordOrderPaymentHandler:
    @handle(RecordOrderPayment)
    def record_order_payment(self, command):
        return {"recorded": record_payment(command.order_id, command.payment_id, command.paid_at)}
