"""Inbound cross-domain event handler — the kitchen reacts to payment capture.

Cross-domain events are imported from shared.events.payments and registered
as external events via kitchen.register_external_event().
"""

import structlog
from protean.utils.mixins import handle
from shared.events.payments import PaymentCaptured

from kitchen.domain import kitchen
from kitchen.order.order import Order
from kitchen.order.payment import record_payment

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
kitchen.register_external_event(PaymentCaptured, "Payments.PaymentCaptured.v1")


@kitchen.event_handler(part_of=Order, stream_category="payments::payment")
class PaymentOrderEventHandler:
    @handle(PaymentCaptured)
    def on_payment_captured(self, event: PaymentCaptured) -> None:
        logger.info(
            "Payment captured for order",
            order_id=str(event.order_id),
            payment_id=str(event.payment_id),
        )
        record_payment(str(event.order_id), str(event.payment_id), event.captured_at)
