"""Cross-domain event contract for payment capture.

Payment capture is owned by an external payments service. The kitchen
consumes this event shape to mark orders paid; it is registered as an
external event via kitchen.register_external_event() with a matching
__type__ string so Protean's stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class PaymentCaptured(BaseEvent):
    """The gateway captured payment for an order."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    captured_at = DateTime(required=True)
