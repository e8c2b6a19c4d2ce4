"""Order placement — command and handler.

The cart/pricing collaborator hands over a priced snapshot; the kitchen
stores it as an order awaiting payment.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.order.order import Order

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of priced line dicts
    delivery_address = Text()  # JSON: address dict


@kitchen.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        delivery_address = command.delivery_address
        if isinstance(delivery_address, str):
            delivery_address = json.loads(delivery_address) if delivery_address.strip() else None

        order = Order.place(
            user_id=command.user_id,
            items_data=items_data,
            delivery_address=delivery_address,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order placed", order_id=str(order.id), user_id=str(command.user_id), items=len(items_data))
        return str(order.id)
