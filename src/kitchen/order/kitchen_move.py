"""Kitchen move — turns a confirmed order into scheduled deliveries.

Deliveries are inserted first (duplicates on the source key are counted
and ignored), then the order is flagged. Both writes share the handler's
unit of work, so a failure leaves the order unflagged and retryable.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from kitchen.clock import get_clock
from kitchen.delivery.delivery import Delivery
from kitchen.delivery.planning import DeliveryPlanner
from kitchen.domain import kitchen
from kitchen.errors import AlreadyProcessedError
from kitchen.order.order import Order
from kitchen.settings import get_settings

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class MoveOrderToKitchen:
    order_id = Identifier(required=True)
    admin_id = String(required=True, max_length=100)


@kitchen.command_handler(part_of=Order)
class KitchenMoveHandler:
    @handle(MoveOrderToKitchen)
    def move_to_kitchen(self, command):
        orders = current_domain.repository_for(Order)
        order = orders.get(command.order_id)
        try:
            order.assert_ready_for_kitchen()
        except AlreadyProcessedError:
            logger.info("Order already in kitchen", order_id=str(order.id))
            return {
                "already_processed": True,
                "deliveries_created": 0,
                "duplicates_ignored": 0,
                "moved_to_kitchen_at": order.moved_to_kitchen_at,
            }

        planned = DeliveryPlanner(get_settings(), get_clock()).plan(order)
        created, duplicates = current_domain.repository_for(Delivery).insert_ignoring_duplicates(planned)

        order.mark_moved_to_kitchen(deliveries_created=created, moved_by=command.admin_id)
        orders.save_guarded(order)
        logger.info(
            "Order moved to kitchen",
            order_id=str(order.id),
            deliveries_created=created,
            duplicates_ignored=duplicates,
            admin_id=command.admin_id,
        )
        return {
            "already_processed": False,
            "deliveries_created": created,
            "duplicates_ignored": duplicates,
            "moved_to_kitchen_at": order.moved_to_kitchen_at,
        }
