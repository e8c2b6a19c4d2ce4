"""Admin acceptance of paid orders — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.order.order import Order

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class SetOrderAcceptance:
    """Confirm or decline a paid order before it reaches the kitchen."""

    order_id = Identifier(required=True)
    acceptance_status = String(required=True, max_length=20)
    admin_id = String(required=True, max_length=100)


@kitchen.command_handler(part_of=Order)
class OrderAcceptanceHandler:
    @handle(SetOrderAcceptance)
    def set_acceptance(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        changed = order.set_acceptance(command.acceptance_status, command.admin_id)
        if changed:
            repo.save_guarded(order)
            logger.info(
                "Order acceptance updated",
                order_id=str(order.id),
                acceptance_status=order.acceptance_status,
                admin_id=command.admin_id,
            )
        return {"changed": changed, "acceptance_status": order.acceptance_status}
