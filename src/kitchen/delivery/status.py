"""Delivery status updates from admins and the kitchen — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from kitchen.delivery.delivery import Delivery
from kitchen.domain import kitchen
from kitchen.errors import ConflictError
from kitchen.order.order import Actor

logger = structlog.get_logger(__name__)

_STAFF = {Actor.ADMIN.value, Actor.KITCHEN.value}


@kitchen.command(part_of="Delivery")
class AdvanceDeliveryStatus:
    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=30)
    actor = String(required=True, max_length=20)
    expected_status = String(max_length=30)


@kitchen.command_handler(part_of=Delivery)
class DeliveryStatusHandler:
    @handle(AdvanceDeliveryStatus)
    def advance_status(self, command):
        if command.actor not in _STAFF:
            raise ValidationError({"actor": [f"Invalid actor: {command.actor}"]})

        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)

        if delivery.status == command.status:
            return {"changed": False, "status": delivery.status}
        if command.expected_status and command.expected_status != delivery.status:
            raise ConflictError(
                f"Delivery status is {delivery.status}, expected {command.expected_status}",
                current_status=delivery.status,
            )

        previous = delivery.status
        delivery.transition_to(command.status, command.actor)
        repo.save_guarded(delivery)
        logger.info(
            "Delivery status advanced",
            delivery_id=str(delivery.id),
            from_status=previous,
            to_status=delivery.status,
            actor=command.actor,
        )
        return {"changed": True, "status": delivery.status}
