"""Admin side channel — notes and the first-seen marker."""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.errors import ConflictError
from kitchen.order.order import Order

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Order")
class UpdateAdminNotes:
    order_id = Identifier(required=True)
    notes = Text()


@kitchen.command(part_of="Order")
class MarkOrderSeen:
    order_id = Identifier(required=True)


@kitchen.command_handler(part_of=Order)
class AdminNotesHandler:
    @handle(UpdateAdminNotes)
    def update_notes(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_admin_notes(command.notes)
        repo.save_guarded(order)

    @handle(MarkOrderSeen)
    def mark_seen(self, command):
        """Stamp the first admin view. Losing a race to another write is not an error."""
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.mark_seen_by_admin():
            return False
        try:
            repo.save_guarded(order)
        except ConflictError:
            logger.info("Seen stamp skipped, order changed concurrently", order_id=str(order.id))
            return False
        return True
