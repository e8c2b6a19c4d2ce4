"""Admin decision on pause/skip requests — command, handler and side effects.

An approved PAUSE writes its window onto the subscription (mealPack lines
have no subscription record, so only the decision is stored). An approved
SKIP moves the delivery from PENDING to SKIPPED if it is still PENDING.
Declines touch nothing but the request.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from kitchen.clock import get_clock
from kitchen.delivery.delivery import Delivery, DeliveryStatus
from kitchen.domain import kitchen
from kitchen.errors import AlreadyProcessedError
from kitchen.order.order import Actor
from kitchen.pause_skip.request import PauseSkipRequest, RequestKind, RequestStatus
from kitchen.subscription.subscription import Subscription

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="PauseSkipRequest")
class DecidePauseSkipRequest:
    request_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    admin_id = String(required=True, max_length=100)
    admin_note = Text()


def apply_pause(request: PauseSkipRequest) -> bool:
    """Write the approved window onto the subscription. Returns False for mealPack."""
    if request.kind == RequestKind.MEAL_PACK.value:
        return False

    repo = current_domain.repository_for(Subscription)
    subscription = repo.get(request.subscription_id)
    subscription.apply_pause(
        request_id=request.id,
        start=request.pause_start_date,
        end=request.pause_end_date,
        reason=request.reason,
        today=get_clock().today(),
    )
    repo.add(subscription)
    return True


def apply_skip(request: PauseSkipRequest) -> bool:
    """Skip the delivery when it is still PENDING. Returns False when it moved on."""
    repo = current_domain.repository_for(Delivery)
    delivery = repo.get(request.delivery_id)
    if delivery.status != DeliveryStatus.PENDING.value:
        return False

    delivery.transition_to(DeliveryStatus.SKIPPED.value, Actor.ADMIN.value)
    repo.save_guarded(delivery)
    return True


@kitchen.command_handler(part_of=PauseSkipRequest)
class PauseSkipDecisionHandler:
    @handle(DecidePauseSkipRequest)
    def decide(self, command):
        repo = current_domain.repository_for(PauseSkipRequest)
        request = repo.get(command.request_id)
        try:
            request.decide(command.status, command.admin_id, (command.admin_note or "").strip() or None)
        except AlreadyProcessedError:
            logger.info("Pause/skip request already decided", request_id=str(request.id), status=request.status)
            return {"already_processed": True, "status": request.status, "applied": False}

        applied = False
        if request.status == RequestStatus.APPROVED.value:
            applied = apply_pause(request) if request.is_pause else apply_skip(request)
        repo.add(request)

        logger.info(
            "Pause/skip request decided",
            request_id=str(request.id),
            request_type=request.request_type,
            status=request.status,
            admin_id=command.admin_id,
            applied=applied,
        )
        return {"already_processed": False, "status": request.status, "applied": applied}
