"""Customer pause and skip submissions — commands and handler.

Submissions only record a PENDING request. Nothing else changes until an
admin decides.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from kitchen.clock import get_clock
from kitchen.delivery.delivery import Delivery
from kitchen.domain import kitchen
from kitchen.order.order import Order
from kitchen.pause_skip.policy import PauseSkipPolicy
from kitchen.pause_skip.request import PauseSkipRequest, RequestKind
from kitchen.settings import get_settings
from kitchen.shared.dates import parse_iso_date
from kitchen.subscription.subscription import Subscription

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="PauseSkipRequest")
class RequestPause:
    user_id = Identifier(required=True)
    kind = String(required=True, max_length=20)
    subscription_id = String(required=True, max_length=100)
    pause_start_date = String(required=True, max_length=10)
    pause_end_date = String(required=True, max_length=10)
    reason = Text()


@kitchen.command(part_of="PauseSkipRequest")
class RequestSkip:
    user_id = Identifier(required=True)
    delivery_id = Identifier(required=True)
    reason = Text()


def _assert_owns_subscription(user_id, kind: str, subscription_id: str) -> None:
    if kind == RequestKind.MEAL_PACK.value:
        if current_domain.repository_for(Order).find_recurring_line(user_id, subscription_id) is None:
            raise ObjectNotFoundError(f"Subscription {subscription_id} not found")
        return

    try:
        subscription = current_domain.repository_for(Subscription).get(subscription_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError(f"Subscription {subscription_id} not found") from None
    if str(subscription.user_id) != str(user_id) or subscription.kind != kind:
        raise ObjectNotFoundError(f"Subscription {subscription_id} not found")


@kitchen.command_handler(part_of=PauseSkipRequest)
class PauseSkipSubmissionHandler:
    @handle(RequestPause)
    def request_pause(self, command):
        kind = (command.kind or "").strip()
        if kind not in {k.value for k in (RequestKind.CUSTOM_MEAL, RequestKind.ADDON, RequestKind.MEAL_PACK)}:
            raise ValidationError({"kind": ["Invalid kind"]})
        subscription_id = (command.subscription_id or "").strip()
        if not subscription_id:
            raise ValidationError({"subscription_id": ["subscription_id is required"]})

        start = parse_iso_date(command.pause_start_date, "pause_start_date")
        end = parse_iso_date(command.pause_end_date, "pause_end_date")
        PauseSkipPolicy(get_settings(), get_clock()).check_pause_window(start, end)
        _assert_owns_subscription(command.user_id, kind, subscription_id)

        request = PauseSkipRequest.pause(
            user_id=command.user_id,
            kind=kind,
            subscription_id=subscription_id,
            start=start,
            end=end,
            reason=(command.reason or "").strip() or None,
        )
        current_domain.repository_for(PauseSkipRequest).add(request)
        logger.info(
            "Pause requested",
            request_id=str(request.id),
            user_id=str(command.user_id),
            subscription_id=subscription_id,
            pause_start_date=start.isoformat(),
            pause_end_date=end.isoformat(),
        )
        return str(request.id)

    @handle(RequestSkip)
    def request_skip(self, command):
        try:
            delivery = current_domain.repository_for(Delivery).get(command.delivery_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError("Delivery not found") from None
        if str(delivery.user_id) != str(command.user_id):
            raise ObjectNotFoundError("Delivery not found")

        skip_date = PauseSkipPolicy(get_settings(), get_clock()).check_skip(delivery)

        requests = current_domain.repository_for(PauseSkipRequest)
        if requests.pending_skip_for(delivery.id):
            raise ValidationError({"delivery_id": ["A skip request is already pending for this delivery"]})

        request = PauseSkipRequest.skip(
            user_id=command.user_id,
            delivery_id=delivery.id,
            skip_date=skip_date,
            reason=(command.reason or "").strip() or None,
        )
        requests.add(request)
        logger.info(
            "Skip requested",
            request_id=str(request.id),
            user_id=str(command.user_id),
            delivery_id=str(delivery.id),
        )
        return str(request.id)
