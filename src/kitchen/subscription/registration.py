"""Subscription registration — the catalog/checkout side announces a new subscription."""

import structlog
from protean import handle
from protean.fields import Date, Identifier, String
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.subscription.subscription import Subscription

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Subscription")
class RegisterSubscription:
    subscription_id = Identifier()
    user_id = Identifier(required=True)
    kind = String(required=True, max_length=20)
    frequency = String(required=True, max_length=20)
    start_date = Date()


@kitchen.command_handler(part_of=Subscription)
class RegisterSubscriptionHandler:
    @handle(RegisterSubscription)
    def register(self, command):
        subscription = Subscription.register(
            user_id=command.user_id,
            kind=command.kind,
            frequency=command.frequency,
            start_date=command.start_date,
            subscription_id=command.subscription_id,
        )
        current_domain.repository_for(Subscription).add(subscription)
        logger.info(
            "Subscription registered",
            subscription_id=str(subscription.id),
            user_id=str(command.user_id),
            kind=command.kind,
        )
        return str(subscription.id)
