"""Subscription domain events."""

from protean.fields import Date, DateTime, Identifier, String

from kitchen.domain import kitchen


@kitchen.event(part_of="Subscription")
class SubscriptionRegistered:
    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    kind = String(required=True)
    frequency = String(required=True)
    registered_at = DateTime(required=True)


@kitchen.event(part_of="Subscription")
class SubscriptionPauseScheduled:
    """An approved pause window was written onto the subscription."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    pause_request_id = Identifier()
    pause_start_date = Date(required=True)
    pause_end_date = Date(required=True)
    scheduled_at = DateTime(required=True)


@kitchen.event(part_of="Subscription")
class SubscriptionPaused:
    __version__ = 1

    subscription_id = Identifier(required=True)
    pause_end_date = Date()
    paused_at = DateTime(required=True)


@kitchen.event(part_of="Subscription")
class SubscriptionResumed:
    __version__ = 1

    subscription_id = Identifier(required=True)
    resumed_at = DateTime(required=True)
