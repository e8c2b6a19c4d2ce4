"""Pause/skip request events."""

from protean.fields import Date, DateTime, Identifier, String

from kitchen.domain import kitchen


@kitchen.event(part_of="PauseSkipRequest")
class PauseRequested:
    __version__ = 1

    request_id = Identifier(required=True)
    user_id = Identifier(required=True)
    kind = String(required=True)
    subscription_id = String(required=True)
    pause_start_date = Date(required=True)
    pause_end_date = Date(required=True)
    requested_at = DateTime(required=True)


@kitchen.event(part_of="PauseSkipRequest")
class SkipRequested:
    __version__ = 1

    request_id = Identifier(required=True)
    user_id = Identifier(required=True)
    delivery_id = Identifier(required=True)
    skip_date = Date(required=True)
    requested_at = DateTime(required=True)


@kitchen.event(part_of="PauseSkipRequest")
class PauseSkipRequestDecided:
    """An admin approved or declined a pending request."""

    __version__ = 1

    request_id = Identifier(required=True)
    request_type = String(required=True)
    status = String(required=True)
    decided_by = String(required=True)
    decided_at = DateTime(required=True)


@kitchen.event(part_of="PauseSkipRequest")
class PauseSkipRequestWithdrawn:
    __version__ = 1

    request_id = Identifier(required=True)
    user_id = Identifier(required=True)
    withdrawn_at = DateTime(required=True)
