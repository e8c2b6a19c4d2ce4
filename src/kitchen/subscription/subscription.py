"""Subscription aggregate — a customMeal or addon subscription owned by a user.

Subscriptions are registered by the catalog/checkout side. The kitchen only
writes pause windows onto them (approved pause requests) and flips their
status when a window starts or ends.

State Machine:
    active ⇄ paused
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean.fields import Date, DateTime, Identifier, String, Text

from kitchen.domain import kitchen
from kitchen.subscription.events import (
    SubscriptionPaused,
    SubscriptionPauseScheduled,
    SubscriptionRegistered,
    SubscriptionResumed,
)


class SubscriptionKind(Enum):
    CUSTOM_MEAL = "customMeal"
    ADDON = "addon"


class Frequency(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    TRIAL = "trial"


class SubscriptionStatus(Enum):
    ACTIVE = "active"
    PAUSED = "paused"


@kitchen.aggregate
class Subscription:
    user_id = Identifier(required=True)
    kind = String(required=True, choices=SubscriptionKind)
    frequency = String(required=True, choices=Frequency)
    start_date = Date()
    status = String(choices=SubscriptionStatus, default=SubscriptionStatus.ACTIVE.value)

    pause_start_date = Date()
    pause_end_date = Date()
    pause_reason = Text()
    pause_request_id = Identifier()

    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, user_id, kind, frequency, start_date=None, subscription_id=None):
        now = datetime.now(UTC)
        values = dict(
            user_id=user_id,
            kind=kind,
            frequency=frequency,
            start_date=start_date,
            status=SubscriptionStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        if subscription_id:
            values["id"] = subscription_id
        subscription = cls(**values)
        subscription.raise_(
            SubscriptionRegistered(
                subscription_id=str(subscription.id),
                user_id=str(user_id),
                kind=kind,
                frequency=frequency,
                registered_at=now,
            )
        )
        return subscription

    @property
    def is_paused(self) -> bool:
        return self.status == SubscriptionStatus.PAUSED.value

    def window_covers(self, day: date) -> bool:
        if not self.pause_start_date or not self.pause_end_date:
            return False
        return self.pause_start_date <= day <= self.pause_end_date

    def apply_pause(self, request_id, start: date, end: date, reason: str | None, today: date) -> None:
        """Record an approved pause window, pausing right away if it has already begun."""
        now = datetime.now(UTC)
        self.pause_start_date = start
        self.pause_end_date = end
        self.pause_reason = reason
        self.pause_request_id = request_id
        self.updated_at = now
        self.raise_(
            SubscriptionPauseScheduled(
                subscription_id=str(self.id),
                pause_request_id=str(request_id) if request_id else None,
                pause_start_date=start,
                pause_end_date=end,
                scheduled_at=now,
            )
        )
        if self.window_covers(today) and not self.is_paused:
            self._pause(now)

    def reevaluate(self, today: date) -> bool:
        """Bring status in line with the pause window. Returns True when something changed."""
        if self.pause_end_date and self.pause_end_date < today:
            self._resume(datetime.now(UTC))
            return True
        if self.window_covers(today) and not self.is_paused:
            self._pause(datetime.now(UTC))
            return True
        return False

    def _pause(self, now: datetime) -> None:
        self.status = SubscriptionStatus.PAUSED.value
        self.updated_at = now
        self.raise_(
            SubscriptionPaused(
                subscription_id=str(self.id),
                pause_end_date=self.pause_end_date,
                paused_at=now,
            )
        )

    def _resume(self, now: datetime) -> None:
        self.status = SubscriptionStatus.ACTIVE.value
        self.pause_start_date = None
        self.pause_end_date = None
        self.pause_reason = None
        self.pause_request_id = None
        self.updated_at = now
        self.raise_(SubscriptionResumed(subscription_id=str(self.id), resumed_at=now))
